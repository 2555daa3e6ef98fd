"""Pull-based token streams over JSON values.

The flattening parser only ever talks to a :class:`TokenStream`: a cursor that
is advanced one token at a time and exposes the text of the current scalar.
Two concrete streams are provided:

- :class:`IjsonTokenStream` incrementally parses raw JSON bytes (or a binary
  file) with ijson, so large documents never need to be decoded up front.
- :class:`ValueTokenStream` walks a value that was already decoded (for
  example with orjson) and replays it as the same token sequence.

Both derive from :class:`EventTokenStream`, which can also be fed a
hand-built event sequence.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from enum import Enum
import io
from typing import IO, Any, Protocol

import ijson

from json_field_mapper.mapper.errors import MapperParsingError


class JsonToken(str, Enum):
    """Kinds of tokens reported by a token stream."""

    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    FIELD_NAME = "field_name"
    VALUE_STRING = "value_string"
    VALUE_NUMBER = "value_number"
    VALUE_BOOLEAN = "value_boolean"
    VALUE_NULL = "value_null"

    @property
    def is_value(self) -> bool:
        """True for non-null scalar tokens."""
        return self in _SCALAR_TOKENS


_SCALAR_TOKENS = frozenset({JsonToken.VALUE_STRING, JsonToken.VALUE_NUMBER, JsonToken.VALUE_BOOLEAN})

Event = tuple[JsonToken, Any]


class TokenStream(Protocol):
    """Protocol implemented by token streams consumed by the parser."""

    @property
    def current_token(self) -> JsonToken | None:  # pragma: no cover - interface definition
        ...

    @property
    def location(self) -> str:  # pragma: no cover - interface definition
        ...

    def next_token(self) -> JsonToken | None:  # pragma: no cover - interface definition
        ...

    def text(self) -> str:  # pragma: no cover - interface definition
        ...

    def skip_children(self) -> None:  # pragma: no cover - interface definition
        ...


def scalar_text(token: JsonToken, value: Any) -> str:
    """Render a scalar token's value the way it reads in JSON text."""
    if token is JsonToken.VALUE_BOOLEAN:
        return "true" if value else "false"
    if token is JsonToken.VALUE_NUMBER:
        if isinstance(value, float):
            return repr(value)
        return str(value)
    return str(value)


class EventTokenStream:
    """Cursor over an iterable of ``(token, value)`` events.

    ``value`` is the key for ``FIELD_NAME`` tokens, the scalar for value
    tokens and ``None`` otherwise. The cursor starts before the first token;
    call :meth:`next_token` to position it.
    """

    def __init__(self, events: Iterable[Event]) -> None:
        self._events: Iterator[Event] = iter(events)
        self._token: JsonToken | None = None
        self._value: Any = None
        self._offset = -1

    @property
    def current_token(self) -> JsonToken | None:
        return self._token

    @property
    def location(self) -> str:
        return f"token #{self._offset}"

    def next_token(self) -> JsonToken | None:
        """Advance to the next token, returning ``None`` once exhausted."""
        try:
            token, value = next(self._events)
        except StopIteration:
            self._token = None
            self._value = None
            return None
        self._offset += 1
        self._token = token
        self._value = value
        return token

    def text(self) -> str:
        """Return the text of the current field name or scalar token."""
        if self._token is JsonToken.FIELD_NAME:
            return str(self._value)
        if self._token is not None and self._token.is_value:
            return scalar_text(self._token, self._value)
        msg = f"Current token {self._token!r} has no text"
        raise MapperParsingError(msg, self.location)

    def skip_children(self) -> None:
        """Advance to the end token matching the current start token."""
        if self._token not in (JsonToken.START_OBJECT, JsonToken.START_ARRAY):
            return
        open_containers = 1
        while open_containers > 0:
            token = self.next_token()
            if token is None:
                raise MapperParsingError("Unexpected end of input while skipping", self.location)
            if token in (JsonToken.START_OBJECT, JsonToken.START_ARRAY):
                open_containers += 1
            elif token in (JsonToken.END_OBJECT, JsonToken.END_ARRAY):
                open_containers -= 1


_IJSON_EVENTS: dict[str, JsonToken] = {
    "start_map": JsonToken.START_OBJECT,
    "end_map": JsonToken.END_OBJECT,
    "start_array": JsonToken.START_ARRAY,
    "end_array": JsonToken.END_ARRAY,
    "map_key": JsonToken.FIELD_NAME,
    "string": JsonToken.VALUE_STRING,
    "integer": JsonToken.VALUE_NUMBER,
    "double": JsonToken.VALUE_NUMBER,
    "number": JsonToken.VALUE_NUMBER,
    "boolean": JsonToken.VALUE_BOOLEAN,
    "null": JsonToken.VALUE_NULL,
}


class IjsonTokenStream(EventTokenStream):
    """Token stream backed by ijson's incremental parser."""

    def __init__(self, source: IO[bytes]) -> None:
        super().__init__(self._translate(ijson.parse(source)))

    @classmethod
    def from_bytes(cls, data: bytes | str) -> IjsonTokenStream:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(io.BytesIO(data))

    def next_token(self) -> JsonToken | None:
        try:
            return super().next_token()
        except ijson.JSONError as exc:
            raise MapperParsingError(f"Malformed JSON: {exc}", self.location) from exc

    @staticmethod
    def _translate(events: Iterable[tuple[str, str, Any]]) -> Iterator[Event]:
        for _prefix, event, value in events:
            yield _IJSON_EVENTS[event], value


class ValueTokenStream(EventTokenStream):
    """Token stream replaying an already-decoded JSON value."""

    def __init__(self, value: Any) -> None:
        super().__init__(_walk(value))


def _walk(value: Any) -> Iterator[Event]:
    if isinstance(value, Mapping):
        yield JsonToken.START_OBJECT, None
        for key, child in value.items():
            yield JsonToken.FIELD_NAME, key
            yield from _walk(child)
        yield JsonToken.END_OBJECT, None
    elif isinstance(value, (list, tuple)):
        yield JsonToken.START_ARRAY, None
        for child in value:
            yield from _walk(child)
        yield JsonToken.END_ARRAY, None
    elif value is None:
        yield JsonToken.VALUE_NULL, None
    elif isinstance(value, bool):
        yield JsonToken.VALUE_BOOLEAN, value
    elif isinstance(value, (int, float, Decimal)):
        yield JsonToken.VALUE_NUMBER, value
    elif isinstance(value, str):
        yield JsonToken.VALUE_STRING, value
    else:
        msg = f"Unsupported JSON value of type {type(value).__name__}"
        raise MapperParsingError(msg)
