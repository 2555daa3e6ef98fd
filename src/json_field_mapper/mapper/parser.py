"""Flattening parser for json fields.

Walks one JSON object from a :class:`~json_field_mapper.mapper.tokens.TokenStream`
and reports every scalar leaf together with the object keys leading to it.
Nesting is tracked with an explicit depth counter rather than recursion, so
deeply nested input never grows the call stack.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from json_field_mapper.mapper.emitter import SEPARATOR, IndexableField, TokenEmitter
from json_field_mapper.mapper.errors import MapperParsingError, ReservedCharacterError
from json_field_mapper.mapper.tokens import JsonToken, TokenStream


@dataclass(frozen=True)
class Leaf:
    """A scalar (or explicit null) found while flattening."""

    path: tuple[str, ...]
    value: str | None


class JsonFieldParser:
    """Produces indexable fields for each leaf of a JSON object."""

    def __init__(self, emitter: TokenEmitter, *, max_depth: int | None = None) -> None:
        self.emitter = emitter
        self.max_depth = max_depth

    def iter_leaves(self, stream: TokenStream) -> Iterator[Leaf]:
        """Yield leaves in document order.

        The stream must be positioned on the object's start token. When the
        iterator is exhausted the stream sits on the matching end token, so
        the caller's next ``next_token()`` returns whatever follows the object.
        """
        if stream.current_token is not JsonToken.START_OBJECT:
            msg = f"Expected {JsonToken.START_OBJECT.value} but found {_describe(stream.current_token)}"
            raise MapperParsingError(msg, stream.location)

        depth = 1
        path: list[str] = []
        # current key of each open object, innermost last
        keys: list[str | None] = [None]

        while depth > 0:
            token = stream.next_token()
            if token is None:
                raise MapperParsingError("Unexpected end of input inside json field", stream.location)

            if token is JsonToken.FIELD_NAME:
                key = stream.text()
                if SEPARATOR in key:
                    msg = f"Key {key!r} contains the reserved separator \\0"
                    raise ReservedCharacterError(msg, stream.location)
                keys[-1] = key
            elif token is JsonToken.START_OBJECT:
                depth += 1
                if self.max_depth is not None and depth > self.max_depth:
                    msg = f"Json field exceeds the maximum nesting depth of {self.max_depth}"
                    raise MapperParsingError(msg, stream.location)
                path.append(_require_key(keys[-1], stream))
                keys.append(None)
            elif token is JsonToken.END_OBJECT:
                depth -= 1
                keys.pop()
                if depth > 0:
                    path.pop()
            elif token.is_value:
                yield Leaf(_leaf_path(path, keys[-1], stream), stream.text())
            elif token is JsonToken.VALUE_NULL:
                yield Leaf(_leaf_path(path, keys[-1], stream), None)
            # arrays do not contribute to the key path

    def parse(self, stream: TokenStream) -> list[IndexableField]:
        """Flatten one object into fields; raises before returning anything on bad input."""
        fields: list[IndexableField] = []
        for leaf in self.iter_leaves(stream):
            self.emitter.emit(leaf.path, leaf.value, fields)
        return fields


def _require_key(key: str | None, stream: TokenStream) -> str:
    if key is None:
        raise MapperParsingError("Value inside an object is not preceded by a field name", stream.location)
    return key


def _leaf_path(path: list[str], key: str | None, stream: TokenStream) -> tuple[str, ...]:
    return (*path, _require_key(key, stream))


def _describe(token: JsonToken | None) -> str:
    return "end of input" if token is None else token.value
