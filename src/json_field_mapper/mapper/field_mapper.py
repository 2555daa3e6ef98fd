"""Mapper that flattens a JSON object into a single field.

This is a useful alternative to an object mapping when the object has a
large or unknown set of keys. Every leaf value is converted to text and
indexed as an exact term twice: once bare under the field name, and once
prefixed with its dotted key path under ``<name>._keyed``.

Given a field ``json_field`` holding::

    {"key1": "some value", "key2": {"key3": true}}

the mapper produces ``json_field`` terms ``"some value"`` and ``"true"``, and
``json_field._keyed`` terms ``"key1\\0some value"`` and ``"key2.key3\\0true"``.
``\\0`` is reserved and may not appear in object keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any

from pydantic import ValidationError

from json_field_mapper.config import get_settings
from json_field_mapper.mapper.emitter import IGNORE_ABOVE_UNBOUNDED, IndexableField, TokenEmitter
from json_field_mapper.mapper.errors import (
    FrozenFieldTypeError,
    MapperParsingError,
    MappingConfigError,
    MergeConflictError,
)
from json_field_mapper.mapper.field_type import CONTENT_TYPE, IndexOptions, JsonFieldType
from json_field_mapper.mapper.parser import JsonFieldParser
from json_field_mapper.mapper.queries import FIELD_NAMES_FIELD
from json_field_mapper.mapper.tokens import IjsonTokenStream, JsonToken, TokenStream, ValueTokenStream
from json_field_mapper.mapping_config import JsonFieldMappingConfig
from json_field_mapper.observability.metrics import PARSE_ERRORS
from json_field_mapper.observability.tracing import create_span


logger = logging.getLogger(__name__)


@dataclass
class ParseContext:
    """Per-document state handed to the mapper by the indexing pipeline."""

    stream: TokenStream
    fields: list[IndexableField] = field(default_factory=list)


class JsonFieldMapperBuilder:
    """Mutable draft of a json field mapping.

    Every setter validates eagerly. :meth:`build` finalizes the draft and
    any further mutation raises :class:`FrozenFieldTypeError`.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._index_options = IndexOptions.DOCS
        self._ignore_above = IGNORE_ABOVE_UNBOUNDED
        self._null_value: str | None = None
        self._split_queries_on_whitespace = False
        self._built = False

    def _check_if_frozen(self) -> None:
        if self._built:
            msg = f"Mapping for [{self.name}] is frozen and cannot be modified"
            raise FrozenFieldTypeError(msg)

    def index(self, index: bool) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        self._index_options = IndexOptions.DOCS if index else IndexOptions.NONE
        return self

    def index_options(self, index_options: IndexOptions | str) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        options = IndexOptions(index_options)
        if options.exceeds(IndexOptions.FREQS):
            msg = f"The [{CONTENT_TYPE}] field does not support positions, got [index_options]={options.value}"
            raise MappingConfigError(msg)
        self._index_options = options
        return self

    def ignore_above(self, ignore_above: int) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        if ignore_above < 0:
            msg = f"[ignore_above] must be positive, got {ignore_above}"
            raise MappingConfigError(msg)
        self._ignore_above = ignore_above
        return self

    def null_value(self, null_value: str | None) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        if null_value is None:
            raise MappingConfigError("Property [null_value] cannot be null.")
        self._null_value = null_value
        return self

    def split_queries_on_whitespace(self, split: bool) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        self._split_queries_on_whitespace = split
        return self

    def add_multi_field(self, _builder: Any) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        raise MappingConfigError(f"[fields] is not supported for [{CONTENT_TYPE}] fields.")

    def copy_to(self, _targets: Any) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        raise MappingConfigError(f"[copy_to] is not supported for [{CONTENT_TYPE}] fields.")

    def store(self, _store: bool) -> JsonFieldMapperBuilder:
        self._check_if_frozen()
        raise MappingConfigError(f"[store] is not currently supported for [{CONTENT_TYPE}] fields.")

    def build(self, *, max_depth: int | None = None) -> JsonFieldMapper:
        """Finalize the draft into an immutable mapper."""
        self._check_if_frozen()
        self._built = True
        field_type = JsonFieldType(
            name=self.name,
            null_value=self._null_value,
            split_queries_on_whitespace=self._split_queries_on_whitespace,
            index_options=self._index_options,
        )
        if max_depth is None:
            max_depth = get_settings().max_depth
        logger.debug(
            "Built json field mapper [%s] (ignore_above=%d, search_analyzer=%s)",
            self.name,
            self._ignore_above,
            field_type.search_analyzer,
        )
        return JsonFieldMapper(field_type=field_type, ignore_above=self._ignore_above, max_depth=max_depth)


def parse_mapping(name: str, node: Mapping[str, Any]) -> JsonFieldMapperBuilder:
    """Turn a flat mapping definition into a builder, validating every setting."""
    try:
        config = JsonFieldMappingConfig.model_validate(dict(node))
    except ValidationError as exc:
        msg = f"Invalid mapping for [{name}]: {exc}"
        raise MappingConfigError(msg) from exc

    builder = JsonFieldMapperBuilder(name)
    explicit = config.model_fields_set
    if "store" in explicit:
        builder.store(bool(config.store))
    if "multi_fields" in explicit:
        builder.add_multi_field(config.multi_fields)
    if "copy_to" in explicit:
        builder.copy_to(config.copy_to)
    if "index_options" in explicit:
        builder.index_options(config.index_options)
    if not config.index:
        builder.index(False)
    if "ignore_above" in explicit:
        builder.ignore_above(config.ignore_above)
    if "null_value" in explicit:
        builder.null_value(config.null_value)
    if "split_queries_on_whitespace" in explicit:
        builder.split_queries_on_whitespace(config.split_queries_on_whitespace)
    return builder


@dataclass(frozen=True)
class JsonFieldMapper:
    """Immutable json field mapper shared by all documents of a mapping."""

    field_type: JsonFieldType
    ignore_above: int = IGNORE_ABOVE_UNBOUNDED
    max_depth: int | None = None
    parser: JsonFieldParser = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        emitter = TokenEmitter(
            self.field_type.name,
            ignore_above=self.ignore_above,
            null_value=self.field_type.null_value,
        )
        object.__setattr__(self, "parser", JsonFieldParser(emitter, max_depth=self.max_depth))

    @property
    def name(self) -> str:
        return self.field_type.name

    @property
    def content_type(self) -> str:
        return self.field_type.content_type

    def parse(self, context: ParseContext) -> int:
        """Index the json value the context's stream is positioned on.

        Returns the number of fields appended to ``context.fields``.
        """
        stream = context.stream
        if stream.current_token is JsonToken.VALUE_NULL:
            return 0
        if not self.field_type.indexed:
            stream.skip_children()
            return 0

        with create_span("json_field.parse", attributes={"json_field.name": self.name}) as span:
            try:
                fields = self.parser.parse(stream)
            except MapperParsingError:
                PARSE_ERRORS.labels(field=self.name).inc()
                logger.debug("Failed to parse json field [%s]", self.name, exc_info=True)
                raise
            span.set_attribute("json_field.tokens", len(fields))

        if not fields:
            return 0
        context.fields.extend(fields)
        context.fields.append(IndexableField(FIELD_NAMES_FIELD, self.name.encode("utf-8")))
        return len(fields) + 1

    def parse_value(self, value: Any) -> list[IndexableField]:
        """Index an already-decoded JSON value."""
        return self._parse_stream(ValueTokenStream(value))

    def parse_bytes(self, data: bytes | str) -> list[IndexableField]:
        """Index raw JSON text."""
        return self._parse_stream(IjsonTokenStream.from_bytes(data))

    def _parse_stream(self, stream: TokenStream) -> list[IndexableField]:
        stream.next_token()
        context = ParseContext(stream)
        self.parse(context)
        return context.fields

    def merge(self, other: object) -> JsonFieldMapper:
        """Return a mapper carrying ``other``'s settings; the newer mapping wins."""
        if not isinstance(other, JsonFieldMapper):
            other_type = getattr(other, "content_type", type(other).__name__)
            msg = f"mapper [{self.name}] cannot be changed from type [{self.content_type}] to [{other_type}]"
            raise MergeConflictError(msg)
        if other.name != self.name:
            msg = f"Cannot merge mapper [{other.name}] into [{self.name}]"
            raise MergeConflictError(msg)
        logger.info(
            "Merging json field mapper [%s] (ignore_above %d -> %d)",
            self.name,
            self.ignore_above,
            other.ignore_above,
        )
        return JsonFieldMapper(field_type=other.field_type, ignore_above=other.ignore_above, max_depth=other.max_depth)
