"""Capability descriptor for json fields.

A :class:`JsonFieldType` describes how one mapped json field is indexed and
which queries may run against it. Instances are immutable; they are produced
by :class:`~json_field_mapper.mapper.field_mapper.JsonFieldMapperBuilder`
and shared by every document indexed through the mapper.

Query support is expressed as a table from :class:`QueryKind` to a builder.
Kinds mapped to ``None`` are rejected outright:

- exists: term lookup in ``_field_names`` for the field's name
- term: exact match against the root or keyed field
- fuzzy, regexp, wildcard, prefix: always raise ``UnsupportedQueryError``
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from json_field_mapper.mapper.analyzers import KEYWORD, WHITESPACE, get_analyzer
from json_field_mapper.mapper.emitter import SEPARATOR, keyed_field_name, keyed_token
from json_field_mapper.mapper.errors import UnsupportedQueryError
from json_field_mapper.mapper.queries import FIELD_NAMES_FIELD, QueryKind, TermQuery


CONTENT_TYPE = "json"


class IndexOptions(str, Enum):
    """How much information is recorded per indexed term, least to most."""

    NONE = "none"
    DOCS = "docs"
    FREQS = "freqs"
    POSITIONS = "positions"
    OFFSETS = "offsets"

    @property
    def rank(self) -> int:
        return _INDEX_OPTIONS_ORDER.index(self)

    def exceeds(self, other: IndexOptions) -> bool:
        return self.rank > other.rank


_INDEX_OPTIONS_ORDER = list(IndexOptions)


@dataclass(frozen=True)
class JsonFieldType:
    """Immutable description of a json field."""

    content_type: ClassVar[str] = CONTENT_TYPE

    name: str
    null_value: str | None = None
    split_queries_on_whitespace: bool = False
    index_options: IndexOptions = IndexOptions.DOCS
    tokenized: bool = False
    omit_norms: bool = True
    stored: bool = False

    @property
    def keyed_name(self) -> str:
        return keyed_field_name(self.name)

    @property
    def indexed(self) -> bool:
        return self.index_options is not IndexOptions.NONE

    @property
    def search_analyzer(self) -> str:
        return WHITESPACE if self.split_queries_on_whitespace else KEYWORD

    def build_query(self, kind: QueryKind, value: str | None = None) -> TermQuery:
        """Build a query of the given kind or reject it."""
        builder = _QUERY_BUILDERS[QueryKind(kind)]
        if builder is None:
            msg = f"[{QueryKind(kind).value}] queries are not currently supported on [{self.content_type}] fields."
            raise UnsupportedQueryError(msg)
        return builder(self, value)

    def exists_query(self) -> TermQuery:
        return TermQuery(FIELD_NAMES_FIELD, self.name.encode("utf-8"))

    def term_query(self, value: str) -> TermQuery:
        """Exact match; values embedding the key separator target the keyed field."""
        field = self.keyed_name if SEPARATOR in value else self.name
        return TermQuery(field, value.encode("utf-8"))

    def keyed_term_query(self, path: Sequence[str], value: str) -> TermQuery:
        return TermQuery(self.keyed_name, keyed_token(path, value).encode("utf-8"))

    def search_terms(self, text: str) -> list[str]:
        return [token.text for token in get_analyzer(self.search_analyzer)(text)]

    def term_queries(self, text: str) -> list[TermQuery]:
        """One term query per analyzed term; combining them is up to the caller."""
        return [self.term_query(term) for term in self.search_terms(text)]

    def fuzzy_query(self, value: str) -> TermQuery:
        return self.build_query(QueryKind.FUZZY, value)

    def regexp_query(self, value: str) -> TermQuery:
        return self.build_query(QueryKind.REGEXP, value)

    def wildcard_query(self, value: str) -> TermQuery:
        return self.build_query(QueryKind.WILDCARD, value)

    def prefix_query(self, value: str) -> TermQuery:
        return self.build_query(QueryKind.PREFIX, value)

    def value_for_display(self, value: bytes | None) -> str | None:
        if value is None:
            return None
        return bytes(value).decode("utf-8")


def _build_term(field_type: JsonFieldType, value: str | None) -> TermQuery:
    if value is None:
        raise ValueError("[term] queries require a value")
    return field_type.term_query(value)


_QUERY_BUILDERS: dict[QueryKind, Callable[[JsonFieldType, str | None], TermQuery] | None] = {
    QueryKind.EXISTS: lambda field_type, _value: field_type.exists_query(),
    QueryKind.TERM: _build_term,
    QueryKind.FUZZY: None,
    QueryKind.REGEXP: None,
    QueryKind.WILDCARD: None,
    QueryKind.PREFIX: None,
}
