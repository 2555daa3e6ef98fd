"""Query values produced for json fields."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


FIELD_NAMES_FIELD = "_field_names"


class QueryKind(str, Enum):
    """Kinds of queries a field may be asked to build."""

    EXISTS = "exists"
    TERM = "term"
    FUZZY = "fuzzy"
    REGEXP = "regexp"
    WILDCARD = "wildcard"
    PREFIX = "prefix"


@dataclass(frozen=True)
class TermQuery:
    """Exact match of one term in one indexed field."""

    field: str
    value: bytes

    @property
    def text(self) -> str:
        return self.value.decode("utf-8")
