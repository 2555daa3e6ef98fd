"""Search-time analyzers for json fields.

Json field values are indexed untouched, so only query text is ever
analyzed. The keyword analyzer keeps the whole query as one term. The
whitespace analyzer splits it on whitespace into independent exact terms.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...


class KeywordAnalyzer:
    """Analyzer that treats the entire input as a single token.

    Empty input still yields one empty token, since ``""`` is a valid leaf value.
    """

    def __call__(self, text: str) -> list[Token]:
        return [Token(text=text, position=0, start_char=0, end_char=len(text))]


class WhitespaceTokenizer:
    """Splits on runs of whitespace without altering the pieces."""

    _PATTERN = re.compile(r"\S+")

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self._PATTERN.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class WhitespaceAnalyzer:
    """Analyzer producing one exact token per whitespace-separated word."""

    def __init__(self) -> None:
        self.tokenizer = WhitespaceTokenizer()

    def __call__(self, text: str) -> list[Token]:
        return list(self.tokenizer(text))


KEYWORD = "keyword"
WHITESPACE = "whitespace"

_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    KEYWORD: lambda: KeywordAnalyzer(),
    WHITESPACE: lambda: WhitespaceAnalyzer(),
}


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the keyword analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES[KEYWORD]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {sorted(_ANALYZER_FACTORIES)}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()
