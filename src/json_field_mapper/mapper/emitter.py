"""Turn flattened leaves into indexable fields.

Every admitted leaf yields a *root* field carrying the bare value and a
*keyed* field carrying ``"dotted.key.path" + SEPARATOR + value``. Both are
indexed as exact terms.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from json_field_mapper.observability.metrics import LEAVES_TOTAL


logger = logging.getLogger(__name__)

SEPARATOR = "\0"
KEYED_FIELD_SUFFIX = "._keyed"
IGNORE_ABOVE_UNBOUNDED = 2**31 - 1


@dataclass(frozen=True)
class IndexableField:
    """An exact term destined for the index."""

    name: str
    value: bytes

    @property
    def text(self) -> str:
        return self.value.decode("utf-8")


def keyed_field_name(field_name: str) -> str:
    return field_name + KEYED_FIELD_SUFFIX


def keyed_token(path: Sequence[str], value: str) -> str:
    """Join a key path and a value with the reserved separator."""
    return ".".join(path) + SEPARATOR + value


def split_keyed_token(token: str) -> tuple[str, str]:
    """Split a keyed token into its dotted key path and its value."""
    path, sep, value = token.partition(SEPARATOR)
    if not sep:
        msg = f"Token {token!r} does not contain the key separator"
        raise ValueError(msg)
    return path, value


class TokenEmitter:
    """Applies admission control and null substitution to leaves."""

    def __init__(
        self,
        field_name: str,
        *,
        ignore_above: int = IGNORE_ABOVE_UNBOUNDED,
        null_value: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.keyed_field_name = keyed_field_name(field_name)
        self.ignore_above = ignore_above
        self.null_value = null_value

    def emit(self, path: Sequence[str], value: str | None, out: list[IndexableField]) -> int:
        """Append the fields for one leaf to ``out`` and return how many were added.

        ``value`` is ``None`` for an explicit JSON null.
        """
        if value is None:
            if self.null_value is None:
                LEAVES_TOTAL.labels(outcome="null_dropped").inc()
                return 0
            value = self.null_value

        if len(value) > self.ignore_above:
            logger.debug(
                "Ignoring value of length %d above %d for [%s]",
                len(value),
                self.ignore_above,
                ".".join(path),
            )
            LEAVES_TOTAL.labels(outcome="ignored_above").inc()
            return 0

        out.append(IndexableField(self.field_name, value.encode("utf-8")))
        added = 1
        if path:
            out.append(IndexableField(self.keyed_field_name, keyed_token(path, value).encode("utf-8")))
            added += 1
        LEAVES_TOTAL.labels(outcome="indexed").inc()
        return added
