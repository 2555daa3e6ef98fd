"""Registry of active json field mappers.

Mappers are immutable, so readers take the current reference without
locking. A mapping update builds a merged mapper and swaps it in under a
lock, which keeps concurrent updates to the same name from losing writes.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
import threading

from json_field_mapper.mapper.field_mapper import JsonFieldMapper


logger = logging.getLogger(__name__)


class MapperRegistry:
    """Name to mapper lookup with atomic replace-on-merge."""

    def __init__(self) -> None:
        self._mappers: dict[str, JsonFieldMapper] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> JsonFieldMapper | None:
        return self._mappers.get(name)

    def __getitem__(self, name: str) -> JsonFieldMapper:
        return self._mappers[name]

    def __contains__(self, name: str) -> bool:
        return name in self._mappers

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._mappers))

    def __len__(self) -> int:
        return len(self._mappers)

    def put(self, mapper: JsonFieldMapper) -> JsonFieldMapper:
        """Register ``mapper``, merging it into an existing mapper of the same name."""
        with self._lock:
            current = self._mappers.get(mapper.name)
            merged = mapper if current is None else current.merge(mapper)
            # rebinding a new dict keeps lock-free readers on a consistent snapshot
            self._mappers = {**self._mappers, mapper.name: merged}
        if current is None:
            logger.info("Registered json field mapper [%s]", mapper.name)
        return merged
