"""Unit tests for the mapper registry."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from json_field_mapper.mapper.errors import MergeConflictError
from json_field_mapper.mapper.field_mapper import JsonFieldMapperBuilder
from json_field_mapper.mapper.registry import MapperRegistry


def _mapper(name, ignore_above=100):
    return JsonFieldMapperBuilder(name).ignore_above(ignore_above).build()


class TestMapperRegistry:
    def test_put_registers_new_mapper(self):
        registry = MapperRegistry()
        mapper = _mapper("labels")

        assert registry.put(mapper) is mapper
        assert registry["labels"] is mapper
        assert "labels" in registry
        assert len(registry) == 1
        assert list(registry) == ["labels"]
        assert registry.get("missing") is None

    def test_put_merges_and_swaps(self):
        registry = MapperRegistry()
        original = _mapper("labels", 100)
        registry.put(original)

        merged = registry.put(_mapper("labels", 5))

        assert registry["labels"] is merged
        assert merged.ignore_above == 5
        assert original.ignore_above == 100

    def test_readers_keep_their_snapshot(self):
        registry = MapperRegistry()
        registry.put(_mapper("labels", 100))
        in_flight = registry["labels"]

        registry.put(_mapper("labels", 1))

        assert in_flight.parse_value({"a": "value"}) != []
        assert registry["labels"].parse_value({"a": "value"}) == []

    def test_failed_merge_leaves_registry_untouched(self):
        registry = MapperRegistry()
        current = registry.put(_mapper("labels"))

        class Other:
            name = "labels"
            content_type = "keyword"

        with pytest.raises(MergeConflictError):
            registry.put(Other())  # type: ignore[arg-type]
        assert registry["labels"] is current

    def test_concurrent_updates_do_not_lose_names(self):
        registry = MapperRegistry()
        names = [f"field_{i}" for i in range(50)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda name: registry.put(_mapper(name)), names))

        assert sorted(registry) == sorted(names)
