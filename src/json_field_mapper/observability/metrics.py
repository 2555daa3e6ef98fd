"""Prometheus counters for json field indexing."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest


LEAVES_TOTAL = Counter(
    "json_field_leaves_total",
    "Leaves seen while flattening json fields",
    ["outcome"],
)

PARSE_ERRORS = Counter(
    "json_field_parse_errors_total",
    "Json field values rejected as malformed",
    ["field"],
)


def get_metrics() -> bytes:
    """Render the default registry in the Prometheus text format."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
