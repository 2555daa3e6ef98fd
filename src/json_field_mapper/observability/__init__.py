"""Observability module for tracing, metrics, and logging."""

from json_field_mapper.observability.context import get_trace_context, set_trace_context, trace_context
from json_field_mapper.observability.logging import JsonFormatter, configure_logging
from json_field_mapper.observability.metrics import (
    LEAVES_TOTAL,
    PARSE_ERRORS,
    get_metrics,
    get_metrics_content_type,
)
from json_field_mapper.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "LEAVES_TOTAL",
    "PARSE_ERRORS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
]
