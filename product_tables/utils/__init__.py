"""Utility modules."""

from product_tables.utils.logger import get_logger, bind_context, clear_context, request_context
from product_tables.utils.tracing import init_tracing, get_tracer
from product_tables.utils.versions import compare_versions

__all__ = [
    "get_logger",
    "bind_context",
    "clear_context",
    "request_context",
    "init_tracing",
    "get_tracer",
    "compare_versions",
]
