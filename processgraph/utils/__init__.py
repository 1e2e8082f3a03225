"""Utility functions for processgraph."""

from processgraph.utils.identifiers import (
    generate_request_id,
    generate_run_id,
    now_ms,
)

__all__ = [
    "generate_request_id",
    "generate_run_id",
    "now_ms",
]
