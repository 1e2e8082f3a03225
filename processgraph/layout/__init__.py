"""Automatic layout for process graphs."""

from processgraph.layout.bounds import DEFAULT_LAYOUT, LayoutConfig, compute_bounds
from processgraph.layout.columns import assign_columns, column_offsets
from processgraph.layout.engine import compute_layout
from processgraph.layout.levels import assign_levels, traversal_order
from processgraph.layout.routing import route_edge

__all__ = [
    "DEFAULT_LAYOUT",
    "LayoutConfig",
    "assign_columns",
    "assign_levels",
    "column_offsets",
    "compute_bounds",
    "compute_layout",
    "route_edge",
    "traversal_order",
]
