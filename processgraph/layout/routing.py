"""Orthogonal edge routing between two placed nodes."""

from processgraph.layout.columns import round_half_up
from processgraph.models.layout import Bounds, Point

DEFAULT_EDGE_DROP = 20

# share of the vertical distance added below the shallower endpoint
RAIL_BIAS = 0.2


def route_edge(
    source: Bounds,
    target: Bounds,
    edge_drop: int = DEFAULT_EDGE_DROP,
) -> list[Point]:
    """Waypoints from the source's bottom-center to the target's top-center.

    Aligned endpoints give a straight segment. Otherwise the path drops to a
    horizontal rail, crosses to the target's x and drops into the target.
    Works for any relative position, including targets above the source.
    """
    exit_x, exit_y = (round_half_up(v) for v in source.bottom_center)
    entry_x, entry_y = (round_half_up(v) for v in target.top_center)

    if exit_x == entry_x:
        return [Point(exit_x, exit_y), Point(entry_x, entry_y)]

    rail_y = round_half_up(
        min(entry_y, exit_y) + edge_drop + abs(entry_y - exit_y) * RAIL_BIAS
    )
    return [
        Point(exit_x, exit_y),
        Point(exit_x, rail_y),
        Point(entry_x, rail_y),
        Point(entry_x, entry_y),
    ]
