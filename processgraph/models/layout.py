"""Geometry values produced by one layout pass."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Point:
    """a waypoint in diagram pixels."""

    x: int
    y: int


@dataclass(frozen=True)
class Bounds:
    """top-left corner and size of a node's shape, in pixels."""

    x: int
    y: int
    w: int
    h: int

    @property
    def bottom_center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h)

    @property
    def top_center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y)


@dataclass
class DiagramLayout:
    """Everything the serializer needs to place a model.

    Values are computed fresh per layout call and are not shared between calls.
    """

    levels: dict[str, int] = field(default_factory=dict)
    columns: dict[str, int] = field(default_factory=dict)
    bounds: dict[str, Bounds] = field(default_factory=dict)
    waypoints: dict[str, list[Point]] = field(default_factory=dict)  # keyed by flow id

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "levels": dict(self.levels),
            "columns": dict(self.columns),
            "bounds": {
                node_id: {"x": b.x, "y": b.y, "width": b.w, "height": b.h}
                for node_id, b in self.bounds.items()
            },
            "waypoints": {
                flow_id: [{"x": p.x, "y": p.y} for p in points]
                for flow_id, points in self.waypoints.items()
            },
        }
