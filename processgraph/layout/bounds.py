"""Pixel bounds for process nodes from their level, column and kind."""

from dataclasses import dataclass, field

from processgraph.layout.columns import round_half_up
from processgraph.models.layout import Bounds
from processgraph.models.process_graph import GraphModel, NodeKind


def _default_sizes() -> dict[NodeKind, tuple[int, int]]:
    return {
        NodeKind.task: (150, 90),
        NodeKind.exclusive_gateway: (50, 50),
        NodeKind.start: (36, 36),
        NodeKind.end: (36, 36),
    }


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing and sizing constants for one layout pass."""

    base_center_x: int = 500
    column_spacing: int = 260
    top_margin: int = 80
    row_spacing: int = 140
    edge_drop: int = 20
    node_sizes: dict[NodeKind, tuple[int, int]] = field(default_factory=_default_sizes, hash=False)

    def size_for(self, kind: NodeKind) -> tuple[int, int]:
        return self.node_sizes[kind]


DEFAULT_LAYOUT = LayoutConfig()


def compute_bounds(
    model: GraphModel,
    levels: dict[str, int],
    columns: dict[str, int],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> dict[str, Bounds]:
    """Place every node: centered on its column, top edge on its row."""
    bounds: dict[str, Bounds] = {}
    for node in model.nodes:
        w, h = config.size_for(node.kind)
        center_x = config.base_center_x + columns.get(node.id, 0) * config.column_spacing
        top_y = config.top_margin + levels.get(node.id, 0) * config.row_spacing
        bounds[node.id] = Bounds(
            x=round_half_up(center_x - w / 2),
            y=round_half_up(top_y),
            w=w,
            h=h,
        )
    return bounds
