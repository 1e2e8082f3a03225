"""Layout pipeline: levels -> columns -> bounds -> edge waypoints."""

import logging

from processgraph.layout.bounds import DEFAULT_LAYOUT, LayoutConfig, compute_bounds
from processgraph.layout.columns import assign_columns
from processgraph.layout.levels import assign_levels
from processgraph.layout.routing import route_edge
from processgraph.models.layout import DiagramLayout
from processgraph.models.process_graph import GraphModel

logger = logging.getLogger(__name__)


def compute_layout(
    model: GraphModel,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> DiagramLayout:
    """Run the full layout pass for a model.

    Assumes the model passed validation: flows whose endpoints are not nodes
    of the model get no waypoints.
    """
    levels = assign_levels(model)
    columns = assign_columns(model)
    bounds = compute_bounds(model, levels, columns, config)

    waypoints = {}
    for flow in model.flows:
        source = bounds.get(flow.source_id)
        target = bounds.get(flow.target_id)
        if source is None or target is None:
            continue
        waypoints[flow.id] = route_edge(source, target, config.edge_drop)

    logger.debug(
        "laid out process %s: %d nodes, %d rows, %d edges",
        model.id,
        len(bounds),
        max(levels.values(), default=-1) + 1,
        len(waypoints),
    )
    return DiagramLayout(levels=levels, columns=columns, bounds=bounds, waypoints=waypoints)
