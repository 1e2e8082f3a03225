"""Horizontal lane (column) assignment for process nodes.

Column 0 is the center lane. Splits spread their successors symmetrically
around the splitting node; merges are pulled back to the mean of the
branches that feed them.
"""

import math

from processgraph.models.process_graph import GraphModel


def column_offsets(count: int) -> list[int]:
    """Signed lane offsets for `count` successors: -1, +1, -2, +2, ..."""
    offsets: list[int] = []
    step = 1
    for i in range(count):
        offsets.append(-step if i % 2 == 0 else step)
        if i % 2 == 1:
            step += 1
    return offsets


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def assign_columns(model: GraphModel) -> dict[str, int]:
    """Map every node id to a signed column.

    Depth-first pre-order from the start node; the first column a node
    receives is kept. Uses an explicit stack so deep graphs do not hit the
    recursion limit.
    """
    columns: dict[str, int] = {}
    start_id = model.start_node_id()
    if start_id is None:
        return columns

    outgoing = model.outgoing()
    incoming = model.incoming()

    stack: list[tuple[str, int]] = [(start_id, 0)]
    while stack:
        node_id, column = stack.pop()
        if node_id in columns:
            # its subtree was fully expanded on the first visit
            continue
        columns[node_id] = column

        successors = outgoing[node_id]
        if len(successors) <= 1:
            children = [(child, column) for child in successors]
        else:
            offsets = column_offsets(len(successors))
            children = [
                (child, column + offset) for child, offset in zip(successors, offsets)
            ]
        # reversed so the first declared successor is expanded first
        stack.extend(reversed(children))

    for node_id in model.node_ids():
        parents = incoming[node_id]
        if len(parents) > 1:
            mean = sum(columns.get(parent, 0) for parent in parents) / len(parents)
            columns[node_id] = round_half_up(mean)

    for node_id in model.node_ids():
        columns.setdefault(node_id, 0)
    return columns
