"""Row (level) assignment for process nodes.

Levels follow the longest path from the start node rather than the
shortest, so branches of different length that merge again keep the join
below the deepest branch.

This is best-effort layout: cyclic or disconnected graphs still get a level
for every node, it just may not be a meaningful one.
"""

from collections import deque

from processgraph.models.process_graph import GraphModel


def traversal_order(model: GraphModel) -> list[str]:
    """Kahn-style order starting at the start node.

    A node becomes ready once all its incoming flows have been consumed by
    dequeued predecessors. Nodes never reached (unreachable, or blocked by a
    cycle or an unreachable predecessor) are appended in model order.
    """
    start_id = model.start_node_id()
    if start_id is None:
        return []

    outgoing = model.outgoing()
    incoming = model.incoming()
    in_degree = {node_id: len(preds) for node_id, preds in incoming.items()}

    queue: deque[str] = deque([start_id])
    seen: set[str] = set()
    order: list[str] = []
    while queue:
        node_id = queue.popleft()
        if node_id in seen:
            continue
        seen.add(node_id)
        order.append(node_id)
        for successor in outgoing[node_id]:
            in_degree[successor] -= 1
            if in_degree[successor] <= 0:
                queue.append(successor)

    order.extend(node_id for node_id in model.node_ids() if node_id not in seen)
    return order


def assign_levels(model: GraphModel) -> dict[str, int]:
    """Map every node id to its depth (row index)."""
    start_id = model.start_node_id()
    if start_id is None:
        return {}

    incoming = model.incoming()
    levels: dict[str, int] = {start_id: 0}
    for node_id in traversal_order(model):
        if node_id == start_id:
            continue
        parents = incoming[node_id]
        if not parents:
            levels.setdefault(node_id, 0)
            continue
        # parents not leveled yet (cycles) count as depth 0
        levels[node_id] = max(levels.get(parent, 0) + 1 for parent in parents)

    for node_id in model.node_ids():
        levels.setdefault(node_id, 0)
    return levels
