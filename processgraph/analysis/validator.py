"""Structural soundness checks for process graphs.

Every check runs on every call; the caller gets the full list of problems
at once. Nothing here raises for a structural defect.
"""

from processgraph.models.process_graph import GraphModel, NodeKind

MISSING_START = "No start event found"
MISSING_END = "No end event found"


def validate_process(model: GraphModel) -> list[str]:
    """Return human-readable structural errors; an empty list means valid.

    Checks, in reporting order:
    - at least one start event and at least one end event
    - every exclusive gateway has an incoming and an outgoing flow
    - every flow's source and target resolve to a node
    """
    errors: list[str] = []

    if not model.nodes_of_kind(NodeKind.start):
        errors.append(MISSING_START)
    if not model.nodes_of_kind(NodeKind.end):
        errors.append(MISSING_END)

    for gateway in model.nodes_of_kind(NodeKind.exclusive_gateway):
        incoming = sum(1 for f in model.flows if f.target_id == gateway.id)
        outgoing = sum(1 for f in model.flows if f.source_id == gateway.id)
        if incoming == 0 or outgoing == 0:
            errors.append(f"Gateway {gateway.id} has open edges")

    node_ids = set(model.node_ids())
    for flow in model.flows:
        if flow.source_id not in node_ids or flow.target_id not in node_ids:
            errors.append(f"Flow {flow.id} references unknown nodes")

    return errors


def is_valid(model: GraphModel) -> bool:
    return not validate_process(model)
