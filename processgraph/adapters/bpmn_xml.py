"""BPMN 2.0 XML serialization of a laid-out process graph.

The document has two halves that reference the same ids: the semantic
process (nodes and sequence flows) and the diagram interchange plane
(one shape per node, one edge per flow, ids suffixed with `_di`).
"""

from processgraph.layout.engine import compute_layout
from processgraph.models.layout import DiagramLayout
from processgraph.models.process_graph import GraphModel, NodeKind

NAMESPACES = {
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "bpmn": "http://www.omg.org/spec/BPMN/20100524/MODEL",
    "bpmndi": "http://www.omg.org/spec/BPMN/20100524/DI",
    "dc": "http://www.omg.org/spec/DD/20100524/DC",
    "di": "http://www.omg.org/spec/DD/20100524/DI",
}
TARGET_NAMESPACE = "http://bpmn.io/schema/bpmn"

DEFINITIONS_ID = "Definitions_1"
DIAGRAM_ID = "BPMNDiagram_1"
PLANE_ID = "BPMNPlane_1"

ELEMENT_TAGS = {
    NodeKind.start: "bpmn:startEvent",
    NodeKind.end: "bpmn:endEvent",
    NodeKind.task: "bpmn:task",
    NodeKind.exclusive_gateway: "bpmn:exclusiveGateway",
}

_ESCAPES = (
    ("&", "&amp;"),  # must run first
    ('"', "&quot;"),
    ("'", "&apos;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def xml_escape(value: str | None) -> str:
    """Escape the five reserved markup characters."""
    if not value:
        return ""
    for char, entity in _ESCAPES:
        value = value.replace(char, entity)
    return value


def _attrs(**attributes: object) -> str:
    """Render attributes in the given order, skipping None values."""
    return "".join(
        f' {name}="{xml_escape(str(value))}"'
        for name, value in attributes.items()
        if value is not None
    )


def _process_lines(model: GraphModel) -> list[str]:
    lines = [f'  <bpmn:process{_attrs(id=model.id, name=model.name or None, isExecutable="false")}>']
    for node in model.nodes:
        tag = ELEMENT_TAGS[node.kind]
        lines.append(f"    <{tag}{_attrs(id=node.id, name=node.label or None)} />")
    for flow in model.flows:
        lines.append(
            "    <bpmn:sequenceFlow"
            f"{_attrs(id=flow.id, sourceRef=flow.source_id, targetRef=flow.target_id)} />"
        )
    lines.append("  </bpmn:process>")
    return lines


def _diagram_lines(model: GraphModel, layout: DiagramLayout) -> list[str]:
    lines = [
        f"  <bpmndi:BPMNDiagram{_attrs(id=DIAGRAM_ID)}>",
        f"    <bpmndi:BPMNPlane{_attrs(id=PLANE_ID, bpmnElement=model.id)}>",
    ]
    for node in model.nodes:
        b = layout.bounds[node.id]
        lines.append(f"      <bpmndi:BPMNShape{_attrs(id=f'{node.id}_di', bpmnElement=node.id)}>")
        lines.append(f"        <dc:Bounds{_attrs(x=b.x, y=b.y, width=b.w, height=b.h)} />")
        lines.append("      </bpmndi:BPMNShape>")
    for flow in model.flows:
        points = layout.waypoints[flow.id]
        lines.append(f"      <bpmndi:BPMNEdge{_attrs(id=f'{flow.id}_di', bpmnElement=flow.id)}>")
        for point in points:
            lines.append(f"        <di:waypoint{_attrs(x=point.x, y=point.y)} />")
        lines.append("      </bpmndi:BPMNEdge>")
    lines.append("    </bpmndi:BPMNPlane>")
    lines.append("  </bpmndi:BPMNDiagram>")
    return lines


def to_bpmn_xml(model: GraphModel, layout: DiagramLayout | None = None) -> str:
    """Render a model as a BPMN 2.0 document.

    The model must already have passed validation. A node or flow missing
    from the layout raises KeyError: that is a caller bug, not bad input.
    """
    if layout is None:
        layout = compute_layout(model)

    namespace_attrs = "".join(
        f' xmlns:{prefix}="{uri}"' for prefix, uri in NAMESPACES.items()
    )
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f"<bpmn:definitions{namespace_attrs}"
        f"{_attrs(id=DEFINITIONS_ID, targetNamespace=TARGET_NAMESPACE)}>",
    ]
    lines.extend(_process_lines(model))
    lines.extend(_diagram_lines(model, layout))
    lines.append("</bpmn:definitions>")
    return "\n".join(lines) + "\n"
