"""Data model for declarative process graphs.

A process graph is what the text-to-graph generator hands over: nodes
(events, tasks, gateways) and directed sequence flows between them. The
model is deliberately permissive: dangling flows and missing start/end
events are constructible and are reported by the validator instead.
Ids are the exception: every id written to the BPMN document (process,
nodes, flows and their `_di` shapes) must be unique, so collisions are
rejected at parse time.
"""

from collections import Counter
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator


class NodeKind(str, Enum):
    """Kinds of process nodes."""

    start = "start"
    end = "end"
    task = "task"
    exclusive_gateway = "exclusiveGateway"


# BPMN spellings produced by some generators
_KIND_ALIASES = {
    "startEvent": NodeKind.start,
    "endEvent": NodeKind.end,
}


class ProcessNode(BaseModel):
    """a single node in the process graph."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str
    kind: NodeKind = Field(alias="type")
    label: str | None = Field(default=None, alias="name")

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, value: Any) -> Any:
        """Accept startEvent/endEvent as aliases of start/end."""
        if isinstance(value, str):
            return _KIND_ALIASES.get(value, value)
        return value


class SequenceFlow(BaseModel):
    """a directed flow between two nodes."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str
    source_id: str = Field(alias="source")
    target_id: str = Field(alias="target")


class GraphModel(BaseModel):
    """the full process graph with its query helpers."""

    model_config = {"frozen": True}

    id: str
    name: str | None = None
    nodes: list[ProcessNode] = Field(default_factory=list)
    flows: list[SequenceFlow] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> Self:
        """Reject ids that would appear twice in the serialized document."""
        element_ids = [node.id for node in self.nodes] + [flow.id for flow in self.flows]
        document_ids = [self.id, *element_ids, *(f"{element_id}_di" for element_id in element_ids)]
        duplicates = [element_id for element_id, count in Counter(document_ids).items() if count > 1]
        if duplicates:
            raise ValueError(f"duplicate ids: {', '.join(sorted(duplicates))}")
        return self

    def node_ids(self) -> list[str]:
        """Node ids in insertion order."""
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> ProcessNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_of_kind(self, kind: NodeKind) -> list[ProcessNode]:
        return [node for node in self.nodes if node.kind == kind]

    def outgoing(self) -> dict[str, list[str]]:
        """Successor ids per node, in flow declaration order.

        Flows with an endpoint that is not a node of this model are left out.
        """
        known = set(self.node_ids())
        successors: dict[str, list[str]] = {node_id: [] for node_id in known}
        for flow in self.flows:
            if flow.source_id in known and flow.target_id in known:
                successors[flow.source_id].append(flow.target_id)
        return successors

    def incoming(self) -> dict[str, list[str]]:
        """Predecessor ids per node, in flow declaration order."""
        known = set(self.node_ids())
        predecessors: dict[str, list[str]] = {node_id: [] for node_id in known}
        for flow in self.flows:
            if flow.source_id in known and flow.target_id in known:
                predecessors[flow.target_id].append(flow.source_id)
        return predecessors

    def start_node_id(self) -> str | None:
        """The first start node, else the first node, else None.

        The fallback keeps layout total on graphs without a start event.
        """
        starts = self.nodes_of_kind(NodeKind.start)
        if starts:
            return starts[0].id
        if self.nodes:
            return self.nodes[0].id
        return None


class ProcessDocument(BaseModel):
    """The document exchanged with the generator: {"process": {...}}."""

    process: GraphModel
