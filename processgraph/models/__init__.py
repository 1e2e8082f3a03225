"""Core data models for processgraph."""

from processgraph.models.layout import Bounds, DiagramLayout, Point
from processgraph.models.process_graph import (
    GraphModel,
    NodeKind,
    ProcessDocument,
    ProcessNode,
    SequenceFlow,
)
from processgraph.models.run_event import (
    TERMINAL_STATUSES,
    RunEvent,
    RunStatus,
)

__all__ = [
    # Process graph
    "GraphModel",
    "NodeKind",
    "ProcessDocument",
    "ProcessNode",
    "SequenceFlow",
    # Layout values
    "Bounds",
    "DiagramLayout",
    "Point",
    # Run events
    "RunEvent",
    "RunStatus",
    "TERMINAL_STATUSES",
]
