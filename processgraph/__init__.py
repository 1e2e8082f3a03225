"""processgraph - compile declarative process graphs to BPMN diagrams and replay them as demo runs."""

from processgraph.adapters.bpmn_xml import to_bpmn_xml
from processgraph.analysis.validator import validate_process
from processgraph.layout.engine import compute_layout
from processgraph.models.process_graph import (
    GraphModel,
    NodeKind,
    ProcessDocument,
    ProcessNode,
    SequenceFlow,
)
from processgraph.models.run_event import RunEvent, RunStatus
from processgraph.sdk.compiler import (
    ProcessValidationError,
    compile_diagram,
    compile_document,
)
from processgraph.sdk.demo_run import (
    DemoRunController,
    SimulationOptions,
    run_demo,
    start_demo_run,
)

__all__ = [
    # Process graph
    "GraphModel",
    "NodeKind",
    "ProcessDocument",
    "ProcessNode",
    "SequenceFlow",
    # Run events
    "RunEvent",
    "RunStatus",
    # Compiler
    "ProcessValidationError",
    "compile_diagram",
    "compile_document",
    "compute_layout",
    "to_bpmn_xml",
    "validate_process",
    # Demo runs
    "DemoRunController",
    "SimulationOptions",
    "run_demo",
    "start_demo_run",
]
