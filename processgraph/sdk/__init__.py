"""SDK for compiling, generating and demo-running process graphs."""

from processgraph.sdk.compiler import (
    ProcessValidationError,
    compile_diagram,
    compile_document,
    compute_checked_layout,
    parse_process_document,
)
from processgraph.sdk.demo_run import (
    DemoRunController,
    SimulationOptions,
    run_demo,
    start_demo_run,
)
from processgraph.sdk.generation import (
    GenerationDiagnostics,
    GenerationError,
    HttpGenerator,
    MockGenerator,
    ProcessGenerator,
    build_generator,
)

__all__ = [
    # Compiler
    "ProcessValidationError",
    "compile_diagram",
    "compile_document",
    "compute_checked_layout",
    "parse_process_document",
    # Demo runs
    "DemoRunController",
    "SimulationOptions",
    "run_demo",
    "start_demo_run",
    # Generation
    "GenerationDiagnostics",
    "GenerationError",
    "HttpGenerator",
    "MockGenerator",
    "ProcessGenerator",
    "build_generator",
]
