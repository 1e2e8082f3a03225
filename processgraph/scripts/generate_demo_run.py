"""Compile a process to BPMN and record a simulated demo run.

The process comes either from a JSON file ({"process": {...}}) or from a
text description passed through the configured generator (mock by default).

Outputs, under <out-dir>/<run_id>/:
- diagram.bpmn: the laid-out BPMN document
- run_events.jsonl: events as they were emitted
- run.json: exported run log with generation diagnostics

Usage:
    python -m processgraph.scripts.generate_demo_run --prompt "Receive order; Check stock; Ship"
    python -m processgraph.scripts.generate_demo_run --input process.json --failure-rate 0.3 --seed 7
"""

import argparse
import asyncio
import sys
from pathlib import Path

from processgraph.adapters.bpmn_xml import to_bpmn_xml
from processgraph.adapters.sinks import FileSink, export_run_log
from processgraph.analysis.analyze_run import format_summary
from processgraph.analysis.run_summary import run_summary
from processgraph.config import Settings, configure_logging
from processgraph.models.process_graph import ProcessDocument
from processgraph.models.run_event import RunEvent
from processgraph.sdk.compiler import (
    ProcessValidationError,
    compute_checked_layout,
    parse_process_document,
)
from processgraph.sdk.demo_run import SimulationOptions, run_demo
from processgraph.sdk.generation import GenerationDiagnostics, GenerationError, build_generator
from processgraph.utils.identifiers import generate_run_id


def load_document(
    input_path: Path | None,
    prompt: str | None,
    settings: Settings,
) -> tuple[ProcessDocument, GenerationDiagnostics | None]:
    """Read the process from a file, or generate it from a description."""
    if input_path is not None:
        return parse_process_document(input_path.read_text()), None
    generator = build_generator(settings.generator)
    document = generator.generate(prompt or "")
    return document, generator.last_diagnostics


async def record_run(
    document: ProcessDocument,
    options: SimulationOptions,
    events_path: Path,
) -> list[RunEvent]:
    """Run the simulation, streaming events to a JSONL file."""
    sink = FileSink(events_path)
    return await run_demo(document.process, options, on_event=sink.append)


def main():
    parser = argparse.ArgumentParser(
        description="Compile a process to BPMN and record a simulated demo run."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="process document (JSON)")
    source.add_argument("--prompt", type=str, help="process description for the generator")
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path("outputs"),
        help="output directory (a <run_id>/ subdirectory is created)",
    )
    parser.add_argument("--base-delay-ms", type=float, default=600)
    parser.add_argument("--failure-rate", type=float, default=0.15)
    parser.add_argument("--seed", type=int, default=None)

    args = parser.parse_args()

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    try:
        document, diagnostics = load_document(args.input, args.prompt, settings)
    except GenerationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1)

    try:
        layout = compute_checked_layout(document.process)
    except ProcessValidationError as exc:
        for error in exc.errors:
            print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2)

    run_dir = args.out_dir / generate_run_id()
    run_dir.mkdir(parents=True, exist_ok=True)

    (run_dir / "diagram.bpmn").write_text(to_bpmn_xml(document.process, layout))

    options = SimulationOptions(
        base_delay_ms=args.base_delay_ms,
        failure_rate=args.failure_rate,
        seed=args.seed,
    )
    events = asyncio.run(record_run(document, options, run_dir / "run_events.jsonl"))

    (run_dir / "run.json").write_text(export_run_log(events, diagnostics))

    print(format_summary(run_summary(events)))
    print(f"Outputs written to: {run_dir}")


if __name__ == "__main__":
    main()
