#!/usr/bin/env python3
"""CLI script to analyze exported demo run logs.

Usage:
    python -m processgraph.analysis.analyze_run run.json

    # JSONL event files written by FileSink work too
    python -m processgraph.analysis.analyze_run run_events.jsonl --json

    # only show failure events
    python -m processgraph.analysis.analyze_run run.json --status failure
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from processgraph.adapters.sinks import load_jsonl_events, load_run_log
from processgraph.analysis.run_summary import RunSummary, filter_events, run_summary
from processgraph.models.run_event import RunEvent, RunStatus


def load_run_events(run_file: Path) -> list[RunEvent]:
    """Load events from an exported run log (.json) or a JSONL event file.

    Args:
        run_file: path to the run file

    Returns:
        list of RunEvent objects
    """
    if run_file.suffix == ".jsonl":
        return load_jsonl_events(run_file)
    events, _ = load_run_log(run_file.read_text())
    return events


def format_summary(summary: RunSummary) -> str:
    """Format run summary for human-readable output."""
    lines = []
    lines.append("=" * 60)
    lines.append("RUN SUMMARY")
    lines.append("=" * 60)
    lines.append("")

    lines.append(f"Event Count: {summary.event_count}")
    if summary.elapsed_ms is not None:
        lines.append(f"Elapsed:     {summary.elapsed_ms} ms")
    lines.append("")

    lines.append("-" * 40)
    lines.append("ELEMENTS")
    lines.append("-" * 40)
    for element in summary.elements:
        duration = f" in {element.duration_ms} ms" if element.duration_ms is not None else ""
        retry = " (retried)" if element.failures else ""
        lines.append(f"  • {element.element_id}: {element.final_status.value}{duration}{retry}")
    if not summary.elements:
        lines.append("  (no elements)")
    lines.append("")

    if summary.unfinished:
        lines.append("-" * 40)
        lines.append("UNFINISHED")
        lines.append("-" * 40)
        for element_id in summary.unfinished:
            lines.append(f"  • {element_id}")
        lines.append("")

    return "\n".join(lines)


def summary_to_dict(summary: RunSummary) -> dict:
    """Convert RunSummary to a JSON-serializable dict."""
    d = asdict(summary)
    for element in d["elements"]:
        element["final_status"] = element["final_status"].value
    return d


def main():
    parser = argparse.ArgumentParser(
        description="Analyze a demo run log and output summary statistics."
    )
    parser.add_argument(
        "run_file",
        type=Path,
        help="path to the run log (.json export or .jsonl events)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="output summary as JSON instead of human-readable format",
    )
    parser.add_argument(
        "--status",
        choices=["all"] + [status.value for status in RunStatus],
        default=None,
        help="print the events with this status instead of the summary",
    )

    args = parser.parse_args()

    if not args.run_file.exists():
        print(f"Error: run file not found: {args.run_file}", file=sys.stderr)
        sys.exit(1)

    events = load_run_events(args.run_file)

    if not events:
        print("Error: no events found in run file", file=sys.stderr)
        sys.exit(1)

    if args.status:
        for event in filter_events(events, args.status):
            print(json.dumps(event.to_json_dict()))
        return

    summary = run_summary(events)

    if args.json:
        print(json.dumps(summary_to_dict(summary), indent=2))
    else:
        print(format_summary(summary))


if __name__ == "__main__":
    main()
