"""Adapters to external formats: BPMN XML and run-event sinks."""

from processgraph.adapters.bpmn_xml import to_bpmn_xml, xml_escape
from processgraph.adapters.sinks import (
    FileSink,
    ListSink,
    RunEventSink,
    export_run_log,
    load_jsonl_events,
    load_run_log,
)

__all__ = [
    "to_bpmn_xml",
    "xml_escape",
    "RunEventSink",
    "ListSink",
    "FileSink",
    "export_run_log",
    "load_jsonl_events",
    "load_run_log",
]
