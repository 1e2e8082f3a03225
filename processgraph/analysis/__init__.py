"""Analysis utilities: structural validation and run-log statistics."""

from processgraph.analysis.validator import (
    MISSING_END,
    MISSING_START,
    is_valid,
    validate_process,
)
from processgraph.analysis.run_summary import (
    ElementSummary,
    RunSummary,
    element_history,
    filter_events,
    final_statuses,
    run_summary,
)
from processgraph.analysis.analyze_run import (
    format_summary,
    load_run_events,
    summary_to_dict,
)

__all__ = [
    # validator exports
    "MISSING_END",
    "MISSING_START",
    "is_valid",
    "validate_process",
    # run_summary exports
    "ElementSummary",
    "RunSummary",
    "element_history",
    "filter_events",
    "final_statuses",
    "run_summary",
    # analyze_run exports
    "format_summary",
    "load_run_events",
    "summary_to_dict",
]
