"""Helper functions that get basic statistics from a demo run's event log.

These back the log views of a front end: filtering by status, the history
of one element, and a per-element roll-up of the run.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from processgraph.models.run_event import RunEvent, RunStatus


@dataclass
class ElementSummary:
    """Roll-up of all events of one element."""

    element_id: str
    final_status: RunStatus
    attempts: int  # number of times the element entered running
    failures: int
    duration_ms: int | None = None  # from the last terminal event
    event_count: int = 0


@dataclass
class RunSummary:
    """Summary of a run log."""

    elements: list[ElementSummary]
    event_count: int = 0
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    retried: list[str] = field(default_factory=list)
    unfinished: list[str] = field(default_factory=list)
    elapsed_ms: int | None = None


def filter_events(
    events: list[RunEvent],
    status: RunStatus | str | None = None,
) -> list[RunEvent]:
    """Events with the given status; all events when status is None or "all"."""
    if status is None or status == "all":
        return list(events)
    wanted = RunStatus(status)
    return [event for event in events if event.status == wanted]


def element_history(events: list[RunEvent], element_id: str) -> list[RunEvent]:
    """All events of one element, in emission order."""
    return [event for event in events if event.element_id == element_id]


def final_statuses(events: list[RunEvent]) -> dict[str, RunStatus]:
    """Latest status per element, keyed in order of first appearance."""
    statuses: dict[str, RunStatus] = {}
    for event in events:
        statuses[event.element_id] = event.status
    return statuses


def run_summary(events: list[RunEvent]) -> RunSummary:
    """Roll a run log up per element.

    Args:
        events: RunEvents of a single run, in emission order.

    Returns:
        RunSummary; elements are listed in order of first appearance.
    """
    if not events:
        return RunSummary(elements=[])

    by_element: dict[str, list[RunEvent]] = defaultdict(list)
    for event in events:
        by_element[event.element_id].append(event)

    elements: list[ElementSummary] = []
    for element_id, history in by_element.items():
        terminal = [event for event in history if event.is_terminal]
        elements.append(ElementSummary(
            element_id=element_id,
            final_status=history[-1].status,
            attempts=sum(1 for event in history if event.status == RunStatus.running),
            failures=sum(1 for event in history if event.status == RunStatus.failure),
            duration_ms=terminal[-1].duration_ms if terminal else None,
            event_count=len(history),
        ))

    return RunSummary(
        elements=elements,
        event_count=len(events),
        succeeded=[e.element_id for e in elements if e.final_status == RunStatus.success],
        failed=[e.element_id for e in elements if e.final_status == RunStatus.failure],
        retried=[e.element_id for e in elements if e.failures > 0],
        unfinished=[
            e.element_id
            for e in elements
            if e.final_status not in (RunStatus.success, RunStatus.failure)
        ],
        elapsed_ms=events[-1].timestamp - events[0].timestamp,
    )
