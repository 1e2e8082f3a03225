"""Event sinks and run-log export."""

import json
from pathlib import Path
from typing import Any, Protocol

from processgraph.models.run_event import RunEvent


class RunEventSink(Protocol):
    """Protocol for receiving run events."""

    def append(self, event: RunEvent) -> None:
        """Append an event to the sink."""
        ...


class ListSink:
    """Stores events in a list."""

    def __init__(self) -> None:
        self.events: list[RunEvent] = []

    def append(self, event: RunEvent) -> None:
        """Append an event to the list."""
        self.events.append(event)

    def clear(self) -> None:
        """Clear all events."""
        self.events.clear()


class FileSink:
    """Writes events to a JSONL file, one camelCase event per line."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, event: RunEvent) -> None:
        """Append an event to the file."""
        with open(self.path, "a") as f:
            f.write(json.dumps(event.to_json_dict()) + "\n")


def load_jsonl_events(path: Path | str) -> list[RunEvent]:
    """Read events written by FileSink."""
    events = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            events.append(RunEvent.model_validate_json(line))
    return events


def export_run_log(
    events: list[RunEvent],
    diagnostics: Any = None,
    indent: int | None = 2,
) -> str:
    """Serialize a run log as {"events": [...], "diagnostics": ...}.

    `diagnostics` may be a pydantic model (e.g. GenerationDiagnostics), a
    plain dict or None.
    """
    if hasattr(diagnostics, "model_dump"):
        diagnostics = diagnostics.model_dump(mode="json")
    data = {
        "events": [event.to_json_dict() for event in events],
        "diagnostics": diagnostics,
    }
    return json.dumps(data, indent=indent, ensure_ascii=False)


def load_run_log(text: str) -> tuple[list[RunEvent], dict | None]:
    """Parse an exported run log back into events and diagnostics.

    A bare JSON array of events is accepted as well.
    """
    data = json.loads(text)
    if isinstance(data, list):
        return [RunEvent.model_validate(item) for item in data], None
    if not isinstance(data, dict) or "events" not in data:
        raise ValueError("run log must be a JSON array or an object with 'events'")
    events = [RunEvent.model_validate(item) for item in data["events"]]
    return events, data.get("diagnostics")
