"""
Run event models for simulated process executions.

Events are emitted once and never mutated; consumers accumulate them into
an ordered log. JSON keys use camelCase (elementId, durationMs) so exported
logs match what diagram front ends expect.
"""

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field, model_validator


class RunStatus(str, Enum):
    """Lifecycle states of one node in a run."""

    pending = "pending"
    running = "running"
    success = "success"
    failure = "failure"


# statuses that close a lifecycle attempt and may carry a duration
TERMINAL_STATUSES = {RunStatus.success, RunStatus.failure}


class RunEvent(BaseModel):
    """A status transition of one process element."""

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    element_id: str = Field(alias="elementId")
    status: RunStatus
    timestamp: int  # epoch milliseconds
    duration_ms: int | None = Field(default=None, alias="durationMs")
    message: str | None = None

    @model_validator(mode="after")
    def validate_duration(self) -> Self:
        """durationMs is only meaningful on terminal events."""
        if self.duration_ms is None:
            return self
        if self.status not in TERMINAL_STATUSES:
            raise ValueError(
                f"durationMs is only allowed on terminal events, not '{self.status.value}'"
            )
        if self.duration_ms < 0:
            raise ValueError("durationMs must not be negative")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_json_dict(self) -> dict:
        """camelCase dict without unset optional keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
