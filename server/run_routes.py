"""API routes for demo runs."""

import json

from fastapi import APIRouter
from pydantic import BaseModel, Field

from processgraph.adapters.sinks import export_run_log
from processgraph.analysis.analyze_run import summary_to_dict
from processgraph.analysis.run_summary import run_summary
from processgraph.models.process_graph import GraphModel
from processgraph.sdk.demo_run import SimulationOptions, run_demo

router = APIRouter()

# a full run takes roughly 2-3x base delay per node
MAX_BASE_DELAY_MS = 2000


class DemoRunRequest(BaseModel):
    """Request body for a demo run."""

    process: GraphModel
    base_delay_ms: float = Field(default=600, ge=0, le=MAX_BASE_DELAY_MS)
    failure_rate: float = Field(default=0.15, ge=0, le=1)
    seed: int | None = None


@router.post("/runs/demo")
async def demo_run(body: DemoRunRequest) -> dict:
    """Simulate a run to completion and return its log and summary."""
    options = SimulationOptions(
        base_delay_ms=body.base_delay_ms,
        failure_rate=body.failure_rate,
        seed=body.seed,
    )
    events = await run_demo(body.process, options)
    log = json.loads(export_run_log(events, indent=None))
    return {
        "events": log["events"],
        "summary": summary_to_dict(run_summary(events)),
    }
