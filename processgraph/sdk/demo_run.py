"""Demo run simulator - replays a process graph as a synthetic execution.

This is a visualization aid, not a workflow engine: nodes are "executed" in
model insertion order (not a topological walk), timings are randomized, and
failures are injected at random. Each node goes through

    pending -> running -> success
    pending -> running -> failure -> running ("Retry") -> success

and a failed node is always retried exactly once, successfully.

Example:
    async def main():
        sink = ListSink()
        controller = start_demo_run(model, sink.append, SimulationOptions(base_delay_ms=100))
        ...
        controller.stop()          # cooperative: takes effect at the next checkpoint
        await controller.wait()
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from typing import Awaitable, Callable

from processgraph.adapters.sinks import ListSink
from processgraph.models.process_graph import GraphModel
from processgraph.models.run_event import RunEvent, RunStatus
from processgraph.utils.identifiers import generate_run_id, now_ms

logger = logging.getLogger(__name__)

EventCallback = Callable[[RunEvent], None]
SleepFn = Callable[[float], Awaitable[None]]
ClockFn = Callable[[], int]

# ids matching this never get an injected failure
_FAILURE_EXEMPT = re.compile("start|end", re.IGNORECASE)

MESSAGE_OK = "OK"
MESSAGE_FAILED = "Demo-Fehler"
MESSAGE_RETRY = "Retry"
MESSAGE_RETRY_OK = "Erfolg nach Retry"


@dataclass(frozen=True)
class SimulationOptions:
    """Timing and failure knobs for a demo run."""

    base_delay_ms: float = 600
    failure_rate: float = 0.15
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must not be negative")
        if not 0.0 <= self.failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")


class DemoRunController:
    """Handle returned by start_demo_run().

    stop() only sets a flag. A delay that is already running completes; the
    walk exits at its next checkpoint without emitting anything further.
    """

    def __init__(self, run_id: str, stop_event: asyncio.Event, task: asyncio.Task) -> None:
        self.run_id = run_id
        self._stop_event = stop_event
        self._task = task

    def stop(self) -> None:
        """Request cancellation; always succeeds."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    @property
    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> None:
        """Wait until the walk finishes or exits after stop()."""
        await self._task

    def __repr__(self) -> str:
        return f"DemoRunController(run_id={self.run_id!r}, stopped={self.stopped}, done={self.done})"


async def _walk(
    model: GraphModel,
    emit: EventCallback,
    options: SimulationOptions,
    rng: random.Random,
    sleep: SleepFn,
    clock: ClockFn,
    stop_event: asyncio.Event,
    run_id: str,
) -> None:
    base_s = options.base_delay_ms / 1000
    completed = 0

    for node_id in model.node_ids():
        if stop_event.is_set():
            break
        pending_at = clock()
        emit(RunEvent(element_id=node_id, status=RunStatus.pending, timestamp=pending_at))

        await sleep(base_s * 0.5)
        if stop_event.is_set():
            break
        emit(RunEvent(element_id=node_id, status=RunStatus.running, timestamp=clock()))

        await sleep(base_s + rng.random() * base_s)
        if stop_event.is_set():
            break
        failed = rng.random() < options.failure_rate and not _FAILURE_EXEMPT.search(node_id)
        finished_at = clock()
        emit(RunEvent(
            element_id=node_id,
            status=RunStatus.failure if failed else RunStatus.success,
            timestamp=finished_at,
            duration_ms=max(0, finished_at - pending_at),
            message=MESSAGE_FAILED if failed else MESSAGE_OK,
        ))

        if failed:
            await sleep(base_s * 0.6)
            if stop_event.is_set():
                break
            emit(RunEvent(
                element_id=node_id,
                status=RunStatus.running,
                timestamp=clock(),
                message=MESSAGE_RETRY,
            ))

            await sleep(base_s)
            if stop_event.is_set():
                break
            finished_at = clock()
            emit(RunEvent(
                element_id=node_id,
                status=RunStatus.success,
                timestamp=finished_at,
                duration_ms=max(0, finished_at - pending_at),
                message=MESSAGE_RETRY_OK,
            ))
        completed += 1

    if stop_event.is_set():
        logger.info("demo run %s stopped after %d node(s)", run_id, completed)
    else:
        logger.debug("demo run %s finished (%d nodes)", run_id, completed)


def start_demo_run(
    model: GraphModel,
    on_event: EventCallback,
    options: SimulationOptions | None = None,
    *,
    rng: random.Random | None = None,
    sleep: SleepFn | None = None,
    clock: ClockFn | None = None,
) -> DemoRunController:
    """Schedule a demo run on the running event loop and return its controller.

    Args:
        model: the process to replay; only its node order is used
        on_event: called synchronously for every event, in emission order
        options: timing/failure knobs (defaults: 600 ms base, 15% failures)
        rng: random source; defaults to random.Random(options.seed)
        sleep: awaitable delay in seconds (asyncio.sleep by default)
        clock: epoch-millisecond clock for event timestamps

    Raises:
        RuntimeError: if called without a running event loop.
    """
    options = options or SimulationOptions()
    loop = asyncio.get_running_loop()

    stop_event = asyncio.Event()
    run_id = generate_run_id()
    logger.info(
        "starting demo run %s for process %s (%d nodes, base=%sms, failure_rate=%s)",
        run_id,
        model.id,
        len(model.nodes),
        options.base_delay_ms,
        options.failure_rate,
    )
    task = loop.create_task(_walk(
        model,
        on_event,
        options,
        rng or random.Random(options.seed),
        sleep or asyncio.sleep,
        clock or now_ms,
        stop_event,
        run_id,
    ))
    return DemoRunController(run_id, stop_event, task)


async def run_demo(
    model: GraphModel,
    options: SimulationOptions | None = None,
    on_event: EventCallback | None = None,
    **kwargs,
) -> list[RunEvent]:
    """Run a whole demo simulation and return the accumulated event log.

    Extra keyword arguments (rng, sleep, clock) go to start_demo_run().
    """
    sink = ListSink()

    def emit(event: RunEvent) -> None:
        sink.append(event)
        if on_event is not None:
            on_event(event)

    controller = start_demo_run(model, emit, options, **kwargs)
    await controller.wait()
    return sink.events
