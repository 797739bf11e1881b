from __future__ import annotations

import structlog

from accel.core.engine.state import RunState
from accel.core.events.bus import EventBus
from accel.core.events.motions import RunFailed, RunStarted, RunSucceeded

log = structlog.get_logger()


class RunLifecycle:
    """
    Explicit run lifecycle controller: idle -> running -> succeeded | failed.

    Transitions are audited via events and logs. Event publication is
    best-effort: an observer failure never changes the outcome of the run.
    """

    def __init__(self, *, bus: EventBus, state: RunState) -> None:
        self._bus = bus
        self._state = state

    @property
    def state(self) -> RunState:
        return self._state

    def start(self) -> None:
        if self._state.phase != "idle":
            raise RuntimeError(f"run {self._state.run_id} already {self._state.phase}")

        self._state.phase = "running"

        self.notify(
            RunStarted.create(
                run_id=self._state.run_id,
                operation=str(self._state.operation),
                start=self._state.start,
                finish=self._state.finish,
                sequence=self._state.next_sequence(),
            )
        )
        log.info(
            "run.started",
            operation=str(self._state.operation),
            start=self._state.start,
            finish=self._state.finish,
        )

    def succeed(self) -> None:
        self._settle("succeeded")

        self.notify(
            RunSucceeded.create(
                run_id=self._state.run_id,
                reached=self._state.reached,
                sequence=self._state.next_sequence(),
            )
        )
        log.info("run.succeeded", reached=self._state.reached)

    def fail(self, exc: BaseException, *, checkpointed: bool) -> None:
        self._settle("failed")

        reached = self._state.reached if checkpointed else None
        self.notify(
            RunFailed.create(
                run_id=self._state.run_id,
                reached=reached,
                error_type=type(exc).__name__,
                error_message=str(exc),
                sequence=self._state.next_sequence(),
            )
        )
        log.error(
            "run.failed",
            reached=reached,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )

    def notify(self, event) -> None:
        try:
            self._bus.publish(event)
        except Exception:
            log.exception("run.notify_failed", event_type=event.event_type)

    def _settle(self, phase: str) -> None:
        if not self._state.is_running:
            raise RuntimeError(f"run {self._state.run_id} is not running")
        self._state.phase = phase  # type: ignore[assignment]
