from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from accel.core.events.base import Event


@dataclass(frozen=True, slots=True, kw_only=True)
class RunStarted(Event):
    """
    Emitted when a run leaves idle, before the first step.
    """

    event_type: ClassVar[str] = "run.started"

    run_id: str
    operation: str
    start: int
    finish: int


@dataclass(frozen=True, slots=True, kw_only=True)
class StepCompleted(Event):
    """
    Emitted after each motion step completes successfully.
    """

    event_type: ClassVar[str] = "run.step_completed"

    run_id: str
    motion: str
    index: int
    operation: str
    reached: int


@dataclass(frozen=True, slots=True, kw_only=True)
class RunSucceeded(Event):
    event_type: ClassVar[str] = "run.succeeded"

    run_id: str
    reached: int


@dataclass(frozen=True, slots=True, kw_only=True)
class RunFailed(Event):
    """
    Emitted when a run settles with an error. reached is the checkpointed
    cursor (None when the checkpoint itself failed).
    """

    event_type: ClassVar[str] = "run.failed"

    run_id: str
    reached: int | None
    error_type: str
    error_message: str
