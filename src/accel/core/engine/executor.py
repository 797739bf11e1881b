from __future__ import annotations

import secrets
from typing import Sequence

import structlog

from accel.catalog.motion import Motion
from accel.core.engine.adapter import DriverAdapter
from accel.core.engine.lifecycle import RunLifecycle
from accel.core.engine.operation import resolve
from accel.core.engine.state import RunState
from accel.core.errors import CheckpointError
from accel.core.events.bus import EventBus
from accel.core.events.motions import StepCompleted
from accel.core.logging.setup import bound_context

log = structlog.get_logger()


def new_run_id() -> str:
    return secrets.token_hex(4)


class SequentialExecutor:
    """
    Walks the catalog from one cursor value to another, one step at a time.

    Guarantees:
      - steps run strictly in order; each is awaited before the next starts
      - the reached cursor is persisted on success and after a failed step
      - a failed step is re-raised unchanged once its checkpoint is written
      - if that checkpoint write fails, CheckpointError is raised with the
        step error as its cause
    """

    def __init__(self, *, adapter: DriverAdapter, motions: Sequence[Motion], bus: EventBus) -> None:
        if len(motions) != adapter.motion_count:
            raise ValueError("adapter motion_count does not match catalog size")
        self._adapter = adapter
        self._motions = motions
        self._bus = bus

    async def execute(self, start: int | float, finish: int | float) -> int:
        """
        Run every motion between start and finish; return the persisted cursor.
        """
        start = self._adapter.in_bounds(start)
        finish = self._adapter.in_bounds(finish)
        operation = resolve(finish - start)

        state = RunState(run_id=new_run_id(), start=start, finish=finish, operation=operation)
        lifecycle = RunLifecycle(bus=self._bus, state=state)

        with bound_context(run_id=state.run_id, operation=str(operation)):
            lifecycle.start()

            try:
                for index in state.indices:
                    motion = self._motions[index]
                    await self._adapter.run_step(motion.step(operation.selector))
                    reached = state.advance()

                    log.debug("run.step_completed", motion=motion.name, index=index, reached=reached)
                    lifecycle.notify(
                        StepCompleted.create(
                            run_id=state.run_id,
                            motion=motion.name,
                            index=index,
                            operation=str(operation),
                            reached=reached,
                            sequence=state.next_sequence(),
                        )
                    )
            except Exception as step_exc:
                try:
                    await self._adapter.write_cursor(state.reached)
                except Exception as write_exc:
                    error = CheckpointError(reached=state.reached, step_error=step_exc, write_error=write_exc)
                    lifecycle.fail(error, checkpointed=False)
                    raise error from step_exc

                lifecycle.fail(step_exc, checkpointed=True)
                raise

            try:
                await self._adapter.write_cursor(state.reached)
            except Exception as exc:
                lifecycle.fail(exc, checkpointed=False)
                raise

            lifecycle.succeed()
            return state.reached
