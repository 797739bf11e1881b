from __future__ import annotations

import pytest

from accel.core.engine.lifecycle import RunLifecycle
from accel.core.engine.operation import Operation
from accel.core.engine.state import RunState
from accel.core.events.bus import EventBus


def test_indices_apply_backward_shift() -> None:
    forward = RunState(run_id="f", start=1, finish=4, operation=Operation.FORWARD)
    backward = RunState(run_id="b", start=4, finish=1, operation=Operation.BACKWARD)

    assert list(forward.indices) == [1, 2, 3]
    assert list(backward.indices) == [3, 2, 1]
    assert list(RunState(run_id="e", start=0, finish=0, operation=Operation.FORWARD).indices) == []


def test_advance_only_while_running() -> None:
    state = RunState(run_id="r", start=2, finish=0, operation=Operation.BACKWARD)
    assert state.reached == 2

    with pytest.raises(RuntimeError):
        state.advance()

    lifecycle = RunLifecycle(bus=EventBus(), state=state)
    lifecycle.start()
    assert state.advance() == 1

    lifecycle.succeed()
    assert state.is_settled
    with pytest.raises(RuntimeError):
        state.advance()


def test_settled_run_never_restarts() -> None:
    state = RunState(run_id="r", start=0, finish=1, operation=Operation.FORWARD)
    lifecycle = RunLifecycle(bus=EventBus(), state=state)

    lifecycle.start()
    with pytest.raises(RuntimeError):
        lifecycle.start()

    lifecycle.fail(ValueError("x"), checkpointed=True)
    assert state.phase == "failed"
    with pytest.raises(RuntimeError):
        lifecycle.start()
    with pytest.raises(RuntimeError):
        lifecycle.succeed()


def test_settle_events_continue_the_sequence() -> None:
    bus = EventBus()
    seen = []
    bus.subscribe(event_type="*", handler=seen.append)
    state = RunState(run_id="r", start=0, finish=1, operation=Operation.FORWARD)
    lifecycle = RunLifecycle(bus=bus, state=state)

    lifecycle.start()
    lifecycle.succeed()

    assert [e.sequence for e in seen] == [1, 2]
    assert state.next_sequence() == 3
