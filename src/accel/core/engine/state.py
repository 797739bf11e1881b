from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from accel.core.engine.operation import Operation

RunPhase = Literal["idle", "running", "succeeded", "failed"]


@dataclass(slots=True)
class RunState:
    """
    Ephemeral state of a single run.

    - start/finish: clamped cursor bounds
    - reached: cursor value after the last completed step
    - sequence: monotonic counter for events emitted by this run

    Guardrails:
      - advance only valid while running
      - next_sequence is unguarded so the settle events can be numbered
      - a settled run never re-enters running
    """

    run_id: str
    start: int
    finish: int
    operation: Operation
    reached: int = 0
    sequence: int = 0
    phase: RunPhase = "idle"

    def __post_init__(self) -> None:
        self.reached = self.start

    @property
    def is_running(self) -> bool:
        return self.phase == "running"

    @property
    def is_settled(self) -> bool:
        return self.phase in ("succeeded", "failed")

    @property
    def indices(self) -> range:
        """
        Catalog indices to visit, in execution order.

        The backward shift is applied here: stepping down from cursor v
        touches motion v-1.
        """
        shift = self.operation.index_shift
        return range(self.start + shift, self.finish + shift, self.operation.unit)

    def advance(self) -> int:
        if not self.is_running:
            raise RuntimeError("cannot advance cursor when run is not running")
        self.reached += self.operation.unit
        return self.reached

    def next_sequence(self) -> int:
        self.sequence += 1
        return self.sequence
