from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True, slots=True)
class Motion:
    """
    One reversible unit of change.

    forward/backward are whatever the driver's run_step understands:
    SQL text for PostgresDriver, callables for MemoryDriver.
    """

    name: str
    forward: Any
    backward: Any

    version: tuple[int, ...] = ()
    forward_name: str | None = None
    backward_name: str | None = None

    def step(self, selector: str) -> Any:
        if selector == "forward":
            return self.forward
        if selector == "backward":
            return self.backward
        raise ValueError(f"unknown motion selector: {selector!r}")


MotionCatalog = Sequence[Motion]
