from __future__ import annotations

import inspect
from typing import Any, Callable

import structlog

from accel.drivers.base import BaseDriver

log = structlog.get_logger()


class MemoryDriver(BaseDriver):
    """
    In-process driver for tests and dry runs.

    - cursor lives on the instance (None until first write)
    - steps are callables value -> value, sync or async
    - history records every step in execution order
    """

    schemes = ("memory",)

    def __init__(self, url: str = "memory://", *, value: Any = None) -> None:
        super().__init__(url)
        self.cursor: Any = None
        self.value = value
        self.history: list[Any] = []
        self.writes: list[int] = []

    async def read_cursor(self) -> Any:
        return self.cursor

    async def write_cursor(self, cursor: int) -> None:
        self.cursor = cursor
        self.writes.append(cursor)

    async def run_step(self, step: Any) -> None:
        self.history.append(step)
        if not callable(step):
            # plain payloads (e.g. SQL text from a catalog) are only recorded
            log.debug("memory.step_recorded", step=str(step)[:80])
            return

        fn: Callable[[Any], Any] = step
        result = fn(self.value)
        if inspect.isawaitable(result):
            result = await result
        self.value = result
