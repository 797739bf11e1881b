from __future__ import annotations

import inspect
from typing import Any

from accel.core.engine.bounds import clamp
from accel.drivers.base import Driver


async def _settle(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class DriverAdapter:
    """
    Normalizing wrapper around a backend driver.

    - read_cursor: anything that is not an int (no rows yet, None, "") reads as 0
    - write_cursor: value clamped to [0, motion_count] before delegating
    - run_step: passed through unchanged

    Sync and async drivers are both accepted. Errors propagate unchanged.
    """

    def __init__(self, driver: Driver, *, motion_count: int) -> None:
        if motion_count < 0:
            raise ValueError("motion_count must be >= 0")
        self._driver = driver
        self._motion_count = motion_count

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def motion_count(self) -> int:
        return self._motion_count

    def in_bounds(self, n: int | float) -> int:
        return clamp(n, 0, self._motion_count)

    async def read_cursor(self) -> int:
        value = await _settle(self._driver.read_cursor())
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    async def write_cursor(self, cursor: int | float) -> int:
        bounded = self.in_bounds(cursor)
        await _settle(self._driver.write_cursor(bounded))
        return bounded

    async def run_step(self, step: Any) -> None:
        await _settle(self._driver.run_step(step))
