from __future__ import annotations

import asyncio
import math
from contextlib import nullcontext
from typing import AsyncContextManager, Iterable, Optional, Sequence

import structlog

from accel.catalog.motion import Motion
from accel.core.engine.adapter import DriverAdapter
from accel.core.engine.executor import SequentialExecutor
from accel.core.engine.router import Observer, ObserverRouter, RouterWiring
from accel.core.events.bus import EventBus
from accel.drivers.base import Driver

log = structlog.get_logger()


class Accelerator:
    """
    Moves a backend back and forth through a motion catalog.

    Every operation re-reads the cursor from the driver, runs to completion
    (or first failure) and returns None; failures raise.

    Overlapping calls on one instance are not serialized unless
    single_flight=True, in which case each public operation (including both
    phases of redo/reset) holds a per-instance lock.
    """

    def __init__(
        self,
        driver: Driver,
        motions: Sequence[Motion],
        *,
        bus: Optional[EventBus] = None,
        observers: Optional[Iterable[Observer]] = None,
        single_flight: bool = False,
    ) -> None:
        self._motions = tuple(motions)
        self._adapter = DriverAdapter(driver, motion_count=len(self._motions))
        self._bus = bus if bus is not None else EventBus()
        self._executor = SequentialExecutor(adapter=self._adapter, motions=self._motions, bus=self._bus)
        self._guard = asyncio.Lock() if single_flight else None

        self._observers = tuple(observers) if observers is not None else ()
        self._wiring: RouterWiring | None = None
        if observers is not None:
            self._wiring = ObserverRouter(bus=self._bus).register(self._observers)

    @property
    def motions(self) -> tuple[Motion, ...]:
        return self._motions

    @property
    def driver(self) -> Driver:
        return self._adapter.driver

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def observers(self) -> tuple[Observer, ...]:
        return self._observers

    @property
    def wiring(self) -> RouterWiring | None:
        return self._wiring

    @property
    def single_flight(self) -> bool:
        return self._guard is not None

    async def close(self) -> None:
        """
        Release the driver, then every observer exposing close().
        Observers are closed even when the driver fails to close.
        """
        try:
            close = getattr(self.driver, "close", None)
            if close is not None:
                await close()
        finally:
            for observer in self._observers:
                close = getattr(observer, "close", None)
                if close is not None:
                    close()
        log.debug("accelerator.closed", observers=len(self._observers))

    def _guarded(self) -> AsyncContextManager:
        return self._guard if self._guard is not None else nullcontext()

    async def status(self) -> int:
        return await self._adapter.read_cursor()

    async def move(self, delta: int | float) -> None:
        async with self._guarded():
            await self._move(delta)

    async def goto(self, position: int | float) -> None:
        """
        Go to the state where catalog index `position` is the last one applied.
        """
        async with self._guarded():
            start = await self._adapter.read_cursor()
            await self._executor.execute(start, self._adapter.in_bounds(position + 1))

    async def up(self) -> None:
        await self.move(math.inf)

    async def down(self) -> None:
        await self.move(-math.inf)

    async def add(self, n: int = 1) -> None:
        await self.move(n)

    async def sub(self, n: int = 1) -> None:
        await self.move(-n)

    async def redo(self) -> None:
        """
        Step the last motion back then forward again. A no-op at cursor 0.
        """
        async with self._guarded():
            start = await self._adapter.read_cursor()
            if start <= 0:
                log.info("accelerator.redo_at_origin")
                await self._executor.execute(0, 0)
                return
            await self._move(-1)
            await self._move(+1)

    async def reset(self) -> None:
        """
        Step everything back to 0, then forward to where we were.
        """
        async with self._guarded():
            start = await self._adapter.read_cursor()
            await self._executor.execute(start, 0)
            await self._executor.execute(0, start)

    async def _move(self, delta: int | float) -> None:
        start = await self._adapter.read_cursor()
        await self._executor.execute(start, self._adapter.in_bounds(start + delta))
