from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import structlog

from accel.catalog.discovery import discover
from accel.core.config.settings import AppSettings
from accel.core.engine.engine import Accelerator
from accel.core.engine.router import EventHandler, Observer
from accel.core.events.base import Event
from accel.core.events.bus import ALL_EVENTS
from accel.drivers.base import Driver
from accel.drivers.registry import get_driver
from accel.storage.jsonl import JsonlEventStore

log = structlog.get_logger()


@dataclass(slots=True)
class JournalComponent:
    """
    Observer that appends every run event to a JSONL journal.
    """

    store: JsonlEventStore

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return [(ALL_EVENTS, self._on_event)]

    def _on_event(self, e: Event) -> None:
        self.store.append(e)

    def close(self) -> None:
        self.store.close()


def build_accelerator(
    settings: AppSettings,
    *,
    driver: Optional[Driver] = None,
    observers: Sequence[Observer] = (),
) -> Accelerator:
    """
    Canonical assembly: settings -> catalog + driver + observers -> Accelerator.
    """
    motions = discover(settings.motions_dir)
    if driver is None:
        driver = get_driver(settings.database_url, name=settings.driver)

    wired: list[Observer] = list(observers)
    if settings.journal_path is not None:
        wired.append(JournalComponent(store=JsonlEventStore(path=settings.journal_path)))

    log.info(
        "accelerator.assembled",
        motions=len(motions),
        driver=type(driver).__name__,
        single_flight=settings.single_flight,
        journal=str(settings.journal_path) if settings.journal_path else None,
    )

    return Accelerator(
        driver,
        motions,
        observers=wired,
        single_flight=settings.single_flight,
    )
