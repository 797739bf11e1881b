from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, TypeAlias

import structlog

from accel.core.events.base import Event

log = structlog.get_logger()

EventHandler: TypeAlias = Callable[[Event], None]

ALL_EVENTS = "*"


@dataclass(frozen=True)
class Subscription:
    """
    Represents a subscription of a handler to a specific event_type.
    """

    event_type: str
    handler: EventHandler


class EventBus:
    """
    Synchronous in-process event bus.

    - publish(event) dispatches to handlers of event.event_type, then to "*" handlers
    - dispatch order is subscription order
    - fail_fast=True raises the first handler error; False logs it and keeps dispatching
    """

    def __init__(self, *, fail_fast: bool = True) -> None:
        self._fail_fast = fail_fast
        self._handlers: DefaultDict[str, list[EventHandler]] = defaultdict(list)

    @property
    def fail_fast(self) -> bool:
        return self._fail_fast

    def subscribe(self, *, event_type: str, handler: EventHandler) -> Subscription:
        if not event_type:
            raise ValueError("event_type must be non-empty")
        self._handlers[event_type].append(handler)
        log.debug("bus.subscribed", event_type=event_type, handler=getattr(handler, "__name__", "handler"))
        return Subscription(event_type=event_type, handler=handler)

    def unsubscribe(self, subscription: Subscription) -> None:
        handlers = self._handlers.get(subscription.event_type, [])
        if subscription.handler in handlers:
            handlers.remove(subscription.handler)

    def publish(self, event: Event) -> None:
        handlers = self.subscribers_for(event.event_type)
        log.debug(
            "bus.publish",
            event_type=event.event_type,
            event_id=str(event.event_id),
            handlers=len(handlers),
        )
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                if self._fail_fast:
                    raise
                log.exception(
                    "bus.handler_failed",
                    event_type=event.event_type,
                    handler=getattr(handler, "__name__", "handler"),
                )

    def subscribers_for(self, event_type: str) -> tuple[EventHandler, ...]:
        specific = self._handlers.get(event_type, [])
        wildcard = self._handlers.get(ALL_EVENTS, []) if event_type != ALL_EVENTS else []
        return tuple(specific) + tuple(wildcard)

    def has_subscribers(self) -> bool:
        return any(self._handlers.values())

