from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, Sequence

from accel.core.events.base import Event
from accel.core.events.bus import EventBus, Subscription


EventHandler = Callable[[Event], None]


class Observer(Protocol):
    """
    A component that listens to run events on an EventBus.
    """

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        """
        Return (event_type, handler) tuples. "*" receives every event.
        """
        ...


@dataclass(frozen=True, slots=True)
class WiredSubscription:
    component: str
    subscription: Subscription


@dataclass(frozen=True, slots=True)
class RouterWiring:
    """
    Wiring produced when observers are registered, kept for debugging.
    """

    subscriptions: tuple[WiredSubscription, ...]

    def components(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(w.component for w in self.subscriptions))


class ObserverRouter:
    """
    Registers observers onto an EventBus in a fixed order.

      - observers are wired in the order provided
      - each observer's subscriptions() order is preserved
      - the same handler twice for one event_type is rejected
    """

    def __init__(self, *, bus: EventBus) -> None:
        self._bus = bus

    @staticmethod
    def _component_name(component: object) -> str:
        return type(component).__name__

    def register(self, observers: Iterable[Observer]) -> RouterWiring:
        wired: list[WiredSubscription] = []
        seen: set[tuple[str, EventHandler]] = set()

        for observer in observers:
            cname = self._component_name(observer)

            subs = observer.subscriptions()
            if not isinstance(subs, Sequence):
                raise TypeError(f"{cname}.subscriptions() must return a Sequence")

            for event_type, handler in subs:
                if not event_type:
                    raise ValueError(f"{cname} produced empty event_type")

                key = (event_type, handler)
                if key in seen:
                    raise RuntimeError(f"duplicate subscription detected: component={cname} event_type={event_type}")
                seen.add(key)

                s = self._bus.subscribe(event_type=event_type, handler=handler)
                wired.append(WiredSubscription(component=cname, subscription=s))

        return RouterWiring(subscriptions=tuple(wired))
