from __future__ import annotations

from accel.core.errors import DriverNotFound
from accel.drivers.base import BaseDriver
from accel.drivers.memory import MemoryDriver
from accel.drivers.postgres import PostgresDriver

DRIVERS: dict[str, type[BaseDriver]] = {
    "memory": MemoryDriver,
    "postgres": PostgresDriver,
}


def has_driver(name: str) -> bool:
    return name in DRIVERS


def get_driver(url: str, *, name: str | None = None) -> BaseDriver:
    """
    Build a driver for url.

    An explicit name wins; otherwise the first driver accepting the url
    scheme is used.
    """
    if name is not None:
        cls = DRIVERS.get(name)
        if cls is None:
            raise DriverNotFound(f"driver for name {name!r} could not be found")
        return cls(url)

    for cls in DRIVERS.values():
        if cls.accepts(url):
            return cls(url)

    raise DriverNotFound(
        f"no driver will accept target {url!r}; pass an explicit driver name"
    )
