from __future__ import annotations

from typing import Any, Awaitable, Protocol, runtime_checkable


@runtime_checkable
class Driver(Protocol):
    """
    Backend capability contract consumed by the engine.

    Methods may be coroutines or plain functions; DriverAdapter awaits
    whatever comes back.

    - read_cursor: last persisted cursor, or anything non-integer when none exists
    - write_cursor: persist a cursor value (must be idempotent under retry)
    - run_step: execute one motion half
    """

    def read_cursor(self) -> Awaitable[Any] | Any:
        ...

    def write_cursor(self, cursor: int) -> Awaitable[None] | None:
        ...

    def run_step(self, step: Any) -> Awaitable[None] | None:
        ...


class BaseDriver:
    """
    Convenience base for url-addressed drivers.
    """

    #: url schemes this driver accepts, e.g. ("postgres", "postgresql")
    schemes: tuple[str, ...] = ()

    def __init__(self, url: str) -> None:
        self.url = url

    @classmethod
    def accepts(cls, url: str) -> bool:
        scheme, sep, _ = url.partition("://")
        return bool(sep) and scheme.lower() in cls.schemes

    async def read_cursor(self) -> Any:
        raise NotImplementedError

    async def write_cursor(self, cursor: int) -> None:
        raise NotImplementedError

    async def run_step(self, step: Any) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r})"
