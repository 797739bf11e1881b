from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from accel.catalog.motion import Motion
from accel.drivers.memory import MemoryDriver


# Each motion transforms a string; VALUES[i] is the value with i motions applied.
VALUES = [
    None,
    "hello",
    "hello world",
    "hellu wurld",
    "HELLU WURLD",
    "HEllU WURlD",
]


def hello_motions() -> tuple[Motion, ...]:
    return (
        Motion(name="000-hello", forward=lambda v: "hello", backward=lambda v: None),
        Motion(name="001-world", forward=lambda v: f"{v} world", backward=lambda v: v[:-6]),
        Motion(name="002-vowels", forward=lambda v: v.replace("o", "u"), backward=lambda v: v.replace("u", "o")),
        Motion(name="003-upper", forward=lambda v: v.upper(), backward=lambda v: v.lower()),
        Motion(name="004-ells", forward=lambda v: v.replace("L", "l"), backward=lambda v: v.replace("l", "L")),
    )


class StepError(Exception):
    pass


class RecordingDriver:
    """
    Async driver that logs every call and can be told to fail.

    Steps are (index, direction) tuples so tests can assert execution order.
    """

    def __init__(self, *, cursor: Any = None, delay: float = 0.0) -> None:
        self.cursor = cursor
        self.delay = delay
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[Any] = set()
        self.fail_write = False
        self.in_flight = 0
        self.max_in_flight = 0

    async def read_cursor(self) -> Any:
        self.calls.append(("read", self.cursor))
        return self.cursor

    async def write_cursor(self, cursor: int) -> None:
        self.calls.append(("write", cursor))
        if self.fail_write:
            raise OSError("disk full")
        self.cursor = cursor

    async def run_step(self, step: Any) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.calls.append(("begin", step))
            if self.delay:
                await asyncio.sleep(self.delay)
            else:
                await asyncio.sleep(0)
            if step in self.fail_on:
                raise StepError(f"step {step} failed")
            self.calls.append(("end", step))
        finally:
            self.in_flight -= 1

    @property
    def steps(self) -> list[Any]:
        return [s for kind, s in self.calls if kind == "end"]

    @property
    def writes(self) -> list[int]:
        return [c for kind, c in self.calls if kind == "write"]


def tagged_motions(n: int) -> tuple[Motion, ...]:
    return tuple(
        Motion(name=f"{i:03d}-m{i}", forward=(i, "forward"), backward=(i, "backward"))
        for i in range(n)
    )


@pytest.fixture
def memory_driver() -> MemoryDriver:
    return MemoryDriver()


@pytest.fixture
def recording_driver() -> RecordingDriver:
    return RecordingDriver()


def write_catalog(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, body in files.items():
        (directory / name).write_text(body, encoding="utf-8")
    return directory


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """
    A standard catalog: 3-digit versions, '-' separator, '.sql' extension.
    """
    return write_catalog(
        tmp_path / "motions",
        {
            "xxx-template.add.sql": "-- add\n",
            "xxx-template.sub.sql": "-- sub\n",
            "001-create-users.add.sql": "CREATE TABLE users (id int);\n",
            "001-create-users.sub.sql": "DROP TABLE users;\n",
            "002-add-email.add.sql": "ALTER TABLE users ADD email text;\n",
            "002-add-email.sub.sql": "ALTER TABLE users DROP email;\n",
            "004-index-email.add.sql": "CREATE INDEX users_email ON users (email);\n",
            "004-index-email.sub.sql": "DROP INDEX users_email;\n",
        },
    )
