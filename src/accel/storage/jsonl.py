# src/accel/storage/jsonl.py
from __future__ import annotations

import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Mapping

import orjson

from accel.core.events.base import Event


class JsonlEventStore:
    """
    Append-only JSONL event store.

    - One event per line (JSON object, sorted keys).
    - fsync on demand for crash safety.
    - Preserves publish order as written.
    """

    def __init__(self, *, path: Path, fsync: bool = True) -> None:
        self._path = path
        self._fsync = fsync
        self._fh = None  # lazy open

        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self) -> None:
        if self._fh is not None:
            return
        self._fh = self._path.open("ab")

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.flush()
            if self._fsync:
                os.fsync(self._fh.fileno())
        finally:
            self._fh.close()
            self._fh = None

    def append(self, event: Event) -> None:
        """
        Append an event as a single JSON line.

        UUID and datetime are native to orjson; anything else falls back to str.
        """
        self.open()
        assert self._fh is not None

        line = orjson.dumps(_event_to_dict(event), option=orjson.OPT_SORT_KEYS, default=str)
        self._fh.write(line + b"\n")
        self._fh.flush()
        if self._fsync:
            os.fsync(self._fh.fileno())

    def iter_events(self) -> list[Mapping[str, Any]]:
        """
        Read all events back as dicts.
        """
        if not self._path.exists():
            return []
        out: list[Mapping[str, Any]] = []
        with self._path.open("rb") as fh:
            for line in fh:
                s = line.strip()
                if not s:
                    continue
                out.append(orjson.loads(s))
        return out


def _event_to_dict(event: Event) -> dict[str, Any]:
    d = asdict(event)
    # event_type is a ClassVar, asdict skips it
    d["event_type"] = event.event_type
    return d
