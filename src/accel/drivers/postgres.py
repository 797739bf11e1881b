from __future__ import annotations

from typing import Any

import psycopg
import structlog

from accel.core.errors import BackendUnavailable, StepFailure
from accel.drivers.base import BaseDriver

log = structlog.get_logger()

QUERIES = {
    "create_schema": "CREATE SCHEMA IF NOT EXISTS accelerate",
    "create_table": """
        CREATE TABLE IF NOT EXISTS accelerate.state (
            status   integer,
            inserted timestamp DEFAULT current_timestamp
        )
    """,
    "select_status": """
          SELECT status
            FROM accelerate.state
        ORDER BY inserted DESC
           LIMIT 1
    """,
    "insert_status": "INSERT INTO accelerate.state (status) VALUES (%s)",
}


class PostgresDriver(BaseDriver):
    """
    PostgreSQL backend on psycopg's async connection.

    Status history is append-only: each write inserts a row and the newest
    row wins. Any connection-level failure drops the connection so the next
    call reconnects.
    """

    schemes = ("pg", "postgres", "postgresql")

    def __init__(self, url: str) -> None:
        super().__init__(url)
        self._conn: psycopg.AsyncConnection | None = None

    @property
    def conninfo(self) -> str:
        # psycopg does not understand the short "pg://" form
        scheme, sep, rest = self.url.partition("://")
        if sep and scheme.lower() == "pg":
            return f"postgresql://{rest}"
        return self.url

    async def connect(self) -> psycopg.AsyncConnection:
        if self._conn is not None and not self._conn.closed:
            return self._conn

        log.info("postgres.connecting")
        try:
            conn = await psycopg.AsyncConnection.connect(self.conninfo, autocommit=True)
        except psycopg.Error as exc:
            raise BackendUnavailable(f"cannot connect to postgres: {exc}") from exc

        try:
            await conn.execute(QUERIES["create_schema"])
            await conn.execute(QUERIES["create_table"])
        except psycopg.Error as exc:
            await conn.close()
            raise BackendUnavailable(f"cannot prepare postgres state table: {exc}") from exc

        self._conn = conn
        return conn

    async def close(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.close()
        finally:
            self._conn = None

    async def _reset(self) -> None:
        log.warning("postgres.reconnecting")
        conn, self._conn = self._conn, None
        if conn is not None and not conn.closed:
            await conn.close()

    async def read_cursor(self) -> Any:
        conn = await self.connect()
        try:
            cur = await conn.execute(QUERIES["select_status"])
            row = await cur.fetchone()
        except psycopg.Error as exc:
            await self._reset()
            raise BackendUnavailable(f"cannot read status: {exc}") from exc
        return row[0] if row else None

    async def write_cursor(self, cursor: int) -> None:
        conn = await self.connect()
        try:
            await conn.execute(QUERIES["insert_status"], (cursor,))
        except psycopg.Error as exc:
            await self._reset()
            raise BackendUnavailable(f"cannot write status {cursor}: {exc}") from exc

    async def run_step(self, step: Any) -> None:
        if not isinstance(step, str):
            raise StepFailure(f"postgres steps must be SQL text, got {type(step).__name__}")

        conn = await self.connect()
        try:
            await conn.execute(step)
        except psycopg.OperationalError as exc:
            await self._reset()
            raise BackendUnavailable(f"connection lost while running step: {exc}") from exc
        except psycopg.Error as exc:
            raise StepFailure(f"step rejected: {exc}") from exc
