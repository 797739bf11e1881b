from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import orjson
import structlog


def _json_serializer(obj: Any, default: Any) -> str:
    """
    JSON serializer for structured logs, backed by orjson.
    """
    return orjson.dumps(obj, default=default).decode("utf-8")


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # resolve sys.stderr per logger so redirected streams (CLI runners, pytest) are honored
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(*, level: str = "INFO") -> None:
    """
    Configure structured logging for the whole process.

    Logs go to stderr so stdout stays clean for CLI output.
    Call at startup (CLI callback, ASGI app factory).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        # run_id, operation, ... bound per run
        structlog.contextvars.merge_contextvars,

        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),

        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.dict_tracebacks,

        structlog.processors.JSONRenderer(serializer=_json_serializer),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=False,
    )

    # Route stdlib logging (psycopg, uvicorn) to the same stream
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def bind_context(**values: Any) -> None:
    """
    Bind contextual information to all future log entries of the current context.

    Example:
        bind_context(component="cli")
    """
    structlog.contextvars.bind_contextvars(**values)


def bound_context(**values: Any) -> AbstractContextManager[None]:
    """
    Bind context for the duration of a with-block, restoring the previous
    values afterwards. Used per run so overlapping runs don't leak run_id.
    """
    return structlog.contextvars.bound_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
