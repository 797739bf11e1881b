"""CLI for accel."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, NoReturn, Optional

import structlog
import typer

from accel.catalog.discovery import create as create_motion
from accel.catalog.discovery import discover
from accel.core.assembly import build_accelerator
from accel.core.config.settings import AppSettings, settings
from accel.core.engine.engine import Accelerator
from accel.core.errors import AccelError
from accel.core.logging.setup import bind_context, configure_logging

app = typer.Typer(
    name="accel",
    help="Accelerate back and forth through time for your database or other in-place systems",
    no_args_is_help=True,
)

logger = structlog.get_logger()


@app.callback()
def main(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(
        None, "--directory", "-d", help="Directory holding the motions (defaults to ACCEL_MOTIONS_DIR)"
    ),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="Target url to accelerate (defaults to ACCEL_DATABASE_URL)"
    ),
    driver: Optional[str] = typer.Option(
        None, "--driver", help="Driver name; inferred from the target url when omitted"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level"),
):
    """Initialize configuration and logging."""
    overrides = {
        "motions_dir": directory,
        "database_url": target,
        "driver": driver,
        "log_level": log_level,
    }
    cfg = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    configure_logging(level=cfg.log_level)
    bind_context(component="cli")
    ctx.obj = cfg


def _config(ctx: typer.Context) -> AppSettings:
    cfg = ctx.obj
    if not isinstance(cfg, AppSettings):
        cfg = settings
    return cfg


def _fail(exc: Exception) -> NoReturn:
    logger.error("cli.failed", error_type=type(exc).__name__, error_message=str(exc))
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    raise typer.Exit(1)


def _run(ctx: typer.Context, action: Optional[Callable[[Accelerator], Awaitable[None]]] = None) -> None:
    """Build an accelerator, run one action and report the resulting status."""
    cfg = _config(ctx)

    async def go() -> int:
        accelerator = build_accelerator(cfg)
        try:
            if action is not None:
                await action(accelerator)
            return await accelerator.status()
        finally:
            await accelerator.close()

    try:
        status = asyncio.run(go())
    except AccelError as exc:
        _fail(exc)

    typer.echo(f"status: {status}")


# =============================================================================
# Catalog Commands
# =============================================================================


@app.command("ls")
def ls(ctx: typer.Context):
    """List all motions in the directory."""
    try:
        motions = discover(_config(ctx).motions_dir)
    except AccelError as exc:
        _fail(exc)

    if not motions:
        typer.echo("No motions found")
        return

    for i, motion in enumerate(motions):
        typer.echo(f"  {i:>4}  {motion.name}")


@app.command("create")
def create(ctx: typer.Context, name: str = typer.Argument(..., help="Name to use for the new motion")):
    """Create a new motion using the template."""
    try:
        add_path, sub_path = create_motion(_config(ctx).motions_dir, name)
    except AccelError as exc:
        _fail(exc)

    typer.echo(f"✓ created {add_path.name}")
    typer.echo(f"✓ created {sub_path.name}")


# =============================================================================
# Engine Commands
# =============================================================================


@app.command("status")
def status(ctx: typer.Context):
    """Show how many motions are applied."""
    _run(ctx)


@app.command("up")
def up(ctx: typer.Context):
    """Add all remaining motions."""
    _run(ctx, lambda a: a.up())


@app.command("down")
def down(ctx: typer.Context):
    """Subtract all previous motions."""
    _run(ctx, lambda a: a.down())


@app.command("redo")
def redo(ctx: typer.Context):
    """Subtract then add the last motion."""
    _run(ctx, lambda a: a.redo())


@app.command("reset")
def reset(ctx: typer.Context):
    """Subtract then add all previous motions."""
    _run(ctx, lambda a: a.reset())


@app.command("add")
def add(ctx: typer.Context, n: int = typer.Argument(1, min=0, help="How many motions to add")):
    """Add n motions."""
    _run(ctx, lambda a: a.add(n))


@app.command("sub")
def sub(ctx: typer.Context, n: int = typer.Argument(1, min=0, help="How many motions to subtract")):
    """Subtract n motions."""
    _run(ctx, lambda a: a.sub(n))


@app.command("goto")
def goto(ctx: typer.Context, n: int = typer.Argument(..., help="Catalog index that should be the last one applied")):
    """Go to the state where motion n is the last one applied."""
    _run(ctx, lambda a: a.goto(n))


if __name__ == "__main__":
    app()
