"""CLI entry point for redis-session-store.

Invoked as::

    redis-session-store [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m redis_session_store.cli.main

Commands
--------
- version   — Show version information
- sessions  — Inspect or clear the sessions under one prefix

Sessions sub-commands
---------------------
- sessions length  — Count stored sessions
- sessions ids     — List stored session IDs
- sessions show    — Print one session as JSON
- sessions all     — Print every session as JSON
- sessions clear   — Delete every key under the prefix
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Awaitable, Callable, TypeVar

import click
from rich.console import Console
from rich.table import Table

from redis_session_store.errors import SessionStoreError

console = Console()

T = TypeVar("T")

_DEFAULT_URL = "redis://localhost:6379/0"

# ---------------------------------------------------------------------------
# Store factory
# ---------------------------------------------------------------------------


def _make_store(url: str, prefix: str, tombstones: bool) -> Any:
    """Return a ``RedisStore`` connected to ``url``.

    A blocking client is used so that each command may run in its own
    ``asyncio.run`` loop.
    """
    from redis_session_store.storage.redis import SyncRedisClient
    from redis_session_store.store import RedisStore

    return RedisStore(SyncRedisClient.from_url(url), prefix=prefix, tombstones=tombstones)


def _run(ctx: click.Context, operation: Callable[[Any], Awaitable[T]]) -> T:
    """Run ``operation(store)`` to completion, exiting 1 on store errors."""
    store = ctx.obj["store"]

    async def _call() -> T:
        try:
            return await operation(store)
        finally:
            await store.close()

    try:
        return asyncio.run(_call())
    except SessionStoreError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, help="Log store commands at DEBUG level.")
def cli(verbose: bool) -> None:
    """Redis-backed HTTP session storage"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="version")
def version_command() -> None:
    """Show version information."""
    from redis_session_store import __version__

    console.print(f"[bold]redis-session-store[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# sessions command group
# ---------------------------------------------------------------------------


@cli.group(name="sessions")
@click.option(
    "--url",
    default=_DEFAULT_URL,
    show_default=True,
    envvar="REDIS_URL",
    help="Redis connection URL.",
)
@click.option("--prefix", default="sess:", show_default=True, help="Session key prefix.")
@click.option("--tombstones", is_flag=True, help="Treat TOMBSTONE values as destroyed sessions.")
@click.pass_context
def sessions_group(ctx: click.Context, url: str, prefix: str, tombstones: bool) -> None:
    """Session inspection commands."""
    ctx.ensure_object(dict)
    ctx.obj["store"] = _make_store(url, prefix, tombstones)


@sessions_group.command(name="length")
@click.pass_context
def sessions_length(ctx: click.Context) -> None:
    """Print the number of stored sessions."""
    count = _run(ctx, lambda store: store.length())
    console.print(str(count))


@sessions_group.command(name="ids")
@click.pass_context
def sessions_ids(ctx: click.Context) -> None:
    """List stored session IDs."""
    ids = _run(ctx, lambda store: store.ids())
    if not ids:
        console.print("[yellow]No sessions found.[/yellow]")
        return

    table = Table(title=f"Sessions ({len(ids)})")
    table.add_column("Session ID", style="cyan")
    for session_id in ids:
        table.add_row(session_id)
    console.print(table)


@sessions_group.command(name="show")
@click.argument("session_id")
@click.pass_context
def sessions_show(ctx: click.Context, session_id: str) -> None:
    """Print the session SESSION_ID as JSON."""
    session = _run(ctx, lambda store: store.get(session_id))
    if session is None:
        console.print(f"[red]Session not found:[/red] {session_id}")
        sys.exit(1)
    console.print_json(json.dumps(session, default=str))


@sessions_group.command(name="all")
@click.pass_context
def sessions_all(ctx: click.Context) -> None:
    """Print every stored session as a JSON array."""
    sessions = _run(ctx, lambda store: store.all())
    console.print_json(json.dumps(sessions, default=str))


@sessions_group.command(name="clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def sessions_clear(ctx: click.Context, yes: bool) -> None:
    """Delete every key under the prefix."""
    if not yes:
        click.confirm("Delete all sessions under this prefix?", abort=True)
    deleted = _run(ctx, lambda store: store.clear())
    console.print(f"[green]Deleted {deleted} key(s).[/green]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    cli()
