"""UserGate CLI — run the server and inspect the user store.

Usage:
    usergate serve                      # Run the API (needs USERGATE_JWT_SECRET)
    usergate serve --port 8080 --reload
    usergate users                      # List users in the store file
    usergate users --store ./db.json --json
    usergate secret                     # Print a fresh signing secret
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import secrets
import sys
from typing import Optional

import click
from pydantic import ValidationError

from usergate import __version__
from usergate.log import configure_logging

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via CliRunner inside an
    async test) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()



def _store_path(store: Optional[str]) -> str:
    """Resolve the store path from flag or USERGATE_STORE_PATH env var."""
    return store or os.environ.get("USERGATE_STORE_PATH", "db.json")


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="usergate")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for CLI commands (logs go to stderr)",
)
def main(log_level: str):
    """UserGate — token-authenticated user accounts."""
    configure_logging(log_level)


@main.command()
@click.option("--host", default=None, help="Bind address (default: USERGATE_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: USERGATE_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from usergate.config import get_settings

    try:
        settings = get_settings()
    except ValidationError as e:
        for err in e.errors():
            click.secho(f"Error: {err['msg']}", fg="red", err=True)
        sys.exit(1)

    uvicorn.run(
        "usergate.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.option("--store", default=None, help="Store file (default: USERGATE_STORE_PATH or db.json)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def users(store: Optional[str], as_json: bool):
    """List the users held in a store file. Passwords are never shown."""
    from usergate.db.store import UserStore
    from usergate.errors import StorageUnavailable

    path = _store_path(store)
    if not os.path.exists(path):
        click.secho(f"Error: store file not found: {path}", fg="red", err=True)
        sys.exit(1)

    user_store = UserStore(path)
    try:
        _run(user_store.load())
    except StorageUnavailable as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)

    rows = [u.public() for u in user_store.find_all()]
    if as_json:
        click.echo(_pretty_json(rows))
        return
    if not rows:
        click.echo("No users.")
        return
    _print_table(
        rows,
        [
            ("ID", "id", 36),
            ("ACCOUNT", "account", 16),
            ("NAME", "name", 20),
            ("MAIL", "mail", 28),
        ],
    )


@main.command()
def secret():
    """Print a random value suitable for USERGATE_JWT_SECRET."""
    click.echo(secrets.token_urlsafe(32))


if __name__ == "__main__":
    main()
