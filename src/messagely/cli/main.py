"""Messagely CLI: run the server and talk to it from a terminal.

Usage:
    messagely init-db                          # Create tables in MESSAGELY_DATABASE_URL
    messagely serve                            # Run the API with uvicorn
    messagely register alice -f Alice -l Liddell -p 555-0100
    messagely login alice                      # Prints a token
    messagely send bob "lunch?"                # Needs MESSAGELY_TOKEN
    messagely inbox alice                      # Messages to alice
    messagely outbox alice                     # Messages from alice
    messagely show 42                          # One message
    messagely read 42                          # Mark it read
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

from messagely import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("MESSAGELY_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Messagely API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    return asyncio.run(coro)


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set MESSAGELY_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


def _check(r: httpx.Response) -> dict:
    """Return the JSON body, or print the API's error and exit."""
    if r.is_success:
        return r.json()
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    if not isinstance(detail, str):
        detail = json.dumps(detail)
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _print_messages(messages: list[dict], party_key: str) -> None:
    if not messages:
        click.echo("No messages.")
        return
    header = f"{'ID':<6}  {'USER':<16}  {'SENT':<20}  {'READ':<5}  BODY"
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for m in messages:
        party = m[party_key]["username"]
        read = "yes" if m.get("read_at") else "no"
        click.echo(
            f"{m['id']:<6}  {party[:16]:<16}  {str(m['sent_at'])[:19]:<20}  "
            f"{read:<5}  {m['body'][:60]}"
        )


token_option = click.option(
    "--token", envvar="MESSAGELY_TOKEN", help="Bearer token (or set MESSAGELY_TOKEN)"
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="messagely")
def main():
    """Messagely: private user-to-user messaging."""


# ---------------------------------------------------------------------------
# Server administration
# ---------------------------------------------------------------------------


@main.command("init-db")
def init_db():
    """Create all tables in the configured database."""
    from messagely.config import settings
    from messagely.db.engine import create_schema, engine

    async def _init():
        await create_schema()
        await engine.dispose()

    _run(_init())
    click.secho(f"Schema created in {settings.database_url}", fg="green")


@main.command()
@click.option("--host", default=None, help="Bind address (default: MESSAGELY_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: MESSAGELY_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from messagely.config import settings

    uvicorn.run(
        "messagely.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.option("--first-name", "-f", required=True)
@click.option("--last-name", "-l", required=True)
@click.option("--phone", "-p", required=True)
@click.password_option()
def register(username: str, first_name: str, last_name: str, phone: str, password: str):
    """Create an account and print its token."""

    async def _register():
        async with _client() as c:
            r = await c.post("/auth/register", json={
                "username": username,
                "password": password,
                "first_name": first_name,
                "last_name": last_name,
                "phone": phone,
            })
            return _check(r)

    click.echo(_run(_register())["token"])


@main.command()
@click.argument("username")
@click.password_option(confirmation_prompt=False)
def login(username: str, password: str):
    """Log in and print a token."""

    async def _login():
        async with _client() as c:
            r = await c.post("/auth/login", json={"username": username, "password": password})
            return _check(r)

    click.echo(_run(_login())["token"])


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@main.command()
@click.argument("to_username")
@click.argument("body")
@token_option
def send(to_username: str, body: str, token: Optional[str]):
    """Send BODY to TO_USERNAME."""
    token = _require_token(token)

    async def _send():
        async with _client(token) as c:
            r = await c.post("/messages", json={"to_username": to_username, "body": body})
            return _check(r)

    msg = _run(_send())["message"]
    click.secho(f"Message #{msg['id']} sent to {msg['to_username']}", fg="green")


@main.command()
@click.argument("username")
@token_option
def inbox(username: str, token: Optional[str]):
    """List messages sent to USERNAME (must be you)."""
    token = _require_token(token)

    async def _inbox():
        async with _client(token) as c:
            return _check(await c.get(f"/users/{username}/to"))

    _print_messages(_run(_inbox())["messages"], "from_user")


@main.command()
@click.argument("username")
@token_option
def outbox(username: str, token: Optional[str]):
    """List messages sent by USERNAME (must be you)."""
    token = _require_token(token)

    async def _outbox():
        async with _client(token) as c:
            return _check(await c.get(f"/users/{username}/from"))

    _print_messages(_run(_outbox())["messages"], "to_user")


@main.command()
@click.argument("message_id", type=int)
@token_option
def show(message_id: int, token: Optional[str]):
    """Show one message."""
    token = _require_token(token)

    async def _show():
        async with _client(token) as c:
            return _check(await c.get(f"/messages/{message_id}"))

    msg = _run(_show())["message"]
    click.echo(f"From:    {msg['from_user']['username']}")
    click.echo(f"To:      {msg['to_user']['username']}")
    click.echo(f"Sent:    {msg['sent_at']}")
    click.echo(f"Read:    {msg['read_at'] or '-'}")
    click.echo("")
    click.echo(msg["body"])


@main.command()
@click.argument("message_id", type=int)
@token_option
def read(message_id: int, token: Optional[str]):
    """Mark a message you received as read."""
    token = _require_token(token)

    async def _read():
        async with _client(token) as c:
            return _check(await c.post(f"/messages/{message_id}/read"))

    msg = _run(_read())["message"]
    click.secho(f"Message #{msg['id']} read at {msg['read_at']}", fg="green")


if __name__ == "__main__":
    main()
