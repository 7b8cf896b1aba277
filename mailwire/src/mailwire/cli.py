"""mailwire command-line interface.

What:
  Provide a Typer-based entry point for one-shot mailbox inspection: list
  mailboxes, show a mailbox status, count messages, and fetch an envelope or a
  parsed body.

Why:
  Operators need a quick way to check that a configuration reaches the server
  and that replies decode as expected, without writing asyncio code.

How:
  Every command loads :class:`~mailwire.config.schema.MailwireConfig`, opens an
  :class:`~mailwire.imap.client.ImapClient` inside :func:`asyncio.run`, logs in
  with the configured account, runs one operation, and prints the result as
  JSON on stdout. Structured client logs go to stderr.

Interfaces:
  ``app`` (Typer application), ``mailboxes``, ``status``, ``count``,
  ``envelope``, ``body``, ``main``.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - Credentials are read from the configuration only; they are never echoed.
"""
from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer

from .config import ConfigLoadError, MailwireConfig, load_config
from .imap import ImapClient, ImapError

app = typer.Typer(help="Inspect an IMAP mailbox from the command line")

LOGGER = logging.getLogger("mailwire.cli")

T = TypeVar("T")

ConfigOption = typer.Option(None, "--config", "-c", help="Path to mailwire.yaml")
MailboxOption = typer.Option("INBOX", "--mailbox", "-m", help="Mailbox to select")


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False, default=str))


async def _session(config: MailwireConfig, operation: Callable[[ImapClient], Awaitable[T]]) -> T:
    account = config.account
    if account is None:
        raise ConfigLoadError("Configuration has no 'account' section with IMAP credentials")
    async with ImapClient(config.imap) as client:
        await client.login(account.username, account.password)
        return await operation(client)


def _run(config_path: Optional[Path], operation: Callable[[ImapClient], Awaitable[T]]) -> T:
    """Load configuration, run ``operation`` on a logged-in client, map errors to exit 1."""

    try:
        config = load_config(config_path)
        return asyncio.run(_session(config, operation))
    except (ConfigLoadError, ImapError, OSError) as exc:
        LOGGER.error("Command failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def mailboxes(config: Optional[Path] = ConfigOption) -> None:
    """List every mailbox on the server."""

    _echo_json(_run(config, lambda client: client.list_mailboxes()))


@app.command()
def status(
    mailbox: str = typer.Argument(..., help="Mailbox to select"),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Select MAILBOX and print its status counters and flags."""

    _echo_json(_run(config, lambda client: client.select_mailbox(mailbox)))


@app.command()
def count(
    mailbox: str = MailboxOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print the number of messages in the mailbox."""

    async def operation(client: ImapClient) -> int:
        await client.select_mailbox(mailbox)
        return await client.fetch_email_count()

    _echo_json({"mailbox": mailbox, "count": _run(config, operation)})


@app.command()
def envelope(
    message_id: int = typer.Argument(..., metavar="ID", help="Message sequence number"),
    mailbox: str = MailboxOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Fetch and print the envelope of message ID."""

    async def operation(client: ImapClient):
        await client.select_mailbox(mailbox)
        return await client.fetch_email(message_id)

    _echo_json(_run(config, operation))


@app.command()
def body(
    message_id: int = typer.Argument(..., metavar="ID", help="Message sequence number"),
    fmt: str = typer.Option("TEXT", "--format", "-f", help="BODY section to fetch"),
    mailbox: str = MailboxOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Fetch BODY[FORMAT] of message ID and print the parsed message."""

    async def operation(client: ImapClient):
        await client.select_mailbox(mailbox)
        return await client.fetch_email_body(message_id, fmt)

    _echo_json(_run(config, operation))


def main() -> None:
    """Entry point for ``python -m mailwire.cli`` and the console script."""

    app()


if __name__ == "__main__":
    main()
