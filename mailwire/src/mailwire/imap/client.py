"""Asynchronous IMAP client facade.

What:
  Compose the command pipeline, the stream protocol, the response parsers and
  the body parser into the operations callers use: connect, login, list,
  select, search, fetch envelope, fetch body, and logout.

Why:
  Each operation is the same three steps: build one command, submit it through
  the single-connection pipeline, run the matching parser over the collected
  reply. Keeping the facade thin leaves protocol discipline in
  :mod:`mailwire.imap.pipeline` and decoding in :mod:`mailwire.parsers`.

How:
  :meth:`ImapClient.connect` opens the transport with
  :meth:`asyncio.loop.create_connection`, TLS included when ``secure`` is set.
  :meth:`ImapClient._call` submits a command, optionally bounds the wait with
  ``config.timeout``, and logs failures before re-raising them.

Interfaces:
  :class:`ImapClient`, :func:`quote_string`, :func:`quote_astring`.

Invariants & Safety:
  - One connection and one in-flight command per instance; replies complete
    in submission order.
  - Passwords never reach the log: ``LOGIN`` lines are masked by the pipeline
    and the ``password`` key is redacted by the logger.
  - There is no retry or reconnect. After a transport loss the caller must
    ``connect`` and ``login`` again.
"""
from __future__ import annotations

import asyncio
import re
import ssl
from typing import Any, Callable, List, Optional

from ..config.schema import ClientConfig
from ..models import EmailEnvelope, MailboxInfo, MailboxStatus, ParsedEmail
from ..parsers import parse_envelope, parse_list, parse_search, parse_select
from ..utils.logging import JsonLogger, get_logger
from ..utils.mime import parse_message
from .body import prepare_body
from .errors import CommandTimeoutError, ConnectionLostError, ImapError
from .pipeline import CommandPipeline
from .protocol import ImapStreamProtocol

BodyParser = Callable[[str], ParsedEmail]

_ATOM_SPECIALS = re.compile(r'[\x00-\x20\x7f(){%*"\\\]]')


def quote_string(value: str) -> str:
    """Render ``value`` as an IMAP quoted string."""

    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def quote_astring(value: str) -> str:
    """Send ``value`` as an atom when possible, quoted otherwise."""

    if value and not _ATOM_SPECIALS.search(value):
        return value
    return quote_string(value)


class ImapClient:
    """IMAP4 client over a single persistent connection.

    What:
      Offer coroutine methods for the supported IMAP commands and return typed
      results from :mod:`mailwire.models`.

    Why:
      Callers should not deal with tags, untagged lines, or reply text; the
      facade hides them behind one coroutine per operation.

    How:
      Owns one :class:`CommandPipeline` for its lifetime. A new
      :class:`ImapStreamProtocol` is created for every :meth:`connect`. Can be
      used as an async context manager, which connects on entry and logs out on
      exit.

    Args:
      config: Connection settings.
      logger: Optional structured logger; defaults to one whose ``debug``
        output follows ``config.debug``.
      body_parser: Callable turning fetched body text into a
        :class:`ParsedEmail`.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        logger: Optional[JsonLogger] = None,
        body_parser: BodyParser = parse_message,
    ) -> None:
        self._config = config
        self._logger = logger or get_logger("mailwire.client", verbose=config.debug)
        self._pipeline = CommandPipeline(
            logger=self._logger,
            disconnect_on_desync=config.disconnect_on_desync,
        )
        self._protocol: Optional[ImapStreamProtocol] = None
        self._body_parser = body_parser

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def pipeline(self) -> CommandPipeline:
        return self._pipeline

    @property
    def connected(self) -> bool:
        return self._pipeline.connected

    async def __aenter__(self) -> "ImapClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.connected:
            await self.close()

    def _ssl_context(self) -> Optional[ssl.SSLContext]:
        if not self._config.secure:
            return None
        context = ssl.create_default_context()
        if not self._config.verify_certificate:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _protocol_factory(self) -> ImapStreamProtocol:
        self._protocol = ImapStreamProtocol(self._pipeline, self._logger)
        return self._protocol

    async def connect(self) -> None:
        """Open the transport to ``config.host``:``config.port``.

        Does nothing when a connection is already open; the pipeline serves a
        single transport at a time.

        Raises:
          OSError: When the TCP or TLS handshake fails.
          CommandTimeoutError: When ``config.timeout`` elapses first.
        """

        if self.connected:
            self._logger.debug("already_connected", host=self._config.host)
            return
        loop = asyncio.get_running_loop()
        opening = loop.create_connection(
            self._protocol_factory,
            self._config.host,
            self._config.port,
            ssl=self._ssl_context(),
        )
        try:
            if self._config.timeout is None:
                await opening
            else:
                await asyncio.wait_for(opening, self._config.timeout)
        except asyncio.TimeoutError as exc:
            self._logger.error("connect_failed", host=self._config.host, error="timeout")
            raise CommandTimeoutError(f"Connecting to {self._config.host} timed out") from exc
        except OSError as exc:
            self._logger.error("connect_failed", host=self._config.host, error=str(exc))
            raise
        self._logger.info(
            "connected",
            host=self._config.host,
            port=self._config.port,
            secure=self._config.secure,
        )

    async def _execute(self, command: str, *, expect_multiline: bool = False) -> str:
        completion = self._pipeline.submit(command, expect_multiline)
        if self._config.timeout is None:
            return await completion
        try:
            return await asyncio.wait_for(completion, self._config.timeout)
        except asyncio.TimeoutError as exc:
            verb = command.split(" ", 1)[0]
            raise CommandTimeoutError(f"No reply to {verb} within {self._config.timeout}s") from exc

    async def _call(self, event: str, command: str, *, expect_multiline: bool = False, **context: Any) -> str:
        try:
            return await self._execute(command, expect_multiline=expect_multiline)
        except ImapError as exc:
            self._logger.error(f"{event}_failed", error=str(exc), **context)
            raise

    async def login(self, username: str, password: str) -> str:
        """Authenticate with plaintext ``LOGIN`` and return the reply text."""

        response = await self._call(
            "login",
            f"LOGIN {quote_astring(username)} {quote_astring(password)}",
            username=username,
        )
        self._logger.debug("login_succeeded", username=username)
        return response

    async def list_mailboxes(self) -> List[MailboxInfo]:
        """Return every mailbox reported by ``LIST "" "*"``."""

        response = await self._call("list_mailboxes", 'LIST "" "*"', expect_multiline=True)
        mailboxes = parse_list(response)
        self._logger.debug("mailboxes_listed", count=len(mailboxes))
        return mailboxes

    async def select_mailbox(self, mailbox: str) -> MailboxStatus:
        """Select ``mailbox`` and return its status."""

        response = await self._call(
            "select_mailbox",
            f"SELECT {quote_string(mailbox)}",
            expect_multiline=True,
            mailbox=mailbox,
        )
        status = parse_select(response)
        self._logger.debug("mailbox_selected", mailbox=mailbox, exists=status.exists)
        return status

    async def search(self, criteria: str = "ALL") -> List[int]:
        """Run ``SEARCH <criteria>`` in the selected mailbox."""

        response = await self._call("search", f"SEARCH {criteria}", criteria=criteria)
        return parse_search(response)

    async def fetch_email_count(self) -> int:
        """Number of messages matched by ``SEARCH ALL``."""

        count = len(await self.search("ALL"))
        self._logger.debug("email_count", count=count)
        return count

    async def fetch_email(self, message_id: int) -> List[EmailEnvelope]:
        """Fetch the envelope of message ``message_id``.

        Returns:
          The decoded envelopes, normally exactly one.
        """

        response = await self._call(
            "fetch_email",
            f"FETCH {message_id} ENVELOPE",
            message_id=message_id,
        )
        envelopes = parse_envelope(response)
        self._logger.debug("email_fetched", message_id=message_id, envelopes=len(envelopes))
        return envelopes

    async def fetch_email_body(self, message_id: int, fmt: str = "TEXT") -> ParsedEmail:
        """Fetch ``BODY[<fmt>]`` of message ``message_id`` and parse it.

        An HTML document framed by an IMAP literal marker is cut out and
        repaired first; any other reply is handed to the body parser as is.
        """

        response = await self._call(
            "fetch_email_body",
            f"FETCH {message_id} BODY[{fmt}]",
            expect_multiline=True,
            message_id=message_id,
        )
        parsed = self._body_parser(prepare_body(response))
        self._logger.debug("email_body_fetched", message_id=message_id, size=len(response))
        return parsed

    async def close(self) -> str:
        """Send ``LOGOUT`` and release the transport.

        The transport is closed even when ``LOGOUT`` fails; the failure is
        re-raised afterwards. A server that drops the connection right after
        its ``BYE`` counts as a successful logout.
        """

        try:
            response = await self._execute("LOGOUT")
        except ConnectionLostError:
            self._logger.debug("logout_connection_dropped")
            response = ""
        except ImapError as exc:
            self._logger.error("logout_failed", error=str(exc))
            raise
        finally:
            if self._pipeline.close_transport() and self._protocol is not None:
                await self._protocol.closed
        self._logger.info("disconnected", host=self._config.host)
        return response
