"""Single-connection command pipeline.

What:
  Serialise tagged commands onto one transport and route every reply line back
  to the command that is currently being serviced.

Why:
  An IMAP server answers commands on a connection in the order it received
  them. Keeping exactly one command in flight makes the untagged data that
  precedes a tagged completion unambiguous: it belongs to the current command.

How:
  :meth:`CommandPipeline.submit` allocates a tag and either writes the command
  immediately or appends it to a FIFO :class:`collections.deque`. Inbound
  chunks go through :class:`~mailwire.imap.framer.LineFramer`; each line is
  either collected on the current command or, when it carries the current tag,
  completes it. Completion always advances to the next queued command.

Interfaces:
  :class:`PendingCommand`, :class:`Transport`, :class:`CommandPipeline`.

Invariants & Safety:
  - Zero or one command is current; queued commands are written strictly in
    submission order and only after the previous one completed.
  - Each completion future is fulfilled at most once. A future cancelled by
    its caller is left alone, but its tagged reply still advances the queue.
  - A failure (server ``NO``/``BAD``, write error) is local to one command.
"""
from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Protocol

from ..utils.logging import JsonLogger, get_logger
from .errors import (
    CommandFailedError,
    ConnectionLostError,
    ImapError,
    NotConnectedError,
    TransportWriteError,
)
from .framer import LineFramer
from .tags import TagAllocator


class Transport(Protocol):
    """Subset of :class:`asyncio.Transport` the pipeline relies on."""

    def write(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...

    def is_closing(self) -> bool:
        ...


@dataclass
class PendingCommand:
    """A submitted command and its single-assignment completion slot."""

    tag: str
    command: str
    expect_multiline: bool
    completion: "asyncio.Future[str]"
    lines: List[str] = field(default_factory=list)

    @property
    def wire_line(self) -> str:
        return f"{self.tag} {self.command}\r\n"

    def resolve(self) -> None:
        if not self.completion.done():
            self.completion.set_result("\n".join(self.lines))

    def reject(self, error: BaseException) -> None:
        if not self.completion.done():
            self.completion.set_exception(error)


def mask_command(command: str) -> str:
    """Hide the password argument of a ``LOGIN`` command for logging."""

    verb, _, rest = command.partition(" ")
    if verb.upper() != "LOGIN":
        return command
    user = rest.split(" ", 1)[0]
    return f"{verb} {user} ***"


class CommandPipeline:
    """Own the command queue and demultiplex replies for one connection.

    What:
      Accept commands from callers, write them one at a time, and complete
      their futures from the reply stream.

    Why:
      Concentrating the queue discipline here lets the client facade express
      each operation as "submit and parse" while the stream protocol only
      forwards transport events.

    How:
      The pipeline is bound to a transport through :meth:`attach` and released
      through :meth:`detach`. All methods run on the event loop thread, so the
      queue needs no locking.
    """

    def __init__(
        self,
        *,
        logger: Optional[JsonLogger] = None,
        tags: Optional[TagAllocator] = None,
        disconnect_on_desync: bool = False,
    ) -> None:
        self._logger = logger or get_logger("mailwire.pipeline")
        self._tags = tags or TagAllocator()
        self._framer = LineFramer()
        self._transport: Optional[Transport] = None
        self._queue: Deque[PendingCommand] = deque()
        self._current: Optional[PendingCommand] = None
        self._disconnect_on_desync = disconnect_on_desync

    @property
    def connected(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    @property
    def current(self) -> Optional[PendingCommand]:
        return self._current

    @property
    def queued(self) -> int:
        return len(self._queue)

    @property
    def tags(self) -> TagAllocator:
        return self._tags

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    def attach(self, transport: Transport) -> None:
        """Bind the pipeline to a freshly opened ``transport``."""

        self._transport = transport
        self._framer.reset()

    def detach(self, exc: Optional[BaseException] = None) -> None:
        """Forget the transport and fail every outstanding command.

        Args:
          exc: Transport error that caused the loss, chained as the cause of
            the :class:`ConnectionLostError` delivered to waiters.
        """

        self._transport = None
        self._framer.reset()
        outstanding = ([self._current] if self._current else []) + list(self._queue)
        self._current = None
        self._queue.clear()
        for pending in outstanding:
            error = ConnectionLostError(f"Connection lost before {pending.tag} completed")
            error.__cause__ = exc
            pending.reject(error)
        if outstanding:
            self._logger.warning("connection_lost", outstanding=len(outstanding))

    def close_transport(self) -> bool:
        """Close the attached transport; ``True`` when one was open."""

        if self._transport is None or self._transport.is_closing():
            return False
        self._transport.close()
        return True

    def submit(self, command: str, expect_multiline: bool = False) -> "asyncio.Future[str]":
        """Queue ``command`` and return the future of its joined reply lines.

        Args:
          command: Command text without tag or terminator (``SELECT "INBOX"``).
          expect_multiline: Whether the reply may span several untagged lines.
            Untagged lines are collected either way.

        Returns:
          Future resolved with the collected untagged lines joined by ``\\n``,
          or failed with an :class:`~mailwire.imap.errors.ImapError`.

        Raises:
          NotConnectedError: When no open transport is attached. No tag is
            allocated in that case.
        """

        if not self.connected:
            raise NotConnectedError()
        loop = asyncio.get_running_loop()
        pending = PendingCommand(
            tag=self._tags.next_tag(),
            command=command,
            expect_multiline=expect_multiline,
            completion=loop.create_future(),
        )
        if self._current is None:
            self._current = pending
            if not self._write(pending):
                self._advance()
        else:
            self._queue.append(pending)
            self._logger.debug("command_queued", tag=pending.tag, queued=len(self._queue))
        return pending.completion

    def feed(self, chunk: bytes) -> None:
        """Frame ``chunk`` and dispatch every complete line."""

        for line in self._framer.feed(chunk):
            self.handle_line(line)

    def handle_line(self, line: str) -> None:
        """Route one reply line to the current command."""

        current = self._current
        if current is None:
            self._desync(line)
            return
        tokens = line.split(" ", 2)
        if tokens[0] != current.tag:
            current.lines.append(line)
            return
        status = tokens[1] if len(tokens) > 1 else ""
        if status == "OK":
            self._logger.debug("command_completed", tag=current.tag, lines=len(current.lines))
            current.resolve()
        else:
            self._logger.debug("command_failed", tag=current.tag, status=status)
            current.reject(CommandFailedError(line))
        self._advance()

    def _desync(self, line: str) -> None:
        tagged = not line.startswith(("* ", "+"))
        if tagged:
            self._logger.warning("desync", line=line)
            if self._disconnect_on_desync:
                self.close_transport()
        else:
            self._logger.debug("unsolicited_line", line=line)

    def _write(self, pending: PendingCommand) -> bool:
        transport = self._transport
        self._logger.debug("command_sent", tag=pending.tag, command=mask_command(pending.command))
        try:
            if transport is None:
                raise NotConnectedError()
            transport.write(pending.wire_line.encode("utf-8"))
        except (OSError, RuntimeError, ImapError) as exc:
            self._logger.error("write_failed", tag=pending.tag, error=str(exc))
            error = TransportWriteError(f"Failed to write {pending.tag}: {exc}")
            error.__cause__ = exc
            pending.reject(error)
            return False
        return True

    def _advance(self) -> None:
        self._current = None
        while self._queue:
            pending = self._queue.popleft()
            self._current = pending
            if self._write(pending):
                return
            self._current = None
