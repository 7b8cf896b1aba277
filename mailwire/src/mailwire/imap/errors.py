"""Exception hierarchy for the IMAP protocol engine.

What:
  Define the errors a caller can observe when submitting commands through the
  pipeline or the :class:`~mailwire.imap.client.ImapClient` facade.

Why:
  Failures are local to a single command's completion slot. Distinct types let
  callers tell apart a server refusal, a dead transport, and a caller-side
  timeout without parsing messages.

How:
  Every error derives from :class:`ImapError`. :class:`CommandFailedError`
  keeps the raw tagged line together with the tag and status token split out of
  it.

Interfaces:
  :class:`ImapError`, :class:`NotConnectedError`, :class:`CommandFailedError`,
  :class:`TransportWriteError`, :class:`ConnectionLostError`,
  :class:`CommandTimeoutError`.
"""
from __future__ import annotations

from typing import Optional


class ImapError(Exception):
    """Base class for every protocol engine failure."""


class NotConnectedError(ImapError):
    """Raised when a command is submitted without an open transport."""

    def __init__(self, message: str = "Not connected to IMAP server") -> None:
        super().__init__(message)


class CommandFailedError(ImapError):
    """Server answered a command with a status other than ``OK``.

    Attributes:
      line: Full tagged reply line as received.
      tag: Tag of the failed command.
      status: Status token following the tag (``NO``, ``BAD`` ...).
    """

    def __init__(self, line: str) -> None:
        super().__init__(f"Command failed: {line}")
        parts = line.split(" ", 2)
        self.line = line
        self.tag = parts[0]
        self.status: Optional[str] = parts[1] if len(parts) > 1 else None


class TransportWriteError(ImapError):
    """Writing a command line to the transport failed."""


class ConnectionLostError(ImapError):
    """The transport closed while the command was in flight or queued."""


class CommandTimeoutError(ImapError):
    """The caller stopped waiting for a reply after the configured timeout."""
