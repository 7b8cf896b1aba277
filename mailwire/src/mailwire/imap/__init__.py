"""Facade for the IMAP protocol engine.

What:
  Surface the :class:`~mailwire.imap.client.ImapClient` facade, the
  :class:`~mailwire.imap.pipeline.CommandPipeline` it is built on, and the
  error types callers catch.

Why:
  Call sites import from one place while framing, tagging and queueing stay
  private to their submodules.

Interfaces:
  ``ImapClient``, ``CommandPipeline``, ``ImapError``, ``NotConnectedError``,
  ``CommandFailedError``, ``TransportWriteError``, ``ConnectionLostError``,
  ``CommandTimeoutError``.

Invariants & Safety:
  - One pipeline per client instance; never share a pipeline between
    connections.
"""

from .client import ImapClient
from .errors import (
    CommandFailedError,
    CommandTimeoutError,
    ConnectionLostError,
    ImapError,
    NotConnectedError,
    TransportWriteError,
)
from .pipeline import CommandPipeline

__all__ = [
    "ImapClient",
    "CommandPipeline",
    "ImapError",
    "NotConnectedError",
    "CommandFailedError",
    "TransportWriteError",
    "ConnectionLostError",
    "CommandTimeoutError",
]
