"""
Module: mailwire.__init__

What:
  Asynchronous IMAP4 client built around a single-connection command
  pipeline and stateless reply parsers.

Why:
  Importers need the client facade, its configuration model and the typed
  results without knowing the internal layout of ``imap``, ``parsers``,
  ``config`` and ``utils``.

How:
  Re-export the public names and list the subpackages in ``__all__``.

Interfaces:
  - ImapClient: connect, login, list/select mailboxes, search, fetch.
  - ClientConfig / load_config: connection settings and their loader.
  - MailboxInfo, MailboxStatus, EmailAddress, EmailEnvelope, ParsedEmail:
    typed results.
  - ImapError and subclasses: per-command failures.
"""

from .config import ClientConfig, load_config
from .imap import (
    CommandFailedError,
    CommandTimeoutError,
    ConnectionLostError,
    ImapClient,
    ImapError,
    NotConnectedError,
    TransportWriteError,
)
from .models import EmailAddress, EmailEnvelope, MailboxInfo, MailboxStatus, ParsedEmail

__version__ = "0.1.0"

__all__ = [
    "ImapClient",
    "ClientConfig",
    "load_config",
    "MailboxInfo",
    "MailboxStatus",
    "EmailAddress",
    "EmailEnvelope",
    "ParsedEmail",
    "ImapError",
    "NotConnectedError",
    "CommandFailedError",
    "TransportWriteError",
    "ConnectionLostError",
    "CommandTimeoutError",
    "config",
    "imap",
    "parsers",
    "utils",
]
