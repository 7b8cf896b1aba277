"""Typed values produced by the response parsers and the body parser.

What:
  Declare the dataclasses returned by :mod:`mailwire.parsers` and
  :mod:`mailwire.utils.mime`.

Why:
  IMAP replies are loosely structured text. Converting them into plain
  dataclasses at the parser boundary keeps the rest of the code (and callers)
  free of string slicing and ``NIL`` checks.

How:
  Mutable dataclasses with list defaults built through ``field``. Absent IMAP
  values (``NIL``) are represented as ``None``.

Interfaces:
  :class:`MailboxInfo`, :class:`MailboxStatus`, :class:`EmailAddress`,
  :class:`EmailEnvelope`, :class:`AddressField`, :class:`ParsedEmail`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class MailboxInfo:
    """One ``* LIST`` entry."""

    flags: List[str]
    delimiter: str
    name: str


@dataclass
class MailboxStatus:
    """Mailbox metadata folded from the untagged lines of a ``SELECT`` reply."""

    exists: int = 0
    recent: int = 0
    unseen: Optional[int] = None
    uidvalidity: Optional[int] = None
    uidnext: Optional[int] = None
    flags: List[str] = field(default_factory=list)
    permanent_flags: List[str] = field(default_factory=list)


@dataclass
class EmailAddress:
    """An RFC 3501 address structure ``(name adl mailbox host)``."""

    name: Optional[str] = None
    source_route: Optional[str] = None
    mailbox: Optional[str] = None
    host: Optional[str] = None

    @property
    def address(self) -> Optional[str]:
        """``mailbox@host`` when both parts are present."""

        if self.mailbox and self.host:
            return f"{self.mailbox}@{self.host}"
        return self.mailbox


@dataclass
class EmailEnvelope:
    """Decoded ``ENVELOPE`` structure of one message."""

    date: Optional[str] = None
    subject: Optional[str] = None
    from_: List[EmailAddress] = field(default_factory=list)
    sender: List[EmailAddress] = field(default_factory=list)
    reply_to: List[EmailAddress] = field(default_factory=list)
    to: List[EmailAddress] = field(default_factory=list)
    cc: List[EmailAddress] = field(default_factory=list)
    bcc: List[EmailAddress] = field(default_factory=list)
    in_reply_to: Optional[str] = None
    message_id: Optional[str] = None


@dataclass
class AddressField:
    """Header display text together with its decoded addresses."""

    text: str = ""
    value: List[EmailAddress] = field(default_factory=list)


@dataclass
class ParsedEmail:
    """Structured view of a fetched message body."""

    subject: str = ""
    from_: AddressField = field(default_factory=AddressField)
    to: AddressField = field(default_factory=AddressField)
    text: str = ""
    html: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
