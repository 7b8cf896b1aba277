"""Decoders for ``LIST`` and ``SELECT`` replies.

What:
  Convert the untagged lines collected for a ``LIST`` or ``SELECT`` command
  into :class:`~mailwire.models.MailboxInfo` entries and a
  :class:`~mailwire.models.MailboxStatus`.

Why:
  Servers vary in which optional response codes they send. Decoding is
  best-effort: lines that do not have the expected shape are skipped, and
  fields without a usable value keep their defaults.

How:
  ``LIST`` lines are matched against a single anchored pattern. ``SELECT``
  lines are folded one by one: the first two words decide ``EXISTS`` /
  ``RECENT`` / ``FLAGS``, and bracketed response codes are searched for the
  remaining keywords. Later lines overwrite earlier ones.

Interfaces:
  :func:`parse_list`, :func:`parse_select`.
"""
from __future__ import annotations

import re
from typing import List, Optional

from ..models import MailboxInfo, MailboxStatus

_LIST_LINE = re.compile(r'^\* LIST \((?P<flags>.*?)\) "(?P<delimiter>.+)" "(?P<name>.+)"$')
_FLAG_GROUP = re.compile(r"\((?P<flags>[^)]*)\)")
_CODES = {
    "UNSEEN": re.compile(r"\bUNSEEN ([0-9]+)"),
    "UIDVALIDITY": re.compile(r"\bUIDVALIDITY ([0-9]+)"),
    "UIDNEXT": re.compile(r"\bUIDNEXT ([0-9]+)"),
}
_PERMANENT_FLAGS = re.compile(r"\[PERMANENTFLAGS \((?P<flags>[^)]*)\)")


def parse_list(response: str) -> List[MailboxInfo]:
    """Decode every well-formed ``* LIST`` line in ``response``.

    Example:
      ``parse_list('* LIST (\\\\Noselect) "/" "INBOX"')`` returns
      ``[MailboxInfo(flags=["\\\\Noselect"], delimiter="/", name="INBOX")]``.
    """

    mailboxes: List[MailboxInfo] = []
    for line in response.split("\n"):
        if not line.startswith("* LIST"):
            continue
        match = _LIST_LINE.match(line.rstrip("\r"))
        if match is None:
            continue
        mailboxes.append(
            MailboxInfo(
                flags=match.group("flags").split(),
                delimiter=match.group("delimiter"),
                name=match.group("name"),
            )
        )
    return mailboxes


def _to_int(token: str) -> Optional[int]:
    return int(token) if token.isascii() and token.isdigit() else None


def parse_select(response: str) -> MailboxStatus:
    """Fold the untagged lines of a ``SELECT`` reply into a status record.

    What:
      Recognise ``EXISTS``, ``RECENT``, ``FLAGS`` data lines and the
      ``UNSEEN``, ``UIDVALIDITY``, ``UIDNEXT`` and ``PERMANENTFLAGS`` response
      codes.

    How:
      Each line beginning with ``* `` is tested against the keyword predicates
      in order; the first predicate that applies sets exactly one field.
      Unrecognised lines are ignored.

    Args:
      response: Untagged lines joined by ``\\n``.

    Returns:
      :class:`MailboxStatus` with defaults for every field not seen.
    """

    status = MailboxStatus()
    for raw in response.split("\n"):
        line = raw.rstrip("\r")
        if not line.startswith("* "):
            continue
        parts = line[2:].split(" ")
        keyword = parts[1] if len(parts) > 1 else ""
        if keyword == "EXISTS":
            value = _to_int(parts[0])
            if value is not None:
                status.exists = value
        elif keyword == "RECENT":
            value = _to_int(parts[0])
            if value is not None:
                status.recent = value
        elif parts[0] == "FLAGS":
            match = _FLAG_GROUP.search(line)
            if match:
                status.flags = match.group("flags").split()
        elif "PERMANENTFLAGS" in line:
            match = _PERMANENT_FLAGS.search(line)
            if match:
                status.permanent_flags = match.group("flags").split()
        else:
            for code, pattern in _CODES.items():
                if code not in line:
                    continue
                match = pattern.search(line)
                if match:
                    setattr(status, code.lower(), int(match.group(1)))
                break
    return status
