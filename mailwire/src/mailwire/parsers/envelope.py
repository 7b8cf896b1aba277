"""Decoder for ``FETCH ... ENVELOPE`` replies and IMAP address lists.

What:
  Turn the parenthesised ``ENVELOPE`` structure of RFC 3501 into
  :class:`~mailwire.models.EmailEnvelope` records, including the six nested
  address lists.

Why:
  Envelope fields mix quoted strings (which may contain spaces, parentheses
  and escaped quotes), the ``NIL`` sentinel, and nested lists of 4-tuples.
  Splitting on spaces or matching with a single regular expression breaks on
  real-world subjects and display names.

How:
  One single-pass scanner, :func:`split_fields`, tracks two states (Default
  and InQuotes) and a parenthesis depth counter:

  - an unescaped ``"`` toggles InQuotes; inside quotes a backslash escapes the
    next character;
  - ``(`` and ``)`` seen in Default adjust the depth and stay in the token;
  - a space in Default at depth 0 ends the token, and so does a ``)`` that
    brings the depth back to 0;
  - end of input flushes any pending token.

  The same scanner splits the envelope into its ten fields, an address list
  into its groups, and each group into its four members.
  :func:`decode_value` maps ``NIL`` to ``None`` wherever it appears.

Interfaces:
  :func:`split_fields`, :func:`decode_value`, :func:`parse_address_list`,
  :func:`parse_envelope`.

Invariants & Safety:
  - ``NIL`` never survives as the literal string ``"NIL"``.
  - Malformed envelope lines (unbalanced parentheses) are skipped rather than
    raising.
"""
from __future__ import annotations

import re
from typing import List, Optional

from ..models import EmailAddress, EmailEnvelope

ENVELOPE_FIELD_COUNT = 10
ADDRESS_PART_COUNT = 4
_ESCAPED = re.compile(r"\\(.)")


def split_fields(text: str) -> List[str]:
    """Split ``text`` into top-level tokens, respecting quotes and nesting.

    Example:
      ``split_fields('"a\\\\"b" NIL (("x" NIL "y" "z"))')`` returns
      ``['"a\\\\"b"', 'NIL', '(("x" NIL "y" "z"))']``.

    Args:
      text: Content of a parenthesised list without its outer parentheses.

    Returns:
      Raw tokens, still quoted, in input order.
    """

    fields: List[str] = []
    current: List[str] = []
    depth = 0
    in_quotes = False
    escaped = False

    def flush() -> None:
        if current:
            fields.append("".join(current))
            current.clear()

    for char in text:
        if in_quotes:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_quotes = False
            continue
        if char == '"':
            in_quotes = True
            current.append(char)
        elif char == "(":
            depth += 1
            current.append(char)
        elif char == ")":
            depth = max(depth - 1, 0)
            current.append(char)
            if depth == 0:
                flush()
        elif char == " " and depth == 0:
            flush()
        else:
            current.append(char)
    flush()
    return fields


def decode_value(token: Optional[str]) -> Optional[str]:
    """Decode one atom or quoted string; ``NIL`` and missing tokens give ``None``."""

    if token is None:
        return None
    token = token.strip()
    if not token or token.upper() == "NIL":
        return None
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return _ESCAPED.sub(r"\1", token[1:-1])
    return token


def parse_address_list(field: Optional[str]) -> List[EmailAddress]:
    """Decode a parenthesised list of ``(name adl mailbox host)`` tuples.

    Args:
      field: Raw envelope field, e.g. ``(("Ann" NIL "ann" "example.org"))`` or
        ``NIL``.

    Returns:
      Decoded addresses; ``[]`` for ``NIL`` or an empty field. Tuples with
      fewer than four members are padded with ``None``.
    """

    if field is None:
        return []
    field = field.strip()
    if not field or field.upper() == "NIL":
        return []
    if field.startswith("(") and field.endswith(")"):
        field = field[1:-1]
    addresses: List[EmailAddress] = []
    for group in split_fields(field):
        if not (group.startswith("(") and group.endswith(")")):
            continue
        parts = [decode_value(part) for part in split_fields(group[1:-1])]
        parts.extend([None] * (ADDRESS_PART_COUNT - len(parts)))
        name, source_route, mailbox, host = parts[:ADDRESS_PART_COUNT]
        addresses.append(
            EmailAddress(name=name, source_route=source_route, mailbox=mailbox, host=host)
        )
    return addresses


def _envelope_group(line: str) -> Optional[str]:
    """Return the content of the balanced group following ``ENVELOPE``."""

    start = line.find("ENVELOPE (")
    if start == -1:
        return None
    opening = start + len("ENVELOPE ")
    depth = 0
    in_quotes = False
    escaped = False
    for index in range(opening, len(line)):
        char = line[index]
        if in_quotes:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_quotes = False
            continue
        if char == '"':
            in_quotes = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return line[opening + 1 : index]
    return None


def parse_envelope(response: str) -> List[EmailEnvelope]:
    """Decode every ``ENVELOPE`` structure found in ``response``.

    What:
      Builds one :class:`EmailEnvelope` per reply line carrying an
      ``ENVELOPE`` item.

    How:
      Extracts the balanced group after the keyword, splits it into the ten
      positional fields (date, subject, from, sender, reply-to, to, cc, bcc,
      in-reply-to, message-id) and decodes each one. Missing trailing fields
      decode as absent.

    Args:
      response: Untagged lines of a ``FETCH`` reply joined by ``\\n``.

    Returns:
      Envelopes in reply order; always a list, even for a single message.
    """

    envelopes: List[EmailEnvelope] = []
    for line in response.split("\n"):
        if "ENVELOPE" not in line:
            continue
        group = _envelope_group(line)
        if group is None:
            continue
        fields: List[Optional[str]] = list(split_fields(group))
        fields.extend([None] * (ENVELOPE_FIELD_COUNT - len(fields)))
        envelopes.append(
            EmailEnvelope(
                date=decode_value(fields[0]),
                subject=decode_value(fields[1]),
                from_=parse_address_list(fields[2]),
                sender=parse_address_list(fields[3]),
                reply_to=parse_address_list(fields[4]),
                to=parse_address_list(fields[5]),
                cc=parse_address_list(fields[6]),
                bcc=parse_address_list(fields[7]),
                in_reply_to=decode_value(fields[8]),
                message_id=decode_value(fields[9]),
            )
        )
    return envelopes
