"""RFC 822 body parser used behind ``ImapClient.fetch_email_body``.

What:
  Turn the octets of a fetched message (or the HTML payload cut out of a
  ``FETCH`` reply) into a :class:`~mailwire.models.ParsedEmail` exposing the
  subject, sender and recipients, a text body and an optional HTML body.

Why:
  MIME decoding is outside the protocol engine. Keeping it behind one function
  lets the client accept any callable with the same signature and keeps the
  engine's tests independent from the standard library's MIME details.

How:
  Use the ``email`` package's :class:`~email.parser.BytesParser` with the
  default policy, map ``From``/``To`` headers to
  :class:`~mailwire.models.AddressField`, and walk MIME leaves for the first
  ``text/plain`` and ``text/html`` parts. A header-less payload that looks like
  an HTML document is exposed as HTML.

Interfaces:
  :func:`parse_message`.

Invariants & Safety:
  - Decoding never raises on bad charsets; unknown charsets fall back to UTF-8
    with undecodable bytes dropped.
  - Bodies are truncated on encoded bytes to :data:`MAX_BODY_BYTES`.
"""
from __future__ import annotations

from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Optional, Tuple, Union

from ..models import AddressField, EmailAddress, ParsedEmail


MAX_BODY_BYTES = 1_000_000
"""Soft upper bound for a decoded body in bytes."""

_HTML_PREFIXES = ("<!doctype html", "<html")


def parse_message(raw: Union[bytes, str]) -> ParsedEmail:
    """Parse a raw message into a :class:`ParsedEmail`.

    Args:
      raw: Message octets, or text as handed over by the client facade.

    Returns:
      Parsed message. Missing headers yield empty values.
    """

    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="replace")
    message = BytesParser(policy=policy.default).parsebytes(raw)
    headers = {name.lower(): str(value) for name, value in message.items()}
    text, html = _extract_bodies(message)
    return ParsedEmail(
        subject=str(message.get("subject") or ""),
        from_=_address_field(message, "from"),
        to=_address_field(message, "to"),
        text=text,
        html=html,
        headers=headers,
    )


def _address_field(message: EmailMessage, name: str) -> AddressField:
    header = message.get(name)
    if header is None:
        return AddressField()
    addresses = [
        EmailAddress(
            name=address.display_name or None,
            mailbox=address.username or None,
            host=address.domain or None,
        )
        for address in getattr(header, "addresses", ())
    ]
    return AddressField(text=str(header), value=addresses)


def _extract_bodies(message: EmailMessage) -> Tuple[str, Optional[str]]:
    """Pick the text and HTML bodies from a MIME tree.

    What:
      Return the first inline ``text/plain`` and ``text/html`` leaves of a
      multipart message, or the single body of a non-multipart one.

    How:
      Walk multipart messages depth-first, skipping containers and
      attachments. A single-part message is HTML when declared as such or
      when it carries no ``Content-Type`` and starts like an HTML document; in
      that case the document also serves as the text body.
    """

    if message.is_multipart():
        text = ""
        html: Optional[str] = None
        for part in message.walk():
            if part.is_multipart() or part.get_content_disposition() == "attachment":
                continue
            content_type = part.get_content_type()
            if content_type == "text/plain" and not text:
                text = _truncate(_content(part))
            elif content_type == "text/html" and html is None:
                html = _truncate(_content(part))
        return text, html
    body = _truncate(_content(message))
    declared_html = message.get_content_type() == "text/html"
    sniffed_html = message.get("content-type") is None and body.lstrip().lower().startswith(_HTML_PREFIXES)
    return body, body if declared_html or sniffed_html else None


def _content(part: EmailMessage) -> str:
    try:
        payload = part.get_content()
    except (LookupError, KeyError):
        payload = part.get_payload(decode=True) or b""
    if isinstance(payload, bytes):
        charset = part.get_content_charset("utf-8")
        try:
            return payload.decode(charset, errors="ignore")
        except LookupError:
            return payload.decode("utf-8", errors="ignore")
    return payload if isinstance(payload, str) else str(payload)


def _truncate(text: str) -> str:
    """Clamp ``text`` to :data:`MAX_BODY_BYTES` when encoded in UTF-8."""

    encoded = text.encode("utf-8")
    if len(encoded) <= MAX_BODY_BYTES:
        return text
    return encoded[:MAX_BODY_BYTES].decode("utf-8", errors="ignore")
