"""Heuristic clean-up of ``FETCH BODY[...]`` replies.

What:
  Repair soft line-break and quoted-printable artefacts that some servers leave
  in ``BODY[TEXT]`` replies, and cut an HTML document out of the IMAP literal
  framing that surrounds it.

Why:
  The engine does not implement literal (``{n}``) framing, so a fetched body
  arrives as the untagged reply text. For HTML mail the interesting part is the
  document after the literal marker; everything else is handed on unchanged.

How:
  :func:`repair_body_text` applies a fixed list of string replacements.
  :func:`extract_html_payload` searches the repaired text for a literal marker
  followed by ``<!DOCTYPE html`` and strips the closing parenthesis of the
  ``FETCH`` response. :func:`prepare_body` chooses between the two outcomes.

Interfaces:
  :func:`repair_body_text`, :func:`extract_html_payload`, :func:`prepare_body`.

Invariants & Safety:
  - These are content-sniffing patches for observed server quirks, not a
    decoding rule. Replace them rather than extending them to general
    quoted-printable handling.
  - When no HTML document is found the raw reply is returned untouched.
"""
from __future__ import annotations

import re
from typing import Optional, Tuple

SOFT_BREAK_REPAIRS: Tuple[Tuple[str, str], ...] = (
    ("=\n", ""),
    ("=3D", "="),
    ('="=', '="'),
    (":=", ":"),
    ("class==", "class="),
)
_HTML_AFTER_LITERAL = re.compile(r"\{\d+\}\s(<!DOCTYPE html[\s\S]*)")


def repair_body_text(text: str) -> str:
    """Apply :data:`SOFT_BREAK_REPAIRS` in order."""

    for needle, replacement in SOFT_BREAK_REPAIRS:
        text = text.replace(needle, replacement)
    return text


def extract_html_payload(text: str) -> Optional[str]:
    """Return the HTML document following a ``{<n>}`` marker, if any.

    Trailing whitespace and one closing ``)`` left over from the ``FETCH``
    response are removed.
    """

    match = _HTML_AFTER_LITERAL.search(text)
    if match is None:
        return None
    html = match.group(1).rstrip()
    if html.endswith(")"):
        html = html[:-1]
    return html


def prepare_body(raw: str) -> str:
    """Select what is handed to the RFC 822 body parser.

    Args:
      raw: Untagged reply text of a ``FETCH <id> BODY[<section>]`` command.

    Returns:
      The repaired HTML payload when one is present, otherwise ``raw``
      unmodified.
    """

    html = extract_html_payload(repair_body_text(raw))
    return html if html is not None else raw
