"""Stateless decoders for IMAP reply bodies.

What:
  Re-export the pure functions that turn the untagged lines collected by the
  command pipeline into typed values.

Why:
  Parsers hold no state between calls, so the client facade (and tests) can
  use them directly on captured server output.

Interfaces:
  :func:`parse_list`, :func:`parse_select`, :func:`parse_search`,
  :func:`parse_envelope`, :func:`parse_address_list`, :func:`split_fields`,
  :func:`decode_value`.
"""

from .envelope import decode_value, parse_address_list, parse_envelope, split_fields
from .mailbox import parse_list, parse_select
from .search import parse_search

__all__ = [
    "parse_list",
    "parse_select",
    "parse_search",
    "parse_envelope",
    "parse_address_list",
    "split_fields",
    "decode_value",
]
