"""Shared helpers: structured logging and the RFC 822 body parser.

Interfaces:
  ``get_logger``, ``JsonLogger``, ``parse_message``.
"""

from .logging import JsonLogger, get_logger
from .mime import parse_message

__all__ = [
    "get_logger",
    "JsonLogger",
    "parse_message",
]
