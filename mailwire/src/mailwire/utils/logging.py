"""Structured JSON logging with redaction for the IMAP engine.

What:
  Offer a tiny facade over Python streams so every mailwire component emits
  single-line JSON records with consistent fields and with credentials and
  message content scrubbed out.

Why:
  Protocol traces are the first thing needed when a server misbehaves, but the
  same traces carry passwords (``LOGIN``) and message bodies (``FETCH``). A
  single logger that redacts by key keeps diagnostics usable without leaking
  mailbox content.

How:
  :class:`JsonLogger` holds a target stream, a component label, and a
  ``verbose`` switch. ``debug`` records are dropped unless ``verbose`` is set;
  the other levels always emit. ``extra`` keyword arguments are copied and
  redacted recursively before serialisation with ``json.dump``.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`.

Invariants & Safety:
  - Every record carries an ISO8601 UTC timestamp, an uppercase level, the
    message, and the component name.
  - Sensitive keys (``password``, ``body``, ``subject``, ``text``, ``html``)
    are replaced with ``[redacted]`` at any nesting depth.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"password", "body", "subject", "text", "html"})


@dataclass
class JsonLogger:
    """Structured JSON logger with automatic redaction.

    What:
      Emit JSON log lines that include timestamp, severity, component and
      optional context fields.

    Why:
      Keeps the engine's protocol trace machine-readable for tests and log
      shippers while honouring the ``debug`` switch of the client
      configuration.

    How:
      :meth:`log` builds the canonical payload, merges a redacted copy of the
      extras and writes one line. :meth:`debug` short-circuits unless
      :attr:`verbose` is enabled.
    """

    stream: Any = field(default_factory=lambda: sys.stderr)
    component: str = "mailwire"
    verbose: bool = False

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        Args:
          level: Human-readable severity (e.g. ``"info"`` or ``"error"``).
          message: Event name or short description.
          extra: Optional context dictionary, redacted recursively.
        """

        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=str)
        self.stream.write("\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a diagnostic record, only when :attr:`verbose` is enabled."""

        if self.verbose:
            self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with sensitive values masked.

        What:
          Replace the value of every key listed in :data:`SENSITIVE_KEYS` with
          :data:`REDACTED`.

        How:
          Walk the mapping, recursing into nested dictionaries so structured
          extras (e.g. a parsed envelope) are scrubbed too.
        """

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


def get_logger(component: str, *, verbose: bool = False) -> JsonLogger:
    """Construct a :class:`JsonLogger` bound to ``component``.

    Args:
      component: Logical subsystem name included in every record.
      verbose: Whether ``debug`` records are emitted.

    Returns:
      Logger writing to ``stderr``.
    """

    return JsonLogger(component=component, verbose=verbose)
