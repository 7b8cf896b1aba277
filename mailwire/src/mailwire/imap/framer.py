"""CRLF line framing for the inbound byte stream.

What:
  Turn arbitrary transport chunks into complete protocol lines while keeping
  the unterminated tail for the next read.

Why:
  TCP and TLS deliver bytes with no regard for line boundaries. A reply line,
  its CRLF terminator, or even a single UTF-8 code point can be split across
  two ``data_received`` calls.

How:
  Accumulate raw bytes in a :class:`bytearray`, cut every complete
  ``\\r\\n``-terminated line off the front, and decode each one independently.
  Decoding happens after the split so partial multi-byte sequences are never
  decoded early.

Interfaces:
  :class:`LineFramer`.

Invariants & Safety:
  - ``feed`` never blocks and never drops bytes; anything after the last CRLF
    stays buffered.
  - Lines are returned in arrival order without their terminator.
"""
from __future__ import annotations

from typing import List

CRLF = b"\r\n"


class LineFramer:
    """Buffer inbound bytes and emit complete CRLF-delimited lines."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Size in bytes of the buffered partial line."""

        return len(self._buffer)

    def feed(self, chunk: bytes) -> List[str]:
        """Append ``chunk`` and return every line it completed.

        Args:
          chunk: Raw bytes received from the transport.

        Returns:
          Complete lines, decoded, in arrival order. Empty when ``chunk`` holds
          no terminator.
        """

        self._buffer.extend(chunk)
        lines: List[str] = []
        start = 0
        while True:
            end = self._buffer.find(CRLF, start)
            if end == -1:
                break
            lines.append(self._buffer[start:end].decode(self._encoding, errors="replace"))
            start = end + len(CRLF)
        if start:
            del self._buffer[:start]
        return lines

    def reset(self) -> None:
        """Discard the buffered tail."""

        self._buffer.clear()
