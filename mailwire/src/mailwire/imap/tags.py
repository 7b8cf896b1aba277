"""Per-connection command tag allocation."""
from __future__ import annotations


class TagAllocator:
    """Issue ``A1``, ``A2``, ... for one client instance.

    The counter lives on the instance so two clients never share a sequence.
    """

    def __init__(self, prefix: str = "A") -> None:
        self._prefix = prefix
        self._counter = 0

    @property
    def issued(self) -> int:
        """Number of tags handed out so far."""

        return self._counter

    def next_tag(self) -> str:
        self._counter += 1
        return f"{self._prefix}{self._counter}"
