"""Decoder for ``SEARCH`` replies."""
from __future__ import annotations

from typing import List


def _is_number(token: str) -> bool:
    return token.isascii() and token.isdigit()


def parse_search(response: str) -> List[int]:
    """Return the message numbers listed on the ``* SEARCH`` line.

    Non-numeric tokens, including non-ASCII digits such as ``²``, are skipped.
    A reply without a ``SEARCH`` line, or with an empty one, yields ``[]``.
    """

    for raw in response.split("\n"):
        line = raw.rstrip("\r")
        if line == "* SEARCH" or line.startswith("* SEARCH "):
            return [int(token) for token in line[len("* SEARCH"):].split() if _is_number(token)]
    return []
