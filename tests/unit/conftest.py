"""Pytest fixtures for unit tests driving the engine against fakes.

What:
  Put ``tests/unit`` on ``sys.path`` so suites can import :mod:`fakes`, and
  expose a logger fixture that captures JSON records in memory.

Interfaces:
  :func:`log_stream`, :func:`logger` (pytest fixtures).
"""

import io
import sys
from pathlib import Path

import pytest

from mailwire.utils.logging import JsonLogger

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_stream: io.StringIO) -> JsonLogger:
    """Verbose logger writing into :func:`log_stream`."""

    return JsonLogger(stream=log_stream, component="test", verbose=True)
