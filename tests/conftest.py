"""Pytest configuration shared by every suite.

What:
  Make the ``mailwire`` source tree importable and keep configuration
  discovery deterministic between tests.

Why:
  Tests must exercise the source tree rather than an installed wheel, and
  :func:`mailwire.config.load_config` consults ``MAILWIRE_CONFIG_PATH`` and the
  working directory, either of which could leak in from the developer's shell.

How:
  Prepend ``mailwire/src`` to ``sys.path`` at import time and clear the
  environment variable for every test through an autouse fixture.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "mailwire" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from mailwire.config.loader import CONFIG_ENV


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run each test from an empty directory with no config override."""

    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
