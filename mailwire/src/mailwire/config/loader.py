"""Locate, parse and validate the mailwire configuration file.

What:
  Resolve ``mailwire.yaml`` from an explicit path, the ``MAILWIRE_CONFIG_PATH``
  environment variable, or well-known defaults, and return a validated
  :class:`~mailwire.config.schema.MailwireConfig`.

Why:
  Host, port, TLS and credentials live outside the code. Funnelling every read
  through one loader gives uniform error messages that name the offending
  file, and guarantees callers only ever see validated models.

How:
  Walk the candidate paths in precedence order, parse the first existing file
  with PyYAML's ``safe_load``, and validate the mapping with Pydantic. IO,
  YAML and schema failures are all converted to :class:`ConfigLoadError`.

Interfaces:
  :class:`ConfigLoadError`, :func:`load_config`, :func:`parse_config`.

Invariants:
  - Precedence: explicit argument, then environment variable, then
    ``./mailwire.yaml``, then ``~/.config/mailwire/config.yaml``.
  - YAML is parsed with ``safe_load`` only; no object constructors run.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from .schema import MailwireConfig


class ConfigLoadError(Exception):
    """Configuration could not be located, parsed or validated."""


CONFIG_ENV = "MAILWIRE_CONFIG_PATH"
DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("mailwire.yaml"),
    Path("~/.config/mailwire/config.yaml"),
)


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield configuration file locations in priority order, deduplicated."""

    seen: set[Path] = set()
    env_path = os.environ.get(CONFIG_ENV)
    ordered = [path, Path(env_path) if env_path else None, *DEFAULT_LOCATIONS]
    for entry in ordered:
        if entry is None:
            continue
        candidate = entry.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def parse_config(text: str, source: Union[Path, str] = "<string>") -> MailwireConfig:
    """Parse and validate configuration ``text``.

    Args:
      text: YAML document.
      source: Origin used in error messages.

    Returns:
      Validated configuration model.

    Raises:
      ConfigLoadError: On YAML syntax errors, a non-mapping document, or schema
        violations.
    """

    try:
        payload: Any = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigLoadError(f"{source} must contain a mapping at the top-level")
    try:
        return MailwireConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid configuration in {source}: {exc}") from exc


def load_config(path: Optional[Union[Path, str]] = None) -> MailwireConfig:
    """Resolve, read and validate the configuration file.

    What:
      Return the first configuration found along the precedence chain.

    Why:
      The CLI and scripts share one discovery rule, so a config placed in the
      environment variable or the user's config directory works everywhere.

    Args:
      path: Optional explicit location of the YAML file.

    Returns:
      The validated :class:`MailwireConfig`.

    Raises:
      ConfigLoadError: If no candidate exists or the file found is invalid.
    """

    requested = Path(path) if path is not None else None
    searched: list[str] = []
    for candidate in _candidate_paths(requested):
        if not candidate.exists():
            searched.append(str(candidate))
            continue
        try:
            text = candidate.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem surface
            raise ConfigLoadError(f"Unable to read configuration file {candidate}: {exc}") from exc
        return parse_config(text, candidate)
    raise ConfigLoadError(f"Unable to locate configuration (searched: {', '.join(searched) or '<none>'})")
