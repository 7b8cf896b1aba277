"""Configuration loading for mailwire.

What:
  Expose the YAML loader and the Pydantic models describing connection
  settings and credentials.

Interfaces:
  - load_config / parse_config: Discover and validate ``mailwire.yaml``.
  - ClientConfig / AccountConfig / MailwireConfig: Validated models.
  - ConfigLoadError: Raised for missing, malformed, or invalid documents.
"""

from .loader import ConfigLoadError, load_config, parse_config
from .schema import AccountConfig, ClientConfig, MailwireConfig

__all__ = [
    "load_config",
    "parse_config",
    "ConfigLoadError",
    "ClientConfig",
    "AccountConfig",
    "MailwireConfig",
]
