"""Pydantic models describing mailwire configuration documents."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientConfig(BaseModel):
    """Connection settings consumed by :class:`~mailwire.imap.client.ImapClient`."""

    model_config = ConfigDict(extra="forbid")

    host: str
    port: int = Field(default=993, gt=0, le=65535)
    secure: bool = True
    debug: bool = False
    timeout: Optional[float] = Field(default=None, gt=0)
    verify_certificate: bool = True
    disconnect_on_desync: bool = False

    @field_validator("host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("host must not be empty")
        return value


class AccountConfig(BaseModel):
    """Credentials used for plaintext ``LOGIN``."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=1)
    password: str


class MailwireConfig(BaseModel):
    """Root document loaded from ``mailwire.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = 1
    imap: ClientConfig
    account: Optional[AccountConfig] = None
