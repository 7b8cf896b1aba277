"""asyncio protocol binding transport events to the command pipeline."""
from __future__ import annotations

import asyncio
from typing import Optional

from ..utils.logging import JsonLogger
from .pipeline import CommandPipeline


class ImapStreamProtocol(asyncio.Protocol):
    """Forward connect, data and close events to a :class:`CommandPipeline`.

    ``closed`` resolves once the transport reports ``connection_lost`` so the
    client can await a clean shutdown after ``LOGOUT``. A protocol whose
    transport was already replaced on the pipeline leaves the pipeline alone.
    """

    def __init__(self, pipeline: CommandPipeline, logger: JsonLogger) -> None:
        self._pipeline = pipeline
        self._logger = logger
        self._transport: Optional[asyncio.BaseTransport] = None
        self.closed: "asyncio.Future[None]" = asyncio.get_running_loop().create_future()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = transport
        self._pipeline.attach(transport)  # type: ignore[arg-type]
        self._logger.debug("connection_made")

    def data_received(self, data: bytes) -> None:
        if self._pipeline.transport is self._transport:
            self._pipeline.feed(data)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self._logger.debug("connection_closed", error=str(exc) if exc else None)
        if self._pipeline.transport is self._transport:
            self._pipeline.detach(exc)
        if not self.closed.done():
            self.closed.set_result(None)
