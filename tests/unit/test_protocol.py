"""
Module: tests/unit/test_protocol.py

What:
    Check that :class:`ImapStreamProtocol` only drives the pipeline while its
    own transport is the one attached.

Why:
    Every connection made by a client shares its pipeline. Events from an old
    connection must not detach or feed the live one.
"""

import asyncio

from fakes import FakeTransport

from mailwire.imap.pipeline import CommandPipeline
from mailwire.imap.protocol import ImapStreamProtocol


def test_stale_protocol_does_not_detach_live_transport(logger):
    async def scenario():
        pipeline = CommandPipeline(logger=logger)
        old, new = FakeTransport(), FakeTransport()
        first = ImapStreamProtocol(pipeline, logger)
        second = ImapStreamProtocol(pipeline, logger)
        first.connection_made(old)
        second.connection_made(new)
        completion = pipeline.submit("NOOP")
        first.data_received(b"A1 OK from the old connection\r\n")
        assert not completion.done()
        first.connection_lost(None)
        assert first.closed.done()
        assert pipeline.connected is True
        assert pipeline.transport is new
        second.data_received(b"A1 OK\r\n")
        return await completion, new.lines

    result, written = asyncio.run(scenario())
    assert result == ""
    assert written == ["A1 NOOP"]


def test_connection_lost_detaches_own_transport(logger):
    async def scenario():
        pipeline = CommandPipeline(logger=logger)
        protocol = ImapStreamProtocol(pipeline, logger)
        protocol.connection_made(FakeTransport())
        protocol.connection_lost(ConnectionResetError("reset"))
        await protocol.closed
        return pipeline

    pipeline = asyncio.run(scenario())
    assert pipeline.connected is False
    assert pipeline.transport is None
