"""
Module: tests/unit/test_framer.py

What:
    Exercise :class:`LineFramer` against the chunk boundaries a TCP stream can
    produce.

Why:
    Every reply line flows through the framer. A dropped tail or an early
    decode would corrupt tags and message text alike.
"""

from mailwire.imap.framer import LineFramer


def test_complete_lines_are_returned_in_order():
    framer = LineFramer()
    assert framer.feed(b"* 1 EXISTS\r\n* 0 RECENT\r\n") == ["* 1 EXISTS", "* 0 RECENT"]
    assert framer.pending == 0


def test_chunk_without_terminator_yields_nothing():
    framer = LineFramer()
    assert framer.feed(b"* SEARCH 1 2") == []
    assert framer.pending == len(b"* SEARCH 1 2")
    assert framer.feed(b" 3\r\n") == ["* SEARCH 1 2 3"]


def test_crlf_split_across_chunks():
    framer = LineFramer()
    assert framer.feed(b"A1 OK done\r") == []
    assert framer.feed(b"\nA2 OK") == ["A1 OK done"]
    assert framer.feed(b" again\r\n") == ["A2 OK again"]


def test_multibyte_character_split_across_chunks():
    framer = LineFramer()
    data = "* LIST () \"/\" \"Entwürfe\"\r\n".encode("utf-8")
    split = data.index("ü".encode("utf-8")) + 1
    assert framer.feed(data[:split]) == []
    assert framer.feed(data[split:]) == ['* LIST () "/" "Entwürfe"']


def test_empty_lines_are_preserved():
    framer = LineFramer()
    assert framer.feed(b"\r\n\r\n") == ["", ""]


def test_reset_discards_partial_line():
    framer = LineFramer()
    framer.feed(b"A1 O")
    framer.reset()
    assert framer.pending == 0
    assert framer.feed(b"A2 OK\r\n") == ["A2 OK"]
