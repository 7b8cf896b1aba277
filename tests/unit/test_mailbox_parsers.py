"""
Module: tests/unit/test_mailbox_parsers.py

What:
    Check the ``LIST`` and ``SELECT`` decoders against captured server output.

Why:
    Servers differ in which response codes they send; decoding must stay
    best-effort and never raise on unexpected lines.
"""

from mailwire.models import MailboxInfo, MailboxStatus
from mailwire.parsers import parse_list, parse_select

LIST_REPLY = "\n".join(
    [
        '* LIST (\\HasNoChildren) "/" "INBOX"',
        '* LIST (\\HasNoChildren \\Sent) "/" "Sent Items"',
        '* LIST () "." "Archive.2023"',
        "* LIST garbage",
        "* OK unrelated",
    ]
)

SELECT_REPLY = "\n".join(
    [
        "* FLAGS (\\Answered \\Flagged \\Deleted \\Seen \\Draft)",
        "* OK [PERMANENTFLAGS (\\Deleted \\Seen \\*)] Limited",
        "* 172 EXISTS",
        "* 1 RECENT",
        "* OK [UNSEEN 12] Message 12 is first unseen",
        "* OK [UIDVALIDITY 3857529045] UIDs valid",
        "* OK [UIDNEXT 4392] Predicted next UID",
    ]
)


def test_parse_list_decodes_well_formed_lines():
    assert parse_list(LIST_REPLY) == [
        MailboxInfo(flags=["\\HasNoChildren"], delimiter="/", name="INBOX"),
        MailboxInfo(flags=["\\HasNoChildren", "\\Sent"], delimiter="/", name="Sent Items"),
        MailboxInfo(flags=[], delimiter=".", name="Archive.2023"),
    ]


def test_parse_list_without_list_lines_is_empty():
    assert parse_list("") == []
    assert parse_list("* OK nothing here") == []


def test_parse_select_folds_every_field():
    status = parse_select(SELECT_REPLY)
    assert status == MailboxStatus(
        exists=172,
        recent=1,
        unseen=12,
        uidvalidity=3857529045,
        uidnext=4392,
        flags=["\\Answered", "\\Flagged", "\\Deleted", "\\Seen", "\\Draft"],
        permanent_flags=["\\Deleted", "\\Seen", "\\*"],
    )


def test_permanentflags_does_not_clobber_flags():
    status = parse_select("* FLAGS (\\Seen)\n* OK [PERMANENTFLAGS ()] No permanent flags")
    assert status.flags == ["\\Seen"]
    assert status.permanent_flags == []


def test_parse_select_defaults_when_nothing_matches():
    status = parse_select("* OK [READ-WRITE] SELECT completed")
    assert status == MailboxStatus()
    assert status.unseen is None


def test_parse_select_last_value_wins():
    status = parse_select("* 3 EXISTS\n* 4 EXISTS")
    assert status.exists == 4


def test_parse_select_ignores_non_numeric_counts():
    status = parse_select("* many EXISTS\n* OK [UIDNEXT soon]")
    assert status.exists == 0
    assert status.uidnext is None


def test_parse_select_minimal_reply():
    status = parse_select("* 10 EXISTS\n* OK [UIDVALIDITY 1] UIDs valid")
    assert status == MailboxStatus(exists=10, uidvalidity=1)


def test_parse_select_keeps_defaults_for_non_ascii_digits():
    status = parse_select("* ² EXISTS\n* ² RECENT\n* OK [UIDNEXT ²] Predicted next UID")
    assert status.exists == 0
    assert status.recent == 0
    assert status.uidnext is None
