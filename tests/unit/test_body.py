"""
Module: tests/unit/test_body.py

What:
    Cover the clean-up applied to ``FETCH BODY[...]`` replies before they are
    handed to the body parser.

Why:
    The repairs are string heuristics. Pinning their exact effect keeps a
    later change from silently altering fetched HTML.
"""

from mailwire.imap.body import extract_html_payload, prepare_body, repair_body_text

HTML_REPLY = (
    "* 1 FETCH (BODY[TEXT] {120}\n"
    '<!DOCTYPE html><html><body class=3D"main">Total:=\n 42 =\n'
    '<a href=3D"x">link</a></body></html>\n'
    ")"
)


def test_repair_body_text_applies_each_rewrite():
    assert repair_body_text("soft=\nbreak") == "softbreak"
    assert repair_body_text("a=3Db") == "a=b"
    assert repair_body_text('href="=x"') == 'href="x"'
    assert repair_body_text("Total:= 5") == "Total: 5"
    assert repair_body_text('class=="x"') == 'class="x"'


def test_extract_html_payload_strips_literal_and_trailing_paren():
    html = extract_html_payload(repair_body_text(HTML_REPLY))
    assert html.rstrip() == '<!DOCTYPE html><html><body class="main">Total: 42 <a href="x">link</a></body></html>'
    assert not html.rstrip().endswith(")")


def test_extract_html_payload_without_marker_returns_none():
    assert extract_html_payload("<!DOCTYPE html><html></html>") is None
    assert extract_html_payload("* 1 FETCH (BODY[TEXT] {5}\nhello)") is None


def test_prepare_body_returns_raw_text_untouched_without_html():
    raw = "* 1 FETCH (BODY[TEXT] {11}\nprice=3D10\n)"
    assert prepare_body(raw) == raw


def test_prepare_body_returns_repaired_html():
    assert prepare_body(HTML_REPLY).startswith('<!DOCTYPE html><html><body class="main">')
