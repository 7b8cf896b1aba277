"""Tag allocation is per instance and strictly increasing."""

from mailwire.imap.tags import TagAllocator


def test_tags_increase_from_one():
    tags = TagAllocator()
    assert [tags.next_tag() for _ in range(3)] == ["A1", "A2", "A3"]
    assert tags.issued == 3


def test_allocators_do_not_share_counters():
    first = TagAllocator()
    second = TagAllocator()
    first.next_tag()
    first.next_tag()
    assert second.next_tag() == "A1"


def test_custom_prefix():
    assert TagAllocator(prefix="T").next_tag() == "T1"
