import pytest

from app.services.announcement.announcement_tags import add_tag, normalize_tags, remove_tag


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_blank_tag_is_ignored(raw):
    assert add_tag(["urgent"], raw) == ["urgent"]


def test_duplicate_tag_is_ignored():
    assert add_tag(["urgent", "class"], "urgent") == ["urgent", "class"]


def test_tag_is_trimmed_and_appended():
    assert add_tag(["urgent"], "  event ") == ["urgent", "event"]


def test_tags_are_case_sensitive():
    assert add_tag(["urgent"], "Urgent") == ["urgent", "Urgent"]


def test_add_tag_does_not_mutate_input():
    tags = ["urgent"]
    add_tag(tags, "class")
    assert tags == ["urgent"]


def test_remove_tag():
    assert remove_tag(["urgent", "class"], "urgent") == ["class"]
    assert remove_tag(["urgent"], "missing") == ["urgent"]


def test_normalize_tags():
    assert normalize_tags([" urgent", "class", "urgent ", "", None]) == ["urgent", "class"]
    assert normalize_tags(None) == []
