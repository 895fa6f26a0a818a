"""Tests for listing filters and id helpers."""
import uuid

import pytest

from notekeeper.utils.filters import NoteFilter, escape_like
from notekeeper.utils.ids import clean_tag_ids, is_placeholder_id, is_valid_id, normalize_reference


class TestNoteFilter:

    def test_empty_params_give_inactive_filter(self):
        note_filter = NoteFilter.from_params()
        assert note_filter == NoteFilter()
        assert not note_filter.is_active
        assert note_filter.to_query_params() == {}

    @pytest.mark.parametrize("value", ["", "   ", "all", "none", "ALL", "None"])
    def test_sentinels_are_dropped(self, value):
        note_filter = NoteFilter.from_params(q="  ", tag=value, category=value)
        assert note_filter.tag is None
        assert note_filter.category is None
        assert note_filter.q is None

    def test_values_are_trimmed_and_kept(self):
        note_filter = NoteFilter.from_params(q="  meeting ", tag=" t1 ", category="c1")
        assert note_filter == NoteFilter(q="meeting", tag="t1", category="c1")
        assert note_filter.is_active
        assert note_filter.to_query_params() == {"q": "meeting", "tag": "t1", "category": "c1"}

    def test_query_params_only_include_set_filters(self):
        assert NoteFilter.from_params(tag="t1", category="all").to_query_params() == {"tag": "t1"}


class TestIds:

    def test_valid_id(self):
        assert is_valid_id(str(uuid.uuid4()))
        assert not is_valid_id("not-an-id")
        assert not is_valid_id("")
        assert not is_valid_id(None)

    def test_placeholder(self):
        assert is_placeholder_id("new-1712345678901")
        assert not is_placeholder_id(str(uuid.uuid4()))

    def test_clean_tag_ids(self):
        assert clean_tag_ids(["t1", "", "new-1", "t2", "t1"]) == ["t1", "t2"]
        assert clean_tag_ids(None) == []

    def test_normalize_reference(self):
        assert normalize_reference(None) is None
        assert normalize_reference("none") is None
        assert normalize_reference(" c1 ") == "c1"


def test_escape_like():
    assert escape_like("100%_done\\") == "100\\%\\_done\\\\"
