"""
Unit Tests for list projection helpers.
"""

from datetime import datetime, timedelta

import pytest

from inkline.client.projection import (
    SortConfig,
    SortDirection,
    SortKey,
    filter_notes,
    group_by_day,
    preview,
    project,
    sort_notes,
    toggle_all,
    toggle_selected,
    visible_window,
)


@pytest.fixture
def notes(note_factory):
    return [
        note_factory("1", title="B", minutes_ago=10),
        note_factory("2", title="A", minutes_ago=20),
        note_factory("3", title="C", minutes_ago=30),
    ]


def titles(notes):
    return [n.title for n in notes]


class TestSort:
    def test_default_is_most_recently_updated(self, notes):
        assert titles(sort_notes(reversed(notes), SortConfig())) == ["B", "A", "C"]

    def test_title_ascending_then_descending(self, notes):
        config = SortConfig().toggled(SortKey.TITLE)
        assert config == SortConfig(key=SortKey.TITLE, direction=SortDirection.ASC)
        assert titles(sort_notes(notes, config)) == ["A", "B", "C"]

        config = config.toggled(SortKey.TITLE)
        assert config.direction == SortDirection.DESC
        assert titles(sort_notes(notes, config)) == ["C", "B", "A"]

    def test_title_sort_ignores_case(self, note_factory):
        mixed = [note_factory("1", title="beta"), note_factory("2", title="Alpha")]
        config = SortConfig(key=SortKey.TITLE, direction=SortDirection.ASC)
        assert titles(sort_notes(mixed, config)) == ["Alpha", "beta"]

    def test_ties_keep_input_order(self, note_factory):
        same = [note_factory(str(i), title="Same") for i in range(4)]
        for direction in SortDirection:
            config = SortConfig(key=SortKey.TITLE, direction=direction)
            assert [n.id for n in sort_notes(same, config)] == ["0", "1", "2", "3"]

    def test_input_is_not_mutated(self, notes):
        before = list(notes)
        sort_notes(notes, SortConfig(key=SortKey.TITLE))
        assert notes == before


class TestFilter:
    def test_case_insensitive_substring(self, note_factory):
        items = [note_factory("1", title="Shopping list"), note_factory("2", title="Ideas")]
        assert [n.id for n in filter_notes(items, "LIST")] == ["1"]

    def test_blank_query_keeps_all(self, notes):
        assert len(filter_notes(notes, "  ")) == 3

    def test_project_filters_then_sorts(self, notes, note_factory):
        notes.append(note_factory("4", title="Archived B", archived=True))
        result = project(
            notes,
            query="b",
            config=SortConfig(key=SortKey.TITLE),
            archived=False,
        )
        assert [n.id for n in result] == ["1"]


class TestSelection:
    def test_toggle_selected(self):
        assert toggle_selected(["a"], "b") == ["a", "b"]
        assert toggle_selected(["a", "b"], "a") == ["b"]

    def test_toggle_all(self):
        assert toggle_all([], ["a", "b"]) == ["a", "b"]
        assert toggle_all(["a", "b"], ["a", "b"]) == []
        assert toggle_all(["a"], ["a", "b"]) == ["a", "b"]
        assert toggle_all([], []) == []


class TestVisibleWindow:
    def test_slice(self):
        assert visible_window(list(range(10)), 2, 3) == [2, 3, 4]

    def test_clamped_to_end(self):
        assert visible_window(list(range(10)), 9, 4) == [6, 7, 8, 9]

    def test_negative_start(self):
        assert visible_window(list(range(3)), -5, 2) == [0, 1]

    def test_shorter_than_window(self):
        assert visible_window([1, 2], 0, 10) == [1, 2]


class TestGroupByDay:
    def test_today_yesterday_older(self, note_factory):
        now = datetime(2025, 3, 14, 12, 0)
        items = [
            note_factory("t", updated_at=now - timedelta(hours=11)),
            note_factory("y", updated_at=now - timedelta(hours=13)),
            note_factory("o", updated_at=now - timedelta(days=3)),
        ]
        groups = group_by_day(items, now)
        assert [n.id for n in groups["Today"]] == ["t"]
        assert [n.id for n in groups["Yesterday"]] == ["y"]
        assert [n.id for n in groups["Older"]] == ["o"]


class TestPreview:
    def test_strips_markup(self):
        assert preview("<p>Hello <b>world</b></p>") == "Hello world"

    def test_truncates(self):
        assert preview("word " * 50, length=10) == "word word…"

    def test_empty(self):
        assert preview("") == "—"
        assert preview("<p></p>") == "—"
