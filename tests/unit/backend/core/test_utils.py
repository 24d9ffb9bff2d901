"""
Unit Tests for Core Utilities.
"""

from inkline.backend.core.utils import display_title, strip_markup, utc_now, word_count


class TestDisplayTitle:
    def test_empty_title_is_untitled(self):
        assert display_title("") == "Untitled"
        assert display_title("   ") == "Untitled"
        assert display_title(None) == "Untitled"

    def test_title_is_trimmed(self):
        assert display_title("  Groceries ") == "Groceries"


class TestMarkup:
    def test_strip_markup(self):
        assert strip_markup("<p>Hello <b>world</b></p>") == "Hello world"

    def test_tags_separate_words(self):
        assert word_count("<p>one</p><p>two</p>") == 2

    def test_empty_body_has_no_words(self):
        assert word_count("") == 0
        assert word_count("<p></p>") == 0
        assert word_count(None) == 0


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None
