"""
Unit Tests for local preferences.
"""

import json

from inkline.client.preferences import ListView, PreferenceStore
from inkline.client.projection import SortConfig, SortDirection, SortKey


class TestSortPreferences:
    def test_defaults(self, tmp_path):
        store = PreferenceStore(tmp_path)
        assert store.get_sort_config(ListView.NOTES) == SortConfig()

    def test_persisted_per_view(self, tmp_path):
        config = SortConfig(key=SortKey.TITLE, direction=SortDirection.ASC)
        PreferenceStore(tmp_path).set_sort_config(ListView.ARCHIVED, config)

        store = PreferenceStore(tmp_path)
        assert store.get_sort_config(ListView.ARCHIVED) == config
        assert store.get_sort_config(ListView.NOTES) == SortConfig()

    def test_storage_keys(self, tmp_path):
        PreferenceStore(tmp_path).set_sort_config(ListView.NOTES, SortConfig())
        data = json.loads((tmp_path / "preferences.json").read_text())
        assert data["notes_sort_config"] == {"key": "updated_at", "direction": "desc"}

    def test_invalid_value_falls_back(self, tmp_path):
        (tmp_path / "preferences.json").write_text(
            json.dumps({"notes_sort_config": {"key": "colour", "direction": "sideways"}})
        )
        assert PreferenceStore(tmp_path).get_sort_config(ListView.NOTES) == SortConfig()

    def test_corrupt_file_falls_back(self, tmp_path):
        (tmp_path / "preferences.json").write_text("{not json")
        store = PreferenceStore(tmp_path)
        assert store.get_sort_config(ListView.NOTES) == SortConfig()
        assert store.font_size == 16


class TestFontSize:
    def test_clamped(self, tmp_path):
        store = PreferenceStore(tmp_path)
        store.font_size = 40
        assert store.font_size == 32
        store.font_size = 4
        assert PreferenceStore(tmp_path).font_size == 12

    def test_non_integer_ignored(self, tmp_path):
        (tmp_path / "preferences.json").write_text(json.dumps({"editor_font_size": "big"}))
        assert PreferenceStore(tmp_path).font_size == 16


class TestAccessToken:
    def test_set_and_clear(self, tmp_path):
        store = PreferenceStore(tmp_path)
        assert store.access_token is None

        store.access_token = "abc"
        assert PreferenceStore(tmp_path).access_token == "abc"

        store.access_token = None
        assert PreferenceStore(tmp_path).access_token is None
