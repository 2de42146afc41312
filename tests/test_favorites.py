# tests/test_favorites.py
from __future__ import annotations
import json
import pytest

from blueprints.search.favorites import (
    FAVORITES_KEY, FavoriteSet, JsonFileStore, MemoryStore, Preferences,
)


def test_add_remove_persist_each_change():
    store = MemoryStore()
    favs = FavoriteSet.load(store)
    assert favs.add("KHE-123") is True
    assert favs.add("KHE-123") is False
    assert json.loads(store.get(FAVORITES_KEY)) == ["KHE-123"]
    favs.add("ENG-101")
    assert favs.remove("KHE-123") is True
    assert favs.remove("KHE-123") is False
    assert FavoriteSet.load(store).ids == ["ENG-101"]


def test_corrupt_or_missing_value_resets_to_empty():
    assert FavoriteSet.load(MemoryStore()).ids == []
    assert FavoriteSet.load(MemoryStore({FAVORITES_KEY: "{not json"})).ids == []
    assert FavoriteSet.load(MemoryStore({FAVORITES_KEY: '"KHE-123"'})).ids == []


def test_legacy_entries_with_full_records():
    raw = json.dumps([{"id": "KHE-123", "building": "Kerr Hall East"}, "ENG-101", "KHE-123", 5])
    favs = FavoriteSet.load(MemoryStore({FAVORITES_KEY: raw}))
    assert favs.ids == ["KHE-123", "ENG-101"]
    assert "KHE-123" in favs and len(favs) == 2


def test_json_file_store_roundtrip(tmp_path):
    path = tmp_path / "prefs" / "navigator.json"
    favs = FavoriteSet.load(JsonFileStore(path))
    favs.add("RCC-201")
    assert path.exists()
    assert FavoriteSet.load(JsonFileStore(path)).ids == ["RCC-201"]


def test_json_file_store_unreadable_file(tmp_path):
    path = tmp_path / "navigator.json"
    path.write_text("garbage", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get(FAVORITES_KEY) is None
    store.set("fontSize", "large")
    assert store.get("fontSize") == "large"


def test_preferences_defaults_and_save():
    store = MemoryStore()
    prefs = Preferences.load(store)
    assert (prefs.dark_mode, prefs.font_size) == (False, "medium")
    prefs.dark_mode, prefs.font_size = True, "large"
    prefs.save(store)
    again = Preferences.load(store)
    assert (again.dark_mode, again.font_size) == (True, "large")


def test_preferences_ignore_bad_values():
    prefs = Preferences.load(MemoryStore({"darkMode": "yes", "fontSize": "huge"}))
    assert (prefs.dark_mode, prefs.font_size) == (False, "medium")
    with pytest.raises(ValueError):
        Preferences(font_size="huge").save(MemoryStore())
