"""Tests for typotitan.core.store – history and preference persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from typotitan.core.session import SessionSummary
from typotitan.core.settings import GameMode, GameSettings
from typotitan.core.store import HistoryEntry, LocalStore, _default_preferences


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "store.json"


@pytest.fixture()
def store(store_file: Path) -> LocalStore:
    """LocalStore backed by a temp file so tests don't touch ~/.typotitan."""
    return LocalStore(store_file)


def _summary(**overrides) -> SessionSummary:
    values = dict(wpm=42, cpm=230, accuracy=96, raw_wpm=45, duration=60, mode=GameMode.ADVANCED)
    values.update(overrides)
    return SessionSummary(**values)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_default_preferences(self):
        assert _default_preferences() == {"theme": "light", "duration": 60, "mode": "advanced"}

    def test_fresh_store(self, store: LocalStore):
        assert store.history() == []
        assert store.get_theme() == "light"
        assert store.get_settings() == GameSettings()


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class TestHistory:
    def test_append_stamps_timestamp(self, store: LocalStore):
        entry = store.append_result(_summary())
        assert isinstance(entry, HistoryEntry)
        assert entry.wpm == 42
        assert entry.mode == "advanced"
        assert entry.timestamp > 0
        assert store.history() == [entry]

    def test_history_persists(self, store: LocalStore, store_file: Path):
        store.append_result(_summary(wpm=10))
        store.append_result(_summary(wpm=20, mode=GameMode.BEGINNER))
        reloaded = LocalStore(store_file)
        assert [e.wpm for e in reloaded.history()] == [10, 20]
        assert reloaded.history()[1].mode == "beginner"

    def test_history_returns_copy(self, store: LocalStore):
        store.append_result(_summary())
        store.history().clear()
        assert len(store.history()) == 1

    def test_clear_history(self, store: LocalStore, store_file: Path):
        store.append_result(_summary())
        store.clear_history()
        assert store.history() == []
        assert LocalStore(store_file).history() == []


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

class TestPreferences:
    def test_set_theme(self, store: LocalStore, store_file: Path):
        store.set_theme("dark")
        assert LocalStore(store_file).get_theme() == "dark"

    def test_invalid_theme(self, store: LocalStore):
        with pytest.raises(ValueError):
            store.set_theme("purple")

    def test_toggle_theme(self, store: LocalStore):
        assert store.toggle_theme() == "dark"
        assert store.toggle_theme() == "light"

    def test_settings_round_trip(self, store: LocalStore, store_file: Path):
        store.set_settings(GameSettings(duration=120, mode=GameMode.BEGINNER))
        assert LocalStore(store_file).get_settings() == GameSettings(duration=120, mode=GameMode.BEGINNER)

    def test_invalid_stored_settings_fall_back(self, store_file: Path):
        store_file.write_text(json.dumps({"preferences": {"duration": 45, "mode": "advanced"}}), encoding="utf-8")
        assert LocalStore(store_file).get_settings() == GameSettings()


# ---------------------------------------------------------------------------
# Corrupt files
# ---------------------------------------------------------------------------

class TestCorruptFiles:
    def test_invalid_json(self, store_file: Path):
        store_file.write_text("{not json", encoding="utf-8")
        store = LocalStore(store_file)
        assert store.history() == []
        assert store.get_theme() == "light"

    def test_non_dict_payload(self, store_file: Path):
        store_file.write_text("[1, 2, 3]", encoding="utf-8")
        assert LocalStore(store_file).history() == []

    @pytest.mark.parametrize("history", ["5", "null", "\"abc\"", "{}"])
    def test_non_list_history(self, store_file: Path, history: str):
        store_file.write_text('{"history": ' + history + ', "preferences": {"theme": "dark"}}', encoding="utf-8")
        store = LocalStore(store_file)
        assert store.history() == []
        assert store.get_theme() == "dark"

    def test_non_dict_history_entry_skipped(self, store_file: Path):
        store_file.write_text(json.dumps({"history": [5, "x", None]}), encoding="utf-8")
        assert LocalStore(store_file).history() == []

    def test_invalid_utf8(self, store_file: Path):
        store_file.write_bytes(b'{"preferences": {"theme": "\xff"}}')
        store = LocalStore(store_file)
        assert store.history() == []
        assert store.get_theme() == "light"

    def test_malformed_entry_skipped(self, store_file: Path):
        good = {"wpm": 1, "cpm": 5, "accuracy": 90, "raw_wpm": 2, "duration": 30, "mode": "beginner", "timestamp": 1.0}
        store_file.write_text(json.dumps({"history": [good, {"wpm": "x"}]}), encoding="utf-8")
        history = LocalStore(store_file).history()
        assert len(history) == 1
        assert history[0].duration == 30

    def test_unknown_theme_ignored(self, store_file: Path):
        store_file.write_text(json.dumps({"preferences": {"theme": "neon"}}), encoding="utf-8")
        assert LocalStore(store_file).get_theme() == "light"
