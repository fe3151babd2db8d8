from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from typotitan.core.session import SessionSummary
from typotitan.core.settings import GameSettings

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


@dataclass
class HistoryEntry:
    wpm: int
    cpm: int
    accuracy: int
    raw_wpm: int
    duration: int
    mode: str
    timestamp: float


def _default_preferences() -> Dict[str, Any]:
    defaults = GameSettings()
    return {"theme": DEFAULT_THEME, "duration": defaults.duration, "mode": defaults.mode.value}


class LocalStore:
    """Stores test history and user preferences. Persists to disk across app restarts.
    File: ~/.typotitan/store.json."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or Path.home() / ".typotitan" / "store.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._history, self._preferences = self._load()

    # -- history (result sink) --

    def history(self) -> List[HistoryEntry]:
        return list(self._history)

    def append_result(self, summary: SessionSummary) -> HistoryEntry:
        """Record a finished session, stamping it with the current time."""
        entry = HistoryEntry(
            wpm=summary.wpm,
            cpm=summary.cpm,
            accuracy=summary.accuracy,
            raw_wpm=summary.raw_wpm,
            duration=summary.duration,
            mode=summary.mode.value,
            timestamp=time.time(),
        )
        self._history.append(entry)
        self._save()
        return entry

    def clear_history(self) -> None:
        self._history = []
        self._save()

    # -- preferences --

    def get_theme(self) -> str:
        return self._preferences["theme"]

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got {theme!r}")
        self._preferences["theme"] = theme
        self._save()

    def toggle_theme(self) -> str:
        theme = "dark" if self.get_theme() == "light" else "light"
        self.set_theme(theme)
        return theme

    def get_settings(self) -> GameSettings:
        try:
            return GameSettings.from_values(self._preferences["duration"], self._preferences["mode"])
        except ValueError as e:
            logger.warning("Ignoring stored settings: %s", e)
            return GameSettings()

    def set_settings(self, settings: GameSettings) -> None:
        self._preferences["duration"] = settings.duration
        self._preferences["mode"] = settings.mode.value
        self._save()

    def _load(self) -> Tuple[List[HistoryEntry], Dict[str, Any]]:
        history: List[HistoryEntry] = []
        preferences = _default_preferences()
        if not self._file_path.exists():
            return history, preferences
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as e:
            logger.warning("Could not load store from %s: %s", self._file_path, e)
            return history, preferences
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed store file %s", self._file_path)
            return history, preferences

        raw_history = payload.get("history", [])
        if not isinstance(raw_history, list):
            logger.warning("Ignoring malformed history in %s", self._file_path)
            raw_history = []
        for item in raw_history:
            try:
                history.append(
                    HistoryEntry(
                        wpm=int(item["wpm"]),
                        cpm=int(item["cpm"]),
                        accuracy=int(item["accuracy"]),
                        raw_wpm=int(item["raw_wpm"]),
                        duration=int(item["duration"]),
                        mode=str(item["mode"]),
                        timestamp=float(item["timestamp"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed history entry %r: %s", item, e)
        prefs = payload.get("preferences", {})
        if isinstance(prefs, dict):
            if prefs.get("theme") in THEMES:
                preferences["theme"] = prefs["theme"]
            if "duration" in prefs:
                preferences["duration"] = prefs["duration"]
            if "mode" in prefs:
                preferences["mode"] = prefs["mode"]
        return history, preferences

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "history": [asdict(entry) for entry in self._history],
            "preferences": dict(self._preferences),
        }
        try:
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save store to %s: %s", self._file_path, e)
