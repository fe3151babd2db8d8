"""Tests for typotitan.core.settings – durations and modes."""

from __future__ import annotations

import dataclasses

import pytest

from typotitan.core.settings import ALLOWED_DURATIONS, GameMode, GameSettings


class TestGameMode:
    def test_values(self):
        assert GameMode("beginner") is GameMode.BEGINNER
        assert GameMode("advanced") is GameMode.ADVANCED

    def test_labels(self):
        assert GameMode.BEGINNER.label == "Beginner (Simple Words)"
        assert GameMode.ADVANCED.label == "Advanced (Paragraphs)"


class TestGameSettings:
    def test_defaults(self):
        s = GameSettings()
        assert s.duration == 60
        assert s.mode is GameMode.ADVANCED

    @pytest.mark.parametrize("duration", ALLOWED_DURATIONS)
    def test_allowed_durations(self, duration):
        assert GameSettings(duration=duration).duration == duration

    @pytest.mark.parametrize("duration", [0, 15, 45, 180, -60])
    def test_rejects_other_durations(self, duration):
        with pytest.raises(ValueError):
            GameSettings(duration=duration)

    def test_rejects_plain_string_mode(self):
        with pytest.raises(ValueError):
            GameSettings(mode="expert")

    def test_frozen(self):
        s = GameSettings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.duration = 30  # type: ignore[misc]


class TestFromValues:
    def test_parses_raw_values(self):
        s = GameSettings.from_values("90", "beginner")
        assert s == GameSettings(duration=90, mode=GameMode.BEGINNER)

    def test_invalid_duration(self):
        with pytest.raises(ValueError):
            GameSettings.from_values("soon", "beginner")

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            GameSettings.from_values(60, "expert")
