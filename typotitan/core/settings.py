"""Game configuration: duration and content mode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

ALLOWED_DURATIONS = (30, 60, 90, 120)
DEFAULT_DURATION = 60


class GameMode(str, Enum):
    BEGINNER = "beginner"
    ADVANCED = "advanced"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_LABELS = {
    GameMode.BEGINNER: "Beginner (Simple Words)",
    GameMode.ADVANCED: "Advanced (Paragraphs)",
}


@dataclass(frozen=True)
class GameSettings:
    """Settings chosen before a session starts; fixed for its lifetime."""

    duration: int = DEFAULT_DURATION
    mode: GameMode = GameMode.ADVANCED

    def __post_init__(self) -> None:
        if self.duration not in ALLOWED_DURATIONS:
            raise ValueError(f"duration must be one of {ALLOWED_DURATIONS}, got {self.duration!r}")
        if not isinstance(self.mode, GameMode):
            raise ValueError(f"invalid mode: {self.mode!r}")

    @classmethod
    def from_values(cls, duration: Any, mode: Any) -> "GameSettings":
        """Build settings from raw (e.g. persisted) values."""
        try:
            parsed_duration = int(duration)
        except (TypeError, ValueError):
            raise ValueError(f"invalid duration: {duration!r}") from None
        try:
            parsed_mode = GameMode(mode)
        except ValueError:
            raise ValueError(f"invalid mode: {mode!r}") from None
        return cls(duration=parsed_duration, mode=parsed_mode)
