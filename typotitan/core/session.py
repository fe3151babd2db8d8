from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol

from typotitan.core.settings import GameMode, GameSettings

logger = logging.getLogger(__name__)

BACKSPACE = "Backspace"
CHARS_PER_WORD = 5


class CharState(str, Enum):
    UNTYPED = "untyped"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameResult:
    """Speed and accuracy figures, all rounded to whole numbers."""

    wpm: int
    cpm: int
    accuracy: int
    raw_wpm: int


ZERO_RESULT = GameResult(wpm=0, cpm=0, accuracy=100, raw_wpm=0)


@dataclass(frozen=True)
class SessionSummary:
    """What the result sink receives when a session ends."""

    wpm: int
    cpm: int
    accuracy: int
    raw_wpm: int
    duration: int
    mode: GameMode


@dataclass(frozen=True)
class SessionSnapshot:
    phase: Phase
    text: str
    input: str
    char_states: tuple
    time_remaining: int
    total_typed_chars: int
    correct_typed_chars: int
    live_stats: GameResult
    final_result: Optional[GameResult]


class Scheduler(Protocol):
    def start(self, callback: Callable[[], object]) -> None: ...

    def stop(self) -> None: ...


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_stats(total_typed: int, correct_typed: int, elapsed_seconds: float) -> GameResult:
    """Compute WPM, CPM, accuracy and raw WPM.

    Words are counted as five characters. WPM and CPM only count correct
    characters; raw WPM counts every typed character. Accuracy is the share
    of typed characters that were correct and is 100 when nothing was typed.
    """
    if elapsed_seconds <= 0:
        return ZERO_RESULT
    minutes = elapsed_seconds / 60.0
    typed_words = total_typed / CHARS_PER_WORD
    correct_words = correct_typed / CHARS_PER_WORD
    wpm = _round_half_up(correct_words / minutes) if minutes > 0 else 0
    cpm = _round_half_up(correct_typed / minutes) if minutes > 0 else 0
    raw_wpm = _round_half_up(typed_words / minutes) if minutes > 0 else 0
    accuracy = _round_half_up(100.0 * correct_typed / total_typed) if total_typed > 0 else 100
    return GameResult(wpm=wpm, cpm=cpm, accuracy=accuracy, raw_wpm=raw_wpm)


class TypingSession:
    """State machine for one timed typing test.

    The session starts ``idle``. The first key moves it to ``running``,
    stamps the start time and starts the countdown scheduler, which is
    expected to call :meth:`tick` once per second. It ends (``finished``)
    when the countdown reaches zero or the last character of the text is
    typed, at which point the result is handed to ``on_finish``.

    Invalid input never raises: keys past the end of the text, backspace
    on empty input and anything after the session finished are ignored.

    Key events and ticks must be delivered from the same thread (the Qt
    event loop does this); the session holds no lock.
    """

    def __init__(
        self,
        text: str,
        settings: GameSettings,
        on_finish: Optional[Callable[[SessionSummary], object]] = None,
        scheduler: Optional[Scheduler] = None,
        feedback: Optional[Callable[[], object]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not text:
            raise ValueError("session text must not be empty")
        if not isinstance(settings, GameSettings):
            raise ValueError(f"expected GameSettings, got {type(settings).__name__}")
        self._text = text
        self._settings = settings
        self._on_finish = on_finish
        self._scheduler = scheduler
        self._feedback = feedback
        self._clock = clock

        self._phase = Phase.IDLE
        self._input = ""
        self._char_states: List[CharState] = [CharState.UNTYPED] * len(text)
        self._time_remaining = settings.duration
        self._started_at: Optional[float] = None
        self._total_typed = 0
        self._correct_typed = 0
        self._live_stats = ZERO_RESULT
        self._final_result: Optional[GameResult] = None

    @property
    def text(self) -> str:
        """Target text for the whole session."""
        return self._text

    @property
    def settings(self) -> GameSettings:
        """Duration and mode the session was created with."""
        return self._settings

    @property
    def phase(self) -> Phase:
        """Current lifecycle phase (idle, running or finished)."""
        return self._phase

    @property
    def input(self) -> str:
        """Characters typed so far, after backspaces."""
        return self._input

    @property
    def char_states(self) -> tuple:
        """Per-character verdicts, index-aligned with the text."""
        return tuple(self._char_states)

    @property
    def time_remaining(self) -> int:
        """Seconds left on the countdown."""
        return self._time_remaining

    @property
    def started_at(self) -> Optional[float]:
        """Timestamp of the first keystroke, None while idle."""
        return self._started_at

    @property
    def total_typed_chars(self) -> int:
        """Characters typed in total, including later-deleted ones."""
        return self._total_typed

    @property
    def correct_typed_chars(self) -> int:
        """Characters typed correctly, including later-deleted ones."""
        return self._correct_typed

    @property
    def live_stats(self) -> GameResult:
        """Stats refreshed on every tick and at the end of the session."""
        return self._live_stats

    @property
    def final_result(self) -> Optional[GameResult]:
        """Result of the finished session, None until it ends."""
        return self._final_result

    def is_finished(self) -> bool:
        return self._phase is Phase.FINISHED

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            text=self._text,
            input=self._input,
            char_states=tuple(self._char_states),
            time_remaining=self._time_remaining,
            total_typed_chars=self._total_typed,
            correct_typed_chars=self._correct_typed,
            live_stats=self._live_stats,
            final_result=self._final_result,
        )

    def handle_key(self, key: str) -> bool:
        """Apply a single character or :data:`BACKSPACE`. Returns True if the key was applied to the input."""
        if self._phase is Phase.FINISHED:
            return False
        if key != BACKSPACE and len(key) != 1:
            return False
        if self._phase is Phase.IDLE:
            self._start()

        self._play_feedback()

        if key == BACKSPACE:
            if not self._input:
                return False
            # typed counters are cumulative; backspace never decrements them
            self._char_states[len(self._input) - 1] = CharState.UNTYPED
            self._input = self._input[:-1]
            return True

        position = len(self._input)
        if position >= len(self._text):
            return False
        self._total_typed += 1
        if key == self._text[position]:
            self._char_states[position] = CharState.CORRECT
            self._correct_typed += 1
        else:
            self._char_states[position] = CharState.INCORRECT
        self._input += key

        if len(self._input) == len(self._text):
            self.end_session()
        return True

    def tick(self) -> int:
        """Advance the countdown by one second and return the time remaining."""
        if self._phase is not Phase.RUNNING:
            return self._time_remaining
        if self._time_remaining <= 1:
            self.end_session()
            self._time_remaining = 0
            return 0
        self._time_remaining -= 1
        self._live_stats = self.current_stats()
        return self._time_remaining

    def current_stats(self) -> GameResult:
        """Stats for the time elapsed since the first keystroke."""
        if self._started_at is None:
            return ZERO_RESULT
        elapsed = self._clock() - self._started_at
        return compute_stats(self._total_typed, self._correct_typed, elapsed)

    def end_session(self) -> None:
        """Finish the session. Does nothing unless the session is running."""
        if self._phase is not Phase.RUNNING:
            return
        self._phase = Phase.FINISHED
        self._stop_scheduler()
        final = self.current_stats()
        self._final_result = final
        self._live_stats = final
        logger.info(
            "Session finished: %d wpm, %d%% accuracy (%ds %s)",
            final.wpm, final.accuracy, self._settings.duration, self._settings.mode.value,
        )
        if self._on_finish is None:
            return
        summary = SessionSummary(
            wpm=final.wpm,
            cpm=final.cpm,
            accuracy=final.accuracy,
            raw_wpm=final.raw_wpm,
            duration=self._settings.duration,
            mode=self._settings.mode,
        )
        try:
            self._on_finish(summary)
        except Exception:
            logger.exception("Result sink failed; session result kept in memory only")

    def close(self) -> None:
        """Release the countdown timer of an abandoned or replaced session."""
        self._stop_scheduler()

    def _start(self) -> None:
        self._phase = Phase.RUNNING
        self._started_at = self._clock()
        self._live_stats = ZERO_RESULT
        if self._scheduler is not None:
            self._scheduler.start(self.tick)

    def _stop_scheduler(self) -> None:
        if self._scheduler is None:
            return
        try:
            self._scheduler.stop()
        except Exception:
            logger.exception("Could not stop session timer")

    def _play_feedback(self) -> None:
        if self._feedback is None:
            return
        try:
            self._feedback()
        except Exception as e:
            logger.warning("Key feedback failed: %s", e)
