"""View models derived from a session snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from typotitan.core.session import CharState, Phase, SessionSnapshot

LOW_TIME_SECONDS = 10
MISSED_SPACE = "·"


@dataclass
class CharCell:
    """One rendered character: what to show, its verdict, and word highlighting."""

    char: str
    state: CharState
    in_current_word: bool = False


def current_word_span(text: str, position: int) -> Tuple[int, int]:
    """Return [start, end) of the word the cursor at ``position`` is in.

    Right after a space the cursor belongs to the following word.
    """
    start = text.rfind(" ", 0, position) + 1 if position > 0 else 0
    if position > 0 and text[position - 1] == " ":
        start = position
    end = text.find(" ", start)
    if end == -1:
        end = len(text)
    return start, end


def build_cells(snapshot: SessionSnapshot) -> List[CharCell]:
    if snapshot.phase is Phase.FINISHED:
        word_start, word_end = -1, -1
    else:
        word_start, word_end = current_word_span(snapshot.text, len(snapshot.input))
    cells = []
    for index, (char, state) in enumerate(zip(snapshot.text, snapshot.char_states)):
        shown = MISSED_SPACE if char == " " and state is CharState.INCORRECT else char
        cells.append(CharCell(char=shown, state=state, in_current_word=word_start <= index < word_end))
    return cells


def format_time(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m}:{s:02d}"


def is_low_time(seconds: int) -> bool:
    return seconds < LOW_TIME_SECONDS


def status_hint(phase: Phase) -> str:
    if phase is Phase.IDLE:
        return "Start typing to begin the test..."
    if phase is Phase.RUNNING:
        return "Keep going!"
    return "Test complete."
