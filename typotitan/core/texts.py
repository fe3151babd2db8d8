"""Practice text supply: a YAML corpus provider plus a failure-tolerant loader."""

from __future__ import annotations

import logging
import math
import random
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import yaml

from typotitan.core.settings import GameMode, GameSettings

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "The quick brown fox jumps over the lazy dog."
AVERAGE_WPM = 50
WORD_BUFFER = 1.5

STATUS_READY = "ready"
STATUS_ERROR = "error"


def words_needed(duration: int) -> int:
    """Words to request so an above-average typist does not run out of text."""
    return math.ceil((duration / 60) * AVERAGE_WPM * WORD_BUFFER)


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class TextProvider(Protocol):
    def generate(self, mode: GameMode, duration: int) -> str: ...


@dataclass(frozen=True)
class PracticeText:
    text: str
    status: str = STATUS_READY


@dataclass(frozen=True)
class Corpus:
    key: str
    title: str
    entries: List[str]


class CorpusTextProvider:
    """Builds practice text from ``data/texts/<mode>.yaml``.

    Beginner files list single lowercase words, which are sampled at random.
    Advanced files list paragraphs, which are shuffled and joined until the
    requested word count is reached.
    """

    def __init__(self, base_dir: Optional[Path] = None, rng: Optional[random.Random] = None) -> None:
        self._base_dir = base_dir or Path(__file__).resolve().parent.parent / "data" / "texts"
        self._rng = rng or random.Random()
        self._corpora = self._load_corpora()

    def corpus(self, mode: GameMode) -> Corpus:
        return self._corpora[mode.value]

    def generate(self, mode: GameMode, duration: int) -> str:
        count = words_needed(duration)
        entries = self.corpus(mode).entries
        if mode is GameMode.BEGINNER:
            return " ".join(self._rng.choice(entries) for _ in range(count))

        words: List[str] = []
        pool: List[str] = []
        while len(words) < count:
            if not pool:
                pool = list(entries)
                self._rng.shuffle(pool)
            words.extend(pool.pop().split())
        return " ".join(words[:count])

    def _load_corpora(self) -> Dict[str, Corpus]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Texts directory not found: {self._base_dir}")

        corpora: Dict[str, Corpus] = {}
        for mode in GameMode:
            path = self._base_dir / f"{mode.value}.yaml"
            if not path.exists():
                raise FileNotFoundError(f"Missing text file for mode '{mode.value}': {path}")
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{path.name}: expected YAML with 'title' and 'content'")
            title = raw.get("title")
            content = raw.get("content")
            if not title or not isinstance(title, str):
                raise ValueError(f"{path.name}: missing or invalid 'title'")
            if not isinstance(content, list):
                raise ValueError(f"{path.name}: 'content' must be a list")
            entries = [normalize_whitespace(str(item)) for item in content if str(item).strip()]
            if not entries:
                raise ValueError(f"{path.name}: 'content' is empty")
            corpora[mode.value] = Corpus(key=mode.value, title=title.strip(), entries=entries)
        return corpora


def load_practice_text(provider: Optional[TextProvider], settings: GameSettings) -> PracticeText:
    """Ask the provider for text, falling back to a fixed sentence on any failure."""
    if provider is None:
        logger.warning("No text provider configured; using fallback text")
        return PracticeText(FALLBACK_TEXT, STATUS_ERROR)
    try:
        text = normalize_whitespace(provider.generate(settings.mode, settings.duration))
    except Exception:
        logger.exception("Text provider failed for %s/%ss", settings.mode.value, settings.duration)
        return PracticeText(FALLBACK_TEXT, STATUS_ERROR)
    if not text:
        logger.warning("Text provider returned empty text; using fallback text")
        return PracticeText(FALLBACK_TEXT, STATUS_ERROR)
    return PracticeText(text, STATUS_READY)
