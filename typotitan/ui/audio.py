from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)

DEFAULT_SOUND = Path(__file__).resolve().parent.parent / "assets" / "keypress.wav"


class KeySound(QObject):
    """Short click played on every keystroke. Missing or broken audio only disables it."""

    def __init__(self, path: Path = DEFAULT_SOUND, volume: float = 0.5, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.enabled = True
        self._effect: Optional[QSoundEffect] = None
        if not path.exists():
            logger.warning("Keypress sound not found: %s", path)
            self.enabled = False
            return
        self._effect = QSoundEffect(self)
        self._effect.setSource(QUrl.fromLocalFile(str(path)))
        self._effect.setVolume(volume)

    def play(self) -> None:
        if not self.enabled or self._effect is None:
            return
        self._effect.stop()
        self._effect.play()

    def __call__(self) -> None:
        self.play()
