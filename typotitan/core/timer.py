"""One-second countdown scheduler backed by the Qt event loop."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

logger = logging.getLogger(__name__)

TICK_MS = 1000


class CountdownTimer(QObject):
    """Calls a callback once per second and emits ``ticked`` after each call.

    Runs on the thread that owns it, so callbacks never overlap with key
    handling in the same event loop.
    """

    ticked = Signal()

    def __init__(self, interval_ms: int = TICK_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._callback: Optional[Callable[[], object]] = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    def interval(self) -> int:
        return self._timer.interval()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self, callback: Callable[[], object]) -> None:
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _on_timeout(self) -> None:
        if self._callback is None:
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Countdown callback failed")
        self.ticked.emit()
