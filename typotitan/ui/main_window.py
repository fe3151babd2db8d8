from __future__ import annotations

import html
import logging
from datetime import datetime
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from typotitan.core.session import CharState, Phase, SessionSummary, TypingSession
from typotitan.core.settings import ALLOWED_DURATIONS, GameMode, GameSettings
from typotitan.core.store import LocalStore
from typotitan.core.texts import STATUS_ERROR, TextProvider, load_practice_text
from typotitan.core.timer import CountdownTimer
from typotitan.ui.audio import KeySound
from typotitan.ui.colors import char_color, palette_for
from typotitan.ui.keys import session_key
from typotitan.ui.models import build_cells, format_time, is_low_time, status_hint

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Typing test window: settings bar, live stats, practice text, results and history.

    Every new text (restart or settings change) gets a brand new session;
    the previous one is closed so its countdown cannot keep running.
    """

    def __init__(self, store: LocalStore, provider: Optional[TextProvider]) -> None:
        super().__init__()
        self._store = store
        self._provider = provider
        self._settings = store.get_settings()
        self._theme = store.get_theme()
        self._session: Optional[TypingSession] = None
        self._timer = CountdownTimer(parent=self)
        self._key_sound = KeySound(parent=self)
        self._timer.ticked.connect(self._refresh)

        self._stack: Optional[QStackedWidget] = None
        self._typing_screen: Optional[QWidget] = None
        self._results_screen: Optional[QWidget] = None
        self._history_screen: Optional[QWidget] = None
        self._text_label: Optional[QLabel] = None
        self._wpm_label: Optional[QLabel] = None
        self._accuracy_label: Optional[QLabel] = None
        self._time_label: Optional[QLabel] = None
        self._hint_label: Optional[QLabel] = None
        self._results_label: Optional[QLabel] = None
        self._history_list: Optional[QListWidget] = None
        self._duration_combo: Optional[QComboBox] = None
        self._mode_combo: Optional[QComboBox] = None
        self._theme_button: Optional[QPushButton] = None

        self._build_ui()
        self._apply_theme()
        self._new_game()

    def _build_ui(self) -> None:
        self.setWindowTitle("TypoTitan")
        central = QWidget(self)
        layout = QVBoxLayout(central)

        header = QHBoxLayout()
        title = QLabel("<b>Typo</b>Titan")
        title.setObjectName("title")
        header.addWidget(title)
        header.addStretch(1)

        self._duration_combo = QComboBox()
        for seconds in ALLOWED_DURATIONS:
            self._duration_combo.addItem(f"{seconds}s", seconds)
        self._duration_combo.setCurrentIndex(ALLOWED_DURATIONS.index(self._settings.duration))
        self._duration_combo.currentIndexChanged.connect(self._on_settings_changed)
        header.addWidget(self._duration_combo)

        self._mode_combo = QComboBox()
        for mode in GameMode:
            self._mode_combo.addItem(mode.label, mode)
        self._mode_combo.setCurrentIndex(list(GameMode).index(self._settings.mode))
        self._mode_combo.currentIndexChanged.connect(self._on_settings_changed)
        header.addWidget(self._mode_combo)

        self._theme_button = QPushButton()
        self._theme_button.clicked.connect(self._toggle_theme)
        header.addWidget(self._theme_button)

        history_button = QPushButton("History")
        history_button.clicked.connect(self._show_history)
        header.addWidget(history_button)
        layout.addLayout(header)

        self._stack = QStackedWidget()
        self._typing_screen = self._build_typing_screen()
        self._results_screen = self._build_results_screen()
        self._history_screen = self._build_history_screen()
        for screen in (self._typing_screen, self._results_screen, self._history_screen):
            self._stack.addWidget(screen)
        layout.addWidget(self._stack, 1)

        self.setCentralWidget(central)
        for widget in central.findChildren(QWidget):
            widget.setFocusPolicy(Qt.NoFocus)
        self.setFocusPolicy(Qt.StrongFocus)

    def _build_typing_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        stats = QHBoxLayout()
        self._wpm_label = QLabel()
        self._accuracy_label = QLabel()
        self._time_label = QLabel()
        for label in (self._wpm_label, self._accuracy_label, self._time_label):
            label.setAlignment(Qt.AlignCenter)
            stats.addWidget(label)
        layout.addLayout(stats)

        self._text_label = QLabel()
        self._text_label.setWordWrap(True)
        self._text_label.setTextFormat(Qt.RichText)
        layout.addWidget(self._text_label, 1)

        self._hint_label = QLabel()
        self._hint_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._hint_label)

        restart = QPushButton("Restart")
        restart.clicked.connect(self._new_game)
        layout.addWidget(restart, 0, Qt.AlignCenter)
        return screen

    def _build_results_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        self._results_label = QLabel()
        self._results_label.setAlignment(Qt.AlignCenter)
        self._results_label.setTextFormat(Qt.RichText)
        layout.addWidget(self._results_label, 1)
        again = QPushButton("Try Again")
        again.clicked.connect(self._new_game)
        layout.addWidget(again, 0, Qt.AlignCenter)
        return screen

    def _build_history_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        self._history_list = QListWidget()
        layout.addWidget(self._history_list, 1)
        buttons = QHBoxLayout()
        clear = QPushButton("Clear")
        clear.clicked.connect(self._clear_history)
        close = QPushButton("Close")
        close.clicked.connect(self._close_history)
        buttons.addWidget(clear)
        buttons.addWidget(close)
        layout.addLayout(buttons)
        return screen

    # -- session lifecycle --

    def _new_game(self) -> None:
        if self._session is not None:
            self._session.close()
        practice = load_practice_text(self._provider, self._settings)
        self._session = TypingSession(
            practice.text,
            self._settings,
            on_finish=self._on_session_finished,
            scheduler=self._timer,
            feedback=self._key_sound,
        )
        if practice.status == STATUS_ERROR:
            self.statusBar().showMessage("Using fallback text. Press Restart to try again.")
        else:
            self.statusBar().clearMessage()
        self._stack.setCurrentWidget(self._typing_screen)
        self._refresh()
        self.setFocus()

    def _on_session_finished(self, summary: SessionSummary) -> None:
        entry = self._store.append_result(summary)
        logger.info("Saved result at %s", entry.timestamp)

    def _on_settings_changed(self) -> None:
        self._settings = GameSettings(
            duration=self._duration_combo.currentData(),
            mode=self._mode_combo.currentData(),
        )
        self._store.set_settings(self._settings)
        self._new_game()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if self._session is None or self._stack.currentWidget() is not self._typing_screen:
            super().keyPressEvent(event)
            return
        key = session_key(event.key(), event.text(), event.modifiers())
        if key is None:
            super().keyPressEvent(event)
            return
        self._session.handle_key(key)
        self._refresh()

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._session is not None:
            self._session.close()
        super().closeEvent(event)

    # -- rendering --

    def _refresh(self) -> None:
        """Redraw from the current session snapshot while the typing screen is showing."""
        if self._session is None or self._stack.currentWidget() is not self._typing_screen:
            return
        snapshot = self._session.snapshot()
        if snapshot.phase is Phase.FINISHED and snapshot.final_result is not None:
            self._show_results()
            return
        palette = palette_for(self._theme)
        stats = snapshot.live_stats
        self._wpm_label.setText(f"WPM\n{stats.wpm}")
        self._accuracy_label.setText(f"Accuracy\n{stats.accuracy}%")
        self._time_label.setText(f"Time\n{format_time(snapshot.time_remaining)}")
        time_color = palette.LOW_TIME if is_low_time(snapshot.time_remaining) else palette.TEXT_PRIMARY
        self._time_label.setStyleSheet(f"color: {time_color};")
        self._hint_label.setText(status_hint(snapshot.phase))

        parts = []
        cursor = len(snapshot.input)
        for index, cell in enumerate(build_cells(snapshot)):
            style = f"color: {char_color(cell.state, palette)};"
            if cell.in_current_word:
                style += f" background-color: {palette.CURRENT_WORD_BG};"
            if cell.state is CharState.INCORRECT:
                style += f" background-color: {palette.INCORRECT_BG};"
            if index == cursor:
                style += " text-decoration: underline;"
            parts.append(f'<span style="{style}">{html.escape(cell.char)}</span>')
        self._text_label.setText(
            f'<div style="font-family: monospace; font-size: 22px;">{"".join(parts)}</div>'
        )

    def _show_results(self) -> None:
        result = self._session.final_result
        self._results_label.setText(
            "<h2>Results</h2>"
            f"<p>WPM <b>{result.wpm}</b> &nbsp; Accuracy <b>{result.accuracy}%</b></p>"
            f"<p>CPM {result.cpm} &nbsp; Raw WPM {result.raw_wpm}</p>"
        )
        self._stack.setCurrentWidget(self._results_screen)

    def _show_history(self) -> None:
        if self._session is not None and not self._session.is_finished():
            # leaving the test abandons it; a fresh one starts when history closes
            self._session.close()
        self._history_list.clear()
        for entry in reversed(self._store.history()):
            when = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M")
            self._history_list.addItem(
                f"{when}  {entry.wpm} wpm  {entry.accuracy}%  ({entry.duration}s, {entry.mode})"
            )
        self._stack.setCurrentWidget(self._history_screen)

    def _close_history(self) -> None:
        if self._session is not None and self._session.is_finished():
            self._stack.setCurrentWidget(self._results_screen)
            self.setFocus()
        else:
            self._new_game()

    def _clear_history(self) -> None:
        self._store.clear_history()
        self._history_list.clear()

    def _toggle_theme(self) -> None:
        self._theme = self._store.toggle_theme()
        self._apply_theme()
        self._refresh()

    def _apply_theme(self) -> None:
        palette = palette_for(self._theme)
        self._theme_button.setText("Dark" if self._theme == "light" else "Light")
        self.setStyleSheet(
            f"""
            QMainWindow, QWidget {{ background: {palette.BG}; color: {palette.TEXT_PRIMARY}; }}
            QLabel#title {{ font-size: 24px; color: {palette.PRIMARY}; }}
            QPushButton {{ background: {palette.SURFACE}; border-radius: 6px; padding: 6px 12px; }}
            """
        )
