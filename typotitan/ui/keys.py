"""Translate Qt key events into session keys."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt

from typotitan.core.session import BACKSPACE

_CONTROL = Qt.KeyboardModifier.ControlModifier
_ALT = Qt.KeyboardModifier.AltModifier
_META = Qt.KeyboardModifier.MetaModifier


def _is_shortcut(modifiers) -> bool:
    # AltGr arrives as Ctrl+Alt on Windows and still produces a character
    if modifiers & _META:
        return True
    return bool(modifiers & _CONTROL) and not (modifiers & _ALT)


def session_key(key: int, text: str, modifiers=Qt.KeyboardModifier.NoModifier) -> Optional[str]:
    """Return a single printable character, BACKSPACE, or None for keys the session never sees."""
    if key == Qt.Key.Key_Backspace:
        return BACKSPACE
    if _is_shortcut(modifiers):
        return None
    if len(text) == 1 and text.isprintable():
        return text
    return None
