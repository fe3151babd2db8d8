"""Theme palettes and color utilities for the UI."""

from typotitan.core.session import CharState


class LightColors:
    BG = "#f3f4f6"
    SURFACE = "#ffffff"
    PRIMARY = "#eab308"
    TEXT_PRIMARY = "#1f2937"
    TEXT_MUTED = "#6b7280"

    CORRECT = "#22c55e"
    INCORRECT = "#ef4444"
    INCORRECT_BG = "#fee2e2"
    CURRENT_WORD_BG = "#fef9c3"
    LOW_TIME = "#ef4444"


class DarkColors:
    BG = "#111827"
    SURFACE = "#1f2937"
    PRIMARY = "#eab308"
    TEXT_PRIMARY = "#e5e7eb"
    TEXT_MUTED = "#9ca3af"

    CORRECT = "#4ade80"
    INCORRECT = "#f87171"
    INCORRECT_BG = "#7f1d1d"
    CURRENT_WORD_BG = "#3f3a1c"
    LOW_TIME = "#f87171"


def palette_for(theme: str) -> type:
    return DarkColors if theme == "dark" else LightColors


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def char_color(state: CharState, palette: type) -> str:
    """Foreground color for a character in the given state."""
    if state is CharState.CORRECT:
        return palette.CORRECT
    if state is CharState.INCORRECT:
        return palette.INCORRECT
    # untyped text sits between muted text and the surface
    return blend_hex(palette.TEXT_MUTED, palette.SURFACE, 0.25)
