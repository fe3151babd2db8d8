"""Tests for typotitan.ui.colors – palettes and color blending."""

from __future__ import annotations

import pytest

from typotitan.core.session import CharState
from typotitan.ui.colors import DarkColors, LightColors, blend_hex, char_color, palette_for


# ===========================================================================
# Palettes
# ===========================================================================

class TestPalettes:
    @pytest.mark.parametrize("palette", [LightColors, DarkColors])
    def test_colors_are_hex(self, palette):
        for name in ("BG", "SURFACE", "PRIMARY", "TEXT_PRIMARY", "TEXT_MUTED", "CORRECT", "INCORRECT"):
            value = getattr(palette, name)
            assert value.startswith("#")
            assert len(value) == 7

    def test_palette_for(self):
        assert palette_for("dark") is DarkColors
        assert palette_for("light") is LightColors
        assert palette_for("unknown") is LightColors


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_t_zero_returns_first(self):
        assert blend_hex("#000000", "#FFFFFF", 0.0) == "#000000"

    def test_t_one_returns_second(self):
        assert blend_hex("#000000", "#FFFFFF", 1.0) == "#FFFFFF"

    def test_midpoint(self):
        assert blend_hex("#000000", "#FFFFFF", 0.5) == "#7F7F7F"

    def test_clamps_t(self):
        assert blend_hex("#000000", "#FFFFFF", 5) == "#FFFFFF"

    def test_invalid_input_returns_first(self):
        assert blend_hex("red", "#FFFFFF", 0.5) == "red"
        assert blend_hex("#GG0000", "#FFFFFF", 0.5) == "#GG0000"


# ===========================================================================
# char_color
# ===========================================================================

class TestCharColor:
    def test_correct(self):
        assert char_color(CharState.CORRECT, LightColors) == LightColors.CORRECT

    def test_incorrect(self):
        assert char_color(CharState.INCORRECT, DarkColors) == DarkColors.INCORRECT

    def test_untyped_is_faded(self):
        color = char_color(CharState.UNTYPED, LightColors)
        assert color == blend_hex(LightColors.TEXT_MUTED, LightColors.SURFACE, 0.25)
        assert color not in (LightColors.CORRECT, LightColors.INCORRECT)
