"""Tests for text measurement, wrapping and text object layout."""

import pytest

from reelforge.render.draw_commands import CommandType, DrawCommand
from reelforge.render.text_layout import (
    PillowTextMeasurer,
    TextShadow,
    layout_text,
    parse_font_size,
    wrap_words,
)
from reelforge.schemas.project import TextStyle


def _measure(s: str) -> float:
    return len(s) * 10.0


def _text_command(text: str, **fields) -> DrawCommand:
    defaults = dict(type=CommandType.TEXT, x=540, y=300, w=0, h=0, z=0, text=text)
    defaults.update(fields)
    return DrawCommand(**defaults)


class TestWrapWords:
    def test_greedy_fill(self):
        assert wrap_words("aa bb cc", 50, _measure) == ["aa bb", "cc"]

    def test_fits_on_one_line(self):
        assert wrap_words("aa bb cc", 80, _measure) == ["aa bb cc"]

    def test_overlong_word_still_placed(self):
        """The first word of a line is placed even when it alone is too wide."""
        assert wrap_words("abcdefghij kl", 50, _measure) == ["abcdefghij", "kl"]

    def test_collapses_whitespace(self):
        assert wrap_words("  aa \n bb  ", 100, _measure) == ["aa bb"]

    def test_empty(self):
        assert wrap_words("", 100, _measure) == []


class TestParseFontSize:
    @pytest.mark.parametrize(
        "font,expected",
        [("600 42px YSText", 42), ("400 70px YSText, system-ui", 70), ("bold serif", 42), (None, 42)],
    )
    def test_parse(self, font, expected):
        assert parse_font_size(font) == expected


class TestLayoutText:
    def test_defaults(self, measurer):
        layout = layout_text(_text_command("Hello"), measurer)
        assert layout.font == "600 42px YSText"
        assert layout.font_size == 42
        assert layout.color == "#fff"
        assert layout.line_height == 42 + 15
        assert layout.box is None
        assert layout.shadow is None
        assert layout.align == "left"
        assert layout.x == 550

    def test_centered_box(self, measurer):
        command = _text_command(
            "Hello world",
            anchor="center",
            style=TextStyle(font="600 48px YSText", bg="#00000080"),
        )
        layout = layout_text(command, measurer)
        assert layout.align == "center"
        assert layout.x == 540
        assert layout.width == 110
        assert layout.box.x == 540 - (55 + 10)
        assert layout.box.y == 300
        assert layout.box.w == 130
        assert layout.box.h == 48 + 15
        assert layout.box.radius == 12
        assert layout.box.color == "#00000080"

    def test_bottom_anchor_places_box_above(self, measurer):
        command = _text_command(
            "aa bb cc", w=50, anchor="center-bottom", style=TextStyle(bg="#000", pad=4)
        )
        layout = layout_text(command, measurer)
        assert layout.lines == ["aa bb", "cc"]
        line_height = 42 + 6
        assert layout.box.y == 300 - 2 * line_height
        assert layout.line_ys == [300 - 2 * line_height + line_height / 2, 300 - line_height / 2]

    def test_wraps_to_width(self, measurer):
        layout = layout_text(_text_command("one two three", w=80), measurer)
        assert layout.lines == ["one two", "three"]
        assert len(layout.line_ys) == 2

    def test_shadow(self, measurer):
        layout = layout_text(_text_command("Hi", style=TextStyle(shadow=True)), measurer)
        assert layout.shadow == TextShadow(color="rgba(0,0,0,0.6)", blur=6, offset_y=2)

    def test_empty_text_has_one_blank_line(self, measurer):
        layout = layout_text(_text_command(""), measurer)
        assert layout.lines == [""]


class TestPillowTextMeasurer:
    def test_default_font_fallback(self):
        """Without any usable font file Pillow's built-in font is used."""
        measurer = PillowTextMeasurer(font_paths=["/nonexistent/font.ttf"])
        assert measurer.measure("abc", 20) > 0
        assert measurer.measure("", 20) == 0

    def test_fonts_cached_per_size(self):
        measurer = PillowTextMeasurer(font_paths=[])
        measurer.measure("a", 20)
        measurer.measure("b", 20)
        measurer.measure("c", 30)
        assert sorted(measurer._fonts) == [20, 30]

    def test_wider_text_measures_wider(self):
        measurer = PillowTextMeasurer(font_paths=[])
        assert measurer.measure("wide text", 24) > measurer.measure("w", 24)
