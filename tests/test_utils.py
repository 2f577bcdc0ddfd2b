"""Tests for color and font helpers."""

import pytest
from reportlab.lib import colors

from pdfmarkup.utils.colors import is_transparent, is_white, resolve_color
from pdfmarkup.utils.fonts import resolve_font_name, text_width


class TestColors:
    @pytest.mark.parametrize("value", [None, "", "transparent", "None", " TRANSPARENT "])
    def test_transparent(self, value):
        assert is_transparent(value)
        assert resolve_color(value) is None

    @pytest.mark.parametrize("value", ["white", "#FFF", "#ffffff"])
    def test_white(self, value):
        assert is_white(value)

    def test_not_white(self):
        assert not is_white("#fffffe")
        assert not is_white(None)

    def test_short_hex(self):
        assert resolve_color("#f00").rgb() == (1.0, 0.0, 0.0)

    def test_named(self):
        assert resolve_color("blue").rgb() == colors.blue.rgb()

    def test_unknown_falls_back_to_black(self):
        assert resolve_color("not-a-color").rgb() == colors.black.rgb()


class TestFonts:
    def test_default_family(self):
        assert resolve_font_name("Comic Sans") == "Helvetica"
        assert resolve_font_name("Comic Sans", bold=True, italic=True) == "Helvetica-BoldOblique"

    def test_times_italic(self):
        assert resolve_font_name("Times", italic=True) == "Times-Italic"

    def test_text_width_grows_with_size(self):
        assert text_width("abc", "Helvetica", 20) == pytest.approx(2 * text_width("abc", "Helvetica", 10))
