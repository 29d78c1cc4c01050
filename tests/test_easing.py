"""Tests for cubic-bezier easing curves."""

import pytest

from lyricsync.config import DEFAULT_EASING
from lyricsync.core.components.sync import CubicBezier, easing_from_string, parse_cubic_bezier


class TestCubicBezier:
    def test_linear(self):
        linear = CubicBezier(0.0, 0.0, 1.0, 1.0)
        for x in (0.1, 0.25, 0.5, 0.9):
            assert linear(x) == pytest.approx(x, abs=1e-4)

    def test_endpoints_clamped(self):
        curve = CubicBezier(0.22, 1.0, 0.36, 1.0)
        assert curve(-0.5) == 0.0
        assert curve(0.0) == 0.0
        assert curve(1.0) == 1.0
        assert curve(2.0) == 1.0

    def test_default_curve_is_increasing_and_front_loaded(self):
        curve = easing_from_string(DEFAULT_EASING)
        values = [curve(i / 50) for i in range(51)]
        assert values == sorted(values)
        assert curve(0.5) > 0.5

    def test_rejects_x_outside_unit_range(self):
        with pytest.raises(ValueError):
            CubicBezier(1.5, 0.0, 0.5, 1.0)


class TestParsing:
    def test_parse_function_form(self):
        assert parse_cubic_bezier("cubic-bezier(0.22, 1, 0.36, 1)") == (0.22, 1.0, 0.36, 1.0)

    def test_parse_keyword(self):
        assert parse_cubic_bezier("Ease-In-Out") == (0.42, 0.0, 0.58, 1.0)

    @pytest.mark.parametrize("spec", ["bounce", "cubic-bezier(1, 2)", "cubic-bezier(2, 0, 0.5, 1)"])
    def test_parse_invalid(self, spec):
        with pytest.raises(ValueError):
            parse_cubic_bezier(spec)

    def test_invalid_string_falls_back_to_default(self, caplog):
        with caplog.at_level("WARNING"):
            curve = easing_from_string("wobble")
        assert curve.points == parse_cubic_bezier(DEFAULT_EASING)
        assert "falling back" in caplog.text
