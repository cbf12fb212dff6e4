"""Tests for roughcut.cast_shadow geometry."""

from roughcut.cast_shadow import (
    draw_cast_shadow,
    draw_circle_cast_shadow,
    draw_rectangle_cast_shadow,
)
from roughcut.shapes import Circle, Ellipse, Line, Polygon, Rect, Text
from roughcut.styles import ShadowSpec


SHADOW = ShadowSpec.cast(color="#111111")


class TestRectangle:
    def test_extrusions_then_offset_rect(self, recorder):
        draw_rectangle_cast_shadow(recorder, None, Rect(10, 20, 30, 40), SHADOW)
        assert recorder.methods == ["polygon", "polygon", "rectangle"]
        right, bottom = recorder.calls[0][1][0], recorder.calls[1][1][0]
        assert right == ((40, 20), (40, 60), (55, 75), (55, 35))
        assert bottom == ((10, 60), (40, 60), (55, 75), (25, 75))
        assert recorder.calls[2][1] == (25, 35, 30, 40)

    def test_solid_fill_no_stroke(self, recorder):
        draw_rectangle_cast_shadow(recorder, None, Rect(0, 0, 1, 1), SHADOW)
        for _, _, options in recorder.calls:
            assert options == {"fill": "#111111", "fill_style": "solid", "stroke": "none"}


class TestCircle:
    def test_step_count_from_offset_length(self, recorder):
        # hypot(15, 15) / 5 = 4.24 → 4 steps, 5 circles.
        draw_circle_cast_shadow(recorder, None, 50, 50, 10, SHADOW)
        assert recorder.methods == ["circle"] * 5
        assert recorder.calls[0][1] == (50, 50, 20)
        assert recorder.calls[-1][1] == (65, 65, 20)

    def test_minimum_three_steps(self, recorder):
        short = ShadowSpec.cast(offset_x=2, offset_y=0)
        draw_circle_cast_shadow(recorder, None, 0, 0, 5, short)
        assert len(recorder.calls) == 4


class TestDispatch:
    def test_polygon_quad_per_edge(self, recorder):
        triangle = Polygon(((0, 0), (10, 0), (5, 8)))
        assert draw_cast_shadow(recorder, None, triangle, SHADOW)
        assert recorder.methods == ["polygon"] * 4
        assert recorder.calls[-1][1][0] == ((15, 15), (25, 15), (20, 23))

    def test_ellipse_uses_average_radius(self, recorder):
        assert draw_cast_shadow(recorder, None, Ellipse(0, 0, 40, 20), SHADOW)
        assert recorder.calls[0][1] == (0, 0, 30)

    def test_circle(self, recorder):
        assert draw_cast_shadow(recorder, None, Circle(0, 0, 5), SHADOW)

    def test_line_and_text_cast_nothing(self, recorder):
        assert not draw_cast_shadow(recorder, None, Line(0, 0, 5, 5), SHADOW)
        assert not draw_cast_shadow(recorder, None, Text(0, 0, "x"), SHADOW)
        assert recorder.calls == []
