"""Tests for roughcut.rasterizer and roughcut.sketchy_text."""

import math
import random

import numpy as np
import pytest
from PIL import Image

from roughcut.rasterizer import PillowRasterizer, ellipse_points, hachure_lines
from roughcut.sketchy_text import draw_sketchy_text, draw_text, text_anchor


def blank(size=(100, 100)):
    return Image.new("RGBA", size, (0, 0, 0, 0))


def painted(image) -> int:
    return int((np.array(image)[:, :, 3] > 0).sum())


SQUARE = [(0, 0), (100, 0), (100, 100), (0, 100)]


# ── Geometry helpers ─────────────────────────────────────────────


class TestHachureLines:
    def test_horizontal_fill(self):
        segments = hachure_lines(SQUARE, 0, 10)
        assert len(segments) == 10
        (x1, y1), (x2, y2) = segments[0]
        assert (x1, x2) == pytest.approx((0, 100))
        assert y1 == pytest.approx(5) and y2 == pytest.approx(5)

    def test_angled_segments_are_parallel(self):
        segments = hachure_lines(SQUARE, 45, 10)
        assert segments
        for (x1, y1), (x2, y2) in segments:
            angle = math.degrees(math.atan2(y2 - y1, x2 - x1)) % 180
            assert angle == pytest.approx(45)

    def test_concave_shape_splits_scanlines(self):
        # U shape: scanlines through the arms cross four edges.
        u_shape = [(0, 0), (10, 0), (10, 20), (20, 20), (20, 0), (30, 0), (30, 30), (0, 30)]
        segments = hachure_lines(u_shape, 0, 4)
        at_two = [s for s in segments if s[0][1] == pytest.approx(2)]
        assert len(at_two) == 2

    def test_degenerate(self):
        assert hachure_lines([(0, 0), (1, 1)], 0, 4) == []
        assert hachure_lines(SQUARE, 0, 0) == []


class TestEllipsePoints:
    def test_points_on_outline(self):
        for x, y in ellipse_points(50, 50, 40, 20, steps=16):
            assert ((x - 50) / 20) ** 2 + ((y - 50) / 10) ** 2 == pytest.approx(1)

    def test_step_count_bounds(self):
        assert len(ellipse_points(0, 0, 2, 2)) == 12
        assert len(ellipse_points(0, 0, 5000, 5000)) == 120


# ── Pillow rasterizer ────────────────────────────────────────────


class TestPillowRasterizer:
    def test_solid_fill_without_stroke(self):
        image = blank()
        PillowRasterizer(random.Random(1)).rectangle(
            image, 10, 10, 50, 50,
            {"fill": "#ff0000", "fill_style": "solid", "stroke": "none"},
        )
        assert image.getpixel((35, 35)) == (255, 0, 0, 255)
        assert image.getpixel((80, 80))[3] == 0

    def test_stroke_only_leaves_interior_empty(self):
        image = blank()
        PillowRasterizer(random.Random(1)).rectangle(image, 10, 10, 80, 80, {"roughness": 0})
        assert painted(image) > 0
        assert image.getpixel((50, 50))[3] == 0

    def test_hachure_fill_paints_inside(self):
        image = blank()
        PillowRasterizer(random.Random(1)).circle(
            image, 50, 50, 80, {"fill": "#0000ff", "stroke": "none"},
        )
        inside = painted(image)
        assert 0 < inside < math.pi * 40 * 40

    def test_cross_hatch_paints_more_than_hachure(self):
        hachure, cross = blank(), blank()
        options = {"fill": "#0000ff", "stroke": "none", "roughness": 0}
        PillowRasterizer(random.Random(1)).polygon(hachure, SQUARE, options)
        PillowRasterizer(random.Random(1)).polygon(
            cross, SQUARE, {**options, "fill_style": "cross_hatch"},
        )
        assert painted(cross) > painted(hachure)

    def test_nothing_to_draw(self):
        image = blank()
        PillowRasterizer().line(image, 0, 0, 50, 50, {"stroke": "none"})
        assert painted(image) == 0

    def test_seeded_output_is_reproducible(self):
        first, second = blank(), blank()
        PillowRasterizer(random.Random(7)).ellipse(first, 50, 50, 60, 30, {"roughness": 2})
        PillowRasterizer(random.Random(7)).ellipse(second, 50, 50, 60, 30, {"roughness": 2})
        assert first.tobytes() == second.tobytes()

    def test_invalid_fill_style(self):
        with pytest.raises(ValueError, match="Unknown fill_style"):
            PillowRasterizer().rectangle(blank(), 0, 0, 5, 5, {"fill": "#ff0000", "fill_style": "zigzag"})

    def test_fill_style_checked_before_colors(self):
        with pytest.raises(ValueError, match="Unknown fill_style"):
            PillowRasterizer().rectangle(blank(), 0, 0, 5, 5, {"fill": "chartreuse", "fill_style": "zigzag"})

    def test_text(self):
        image = blank((200, 60))
        PillowRasterizer().text(image, "Hello", 10, 40, {"font_size": 24, "sketchy": False, "jitter": 3})
        assert painted(image) > 0


# ── Text ─────────────────────────────────────────────────────────


class TestTextAnchor:
    def test_mapping(self):
        assert text_anchor() == "ls"
        assert text_anchor("center", "middle") == "mm"
        assert text_anchor("end", "top") == "ra"

    def test_invalid(self):
        with pytest.raises(ValueError, match="Unknown text_align"):
            text_anchor("justify", "middle")
        with pytest.raises(ValueError, match="Unknown text_baseline"):
            text_anchor("left", "under")


class TestDrawText:
    def test_plain_text_is_drawn(self):
        image = blank((200, 60))
        draw_text(image, "roughcut", 100, 30, font_size=20, color="#000000",
                  text_align="center", text_baseline="middle")
        assert painted(image) > 0

    def test_sketchy_pass_count(self):
        assert draw_sketchy_text(blank((200, 60)), "Hi", 10, 40, random.Random(1), roughness=3) == 3
        assert draw_sketchy_text(blank((200, 60)), "Hi", 10, 40, random.Random(1), roughness=0.5) == 1

    def test_sketchy_jitter_is_seeded(self):
        first, second = blank((200, 60)), blank((200, 60))
        draw_sketchy_text(first, "Wobble", 10, 40, random.Random(5), jitter=2)
        draw_sketchy_text(second, "Wobble", 10, 40, random.Random(5), jitter=2)
        assert first.tobytes() == second.tobytes()
        assert painted(first) > 0
