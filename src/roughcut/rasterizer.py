"""Rasterizer — hand-drawn geometry primitives on Pillow images.

The render pipeline never draws geometry itself; it calls a Rasterizer:

    rectangle(image, x, y, width, height, options)
    circle(image, cx, cy, diameter, options)
    ellipse(image, cx, cy, width, height, options)
    line(image, x1, y1, x2, y2, options)
    polygon(image, points, options)
    text(image, content, x, y, options)

Any object with these methods can stand in (tests use a recording fake).
PillowRasterizer is the default. It draws a sketchy look: every edge is a
slightly bowed, jittered stroke drawn twice, and fills are either solid or
hachure (parallel pen strokes clipped to the outline).

Draw options (unknown keys are ignored):

    stroke         outline color, "none" to skip (default "#000000")
    stroke_width   outline width in px (default 1)
    fill           fill color; no fill when absent or "none"
    fill_style     "hachure" (default), "solid", "cross_hatch"
    roughness      jitter amount, 0 draws clean lines (default 1)
    bowing         how far edges bow out (default 1)
    hachure_angle  degrees (default -41)
    hachure_gap    px between hachure lines (default 4 x stroke_width)
    fill_weight    hachure line width (default stroke_width / 2, min 1)

text() takes font_size, font_family, color, text_align, text_baseline and,
for hand-lettered text, sketchy/jitter/roughness (see sketchy_text).
"""

import math
import random
from typing import Protocol

from PIL import Image, ImageDraw

from .common import parse_color
from .sketchy_text import draw_sketchy_text, draw_text


VALID_FILL_STYLES = {"hachure", "solid", "cross_hatch"}

_TEXT_KEYS = (
    "font_size", "font_family", "color", "text_align", "text_baseline",
    "jitter", "roughness",
)

Points = list[tuple[float, float]]


class Rasterizer(Protocol):
    def rectangle(self, image: Image.Image, x: float, y: float,
                  width: float, height: float, options: dict) -> None: ...

    def circle(self, image: Image.Image, cx: float, cy: float,
               diameter: float, options: dict) -> None: ...

    def ellipse(self, image: Image.Image, cx: float, cy: float,
                width: float, height: float, options: dict) -> None: ...

    def line(self, image: Image.Image, x1: float, y1: float,
             x2: float, y2: float, options: dict) -> None: ...

    def polygon(self, image: Image.Image, points, options: dict) -> None: ...

    def text(self, image: Image.Image, content: str, x: float, y: float,
             options: dict) -> None: ...


# ── Geometry helpers ─────────────────────────────────────────────


def ellipse_points(cx: float, cy: float, width: float, height: float,
                   steps: int | None = None) -> Points:
    """Outline of an axis-aligned ellipse as a closed polygon."""
    rx, ry = abs(width) / 2, abs(height) / 2
    if steps is None:
        circumference = 2 * math.pi * math.sqrt((rx * rx + ry * ry) / 2)
        steps = max(12, min(120, int(circumference / 8)))
    return [
        (cx + rx * math.cos(2 * math.pi * i / steps),
         cy + ry * math.sin(2 * math.pi * i / steps))
        for i in range(steps)
    ]


def hachure_lines(points: Points, angle: float, gap: float) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Parallel line segments filling a polygon.

    The polygon is rotated so the hachure direction is horizontal, scanned
    every *gap* px with even-odd pairing of edge crossings, and the
    resulting segments rotated back.
    """
    if len(points) < 3 or gap <= 0:
        return []
    rad = math.radians(angle)
    cos_a, sin_a = math.cos(rad), math.sin(rad)

    def rotate(p, c, s):
        return (p[0] * c - p[1] * s, p[0] * s + p[1] * c)

    rotated = [rotate(p, cos_a, -sin_a) for p in points]
    edges = list(zip(rotated, rotated[1:] + rotated[:1]))
    ys = [p[1] for p in rotated]
    y = min(ys) + gap / 2
    segments = []
    while y < max(ys):
        crossings = []
        for (x1, y1), (x2, y2) in edges:
            if (y1 <= y < y2) or (y2 <= y < y1):
                crossings.append(x1 + (y - y1) * (x2 - x1) / (y2 - y1))
        crossings.sort()
        for left, right in zip(crossings[0::2], crossings[1::2]):
            segments.append((
                rotate((left, y), cos_a, sin_a),
                rotate((right, y), cos_a, sin_a),
            ))
        y += gap
    return segments


# ── Pillow implementation ────────────────────────────────────────


class PillowRasterizer:
    """Sketchy primitives drawn with ImageDraw.

    Args:
        rng: Random source for jitter. Pass a seeded Random for
            reproducible frames.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    # ── Primitives ───────────────────────────────────────────────

    def rectangle(self, image, x, y, width, height, options):
        corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        self._shape(image, corners, options)

    def circle(self, image, cx, cy, diameter, options):
        self.ellipse(image, cx, cy, diameter, diameter, options)

    def ellipse(self, image, cx, cy, width, height, options):
        style = _Style(options)
        draw = ImageDraw.Draw(image, "RGBA")
        outline = ellipse_points(cx, cy, width, height)
        self._fill(draw, outline, style)
        if style.stroke is None:
            return
        for _ in range(style.passes):
            wobble = [
                (px + self._offset(style.roughness), py + self._offset(style.roughness))
                for px, py in outline
            ]
            # Overlap the start a little, like a pen closing a loop.
            closing = wobble[: max(2, len(wobble) // 10)]
            draw.line(wobble + closing, fill=style.stroke,
                      width=style.stroke_width, joint="curve")

    def line(self, image, x1, y1, x2, y2, options):
        style = _Style(options)
        if style.stroke is None:
            return
        draw = ImageDraw.Draw(image, "RGBA")
        self._stroke(draw, x1, y1, x2, y2, style, style.stroke, style.stroke_width)

    def polygon(self, image, points, options):
        self._shape(image, [tuple(p) for p in points], options)

    def text(self, image, content, x, y, options):
        fields = {k: options[k] for k in _TEXT_KEYS if k in options}
        if options.get("sketchy"):
            draw_sketchy_text(image, content, x, y, self.rng, **fields)
        else:
            fields.pop("jitter", None)
            fields.pop("roughness", None)
            draw_text(image, content, x, y, **fields)

    # ── Internals ────────────────────────────────────────────────

    def _shape(self, image, points: Points, options: dict) -> None:
        style = _Style(options)
        draw = ImageDraw.Draw(image, "RGBA")
        self._fill(draw, points, style)
        if style.stroke is None:
            return
        for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
            self._stroke(draw, x1, y1, x2, y2, style, style.stroke, style.stroke_width)

    def _fill(self, draw: ImageDraw.ImageDraw, points: Points, style: "_Style") -> None:
        if style.fill is None:
            return
        if style.fill_style == "solid":
            draw.polygon(points, fill=style.fill)
            return
        angles = [style.hachure_angle]
        if style.fill_style == "cross_hatch":
            angles.append(style.hachure_angle + 90)
        for angle in angles:
            for (x1, y1), (x2, y2) in hachure_lines(points, angle, style.hachure_gap):
                self._stroke(draw, x1, y1, x2, y2, style, style.fill, style.fill_weight,
                             passes=1)

    def _offset(self, amount: float) -> float:
        return self.rng.uniform(-amount, amount) if amount else 0.0

    def _stroke(self, draw, x1, y1, x2, y2, style, color, width, passes=None) -> None:
        """One bowed, jittered pen stroke from (x1, y1) to (x2, y2)."""
        length = math.hypot(x2 - x1, y2 - y1)
        if length == 0:
            return
        jitter = min(style.roughness * 1.5, length / 10)
        bow = style.bowing * style.roughness * length / 200
        nx, ny = -(y2 - y1) / length, (x2 - x1) / length
        for _ in range(passes or style.passes):
            bend = self._offset(bow)
            path = []
            for t in (0.0, 0.5, 0.75, 1.0):
                bx = bend * math.sin(math.pi * t)
                path.append((
                    x1 + (x2 - x1) * t + nx * bx + self._offset(jitter),
                    y1 + (y2 - y1) * t + ny * bx + self._offset(jitter),
                ))
            draw.line(path, fill=color, width=width, joint="curve")


class _Style:
    """Draw options resolved to concrete Pillow values."""

    def __init__(self, options: dict | None):
        options = options or {}
        self.fill_style = options.get("fill_style", "hachure")
        if self.fill_style not in VALID_FILL_STYLES:
            raise ValueError(
                f"Unknown fill_style '{self.fill_style}'. Valid: {sorted(VALID_FILL_STYLES)}"
            )
        self.stroke = _color_or_none(options.get("stroke", "#000000"))
        self.stroke_width = max(1, round(options.get("stroke_width", 1)))
        self.fill = _color_or_none(options.get("fill"))
        self.roughness = max(0.0, float(options.get("roughness", 1)))
        self.bowing = float(options.get("bowing", 1))
        self.hachure_angle = float(options.get("hachure_angle", -41))
        self.hachure_gap = float(options.get("hachure_gap", self.stroke_width * 4))
        self.fill_weight = max(1, round(options.get("fill_weight", self.stroke_width / 2)))
        # Clean lines need a single pass.
        self.passes = 2 if self.roughness > 0 else 1


def _color_or_none(value):
    if value is None or value == "none":
        return None
    return parse_color(value)
