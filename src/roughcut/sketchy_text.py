"""Text drawing, plain and hand-drawn.

draw_sketchy_text gives text a wobbly, hand-lettered look:
  - the whole string is nudged by a random jitter of up to ±jitter px
    and rotated by up to ±0.01 rad around its anchor
  - max(1, floor(roughness)) passes are drawn, each offset by up to
    ±0.25 px; the first is filled, the rest are thin outlines

Jitter is re-rolled on every call, so text drawn every frame shimmers.
Pass a seeded Random for reproducible frames.

Alignment follows canvas conventions and is mapped to Pillow anchors:
text_align left/center/right (start/end accepted), text_baseline
top/middle/bottom/alphabetic.
"""

import math
import random

from PIL import Image, ImageDraw

from .common import load_font, parse_color


_H_ANCHORS = {"left": "l", "start": "l", "center": "m", "right": "r", "end": "r"}
_V_ANCHORS = {"top": "a", "hanging": "a", "middle": "m", "bottom": "d",
              "alphabetic": "s", "ideographic": "s"}

MAX_ROTATION = 0.01  # radians, either way


def text_anchor(text_align: str = "left", text_baseline: str = "alphabetic") -> str:
    """Pillow anchor string for canvas-style alignment.

    Raises:
        ValueError: Unknown alignment.
    """
    if text_align not in _H_ANCHORS:
        raise ValueError(f"Unknown text_align '{text_align}'. Valid: {sorted(_H_ANCHORS)}")
    if text_baseline not in _V_ANCHORS:
        raise ValueError(
            f"Unknown text_baseline '{text_baseline}'. Valid: {sorted(_V_ANCHORS)}"
        )
    return _H_ANCHORS[text_align] + _V_ANCHORS[text_baseline]


def draw_text(
    image: Image.Image,
    text: str,
    x: float,
    y: float,
    font_size: float = 24,
    font_family: str | None = None,
    color="#000000",
    text_align: str = "left",
    text_baseline: str = "alphabetic",
) -> None:
    draw = ImageDraw.Draw(image, "RGBA")
    draw.text(
        (x, y), text,
        fill=parse_color(color),
        font=load_font(font_size, font_family),
        anchor=text_anchor(text_align, text_baseline),
    )


def draw_sketchy_text(
    image: Image.Image,
    text: str,
    x: float,
    y: float,
    rng: random.Random | None = None,
    font_size: float = 24,
    font_family: str | None = None,
    color="#000000",
    text_align: str = "left",
    text_baseline: str = "alphabetic",
    jitter: float = 1,
    roughness: float = 2,
) -> int:
    """Draw hand-lettered text onto *image*. Returns the number of passes."""
    rng = rng or random.Random()
    rgba = parse_color(color)
    font = load_font(font_size, font_family)
    anchor = text_anchor(text_align, text_baseline)

    jitter_x = rng.uniform(-jitter, jitter)
    jitter_y = rng.uniform(-jitter, jitter)
    rotation = rng.uniform(-MAX_ROTATION, MAX_ROTATION)
    ax, ay = x + jitter_x, y + jitter_y

    layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer, "RGBA")
    passes = max(1, math.floor(roughness))
    # Outline passes are thinner than Pillow's 1px stroke; halve their alpha.
    outline = rgba[:3] + (rgba[3] // 2,)
    for i in range(passes):
        position = (ax + rng.uniform(-0.25, 0.25), ay + rng.uniform(-0.25, 0.25))
        if i == 0:
            draw.text(position, text, fill=rgba, font=font, anchor=anchor)
        else:
            draw.text(position, text, fill=(0, 0, 0, 0), font=font, anchor=anchor,
                      stroke_width=1, stroke_fill=outline)

    # Canvas rotation is clockwise for positive angles, Pillow's is not.
    layer = layer.rotate(-math.degrees(rotation), center=(ax, ay),
                         resample=Image.BICUBIC)
    image.alpha_composite(layer)
    return passes
