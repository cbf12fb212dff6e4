"""Cast shadows — solid silhouettes joined to the shape by extrusions.

Drawn before the shape's own geometry so the shape sits on top:

  - rectangle: right-side and bottom extrusion quads, then the offset rect
  - circle: a run of circles stepped from the shape to the offset
  - ellipse: treated as a circle of the average radius
  - polygon: one quad per edge, then the offset polygon

Lines and text do not cast shadows.
"""

import math

from PIL import Image

from .rasterizer import Rasterizer
from .shapes import Circle, Ellipse, Geometry, Polygon, Rect
from .styles import ShadowSpec


def _solid(shadow: ShadowSpec) -> dict:
    return {"fill": shadow.color, "fill_style": "solid", "stroke": "none"}


def draw_rectangle_cast_shadow(
    rasterizer: Rasterizer, image: Image.Image, rect: Rect, shadow: ShadowSpec,
) -> None:
    x, y, w, h = rect.x, rect.y, rect.width, rect.height
    dx, dy = shadow.offset_x, shadow.offset_y
    options = _solid(shadow)
    rasterizer.polygon(image, [
        (x + w, y),
        (x + w, y + h),
        (x + w + dx, y + h + dy),
        (x + w + dx, y + dy),
    ], options)
    rasterizer.polygon(image, [
        (x, y + h),
        (x + w, y + h),
        (x + w + dx, y + h + dy),
        (x + dx, y + h + dy),
    ], options)
    rasterizer.rectangle(image, x + dx, y + dy, w, h, options)


def draw_circle_cast_shadow(
    rasterizer: Rasterizer,
    image: Image.Image,
    cx: float,
    cy: float,
    radius: float,
    shadow: ShadowSpec,
) -> None:
    dx, dy = shadow.offset_x, shadow.offset_y
    steps = max(3, math.floor(math.hypot(dx, dy) / 5))
    options = _solid(shadow)
    for i in range(steps + 1):
        t = i / steps
        rasterizer.circle(image, cx + dx * t, cy + dy * t, radius * 2, options)


def draw_polygon_cast_shadow(
    rasterizer: Rasterizer, image: Image.Image, points, shadow: ShadowSpec,
) -> None:
    dx, dy = shadow.offset_x, shadow.offset_y
    options = _solid(shadow)
    points = [tuple(p) for p in points]
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        rasterizer.polygon(image, [
            (x1, y1),
            (x2, y2),
            (x2 + dx, y2 + dy),
            (x1 + dx, y1 + dy),
        ], options)
    rasterizer.polygon(image, [(x + dx, y + dy) for x, y in points], options)


def draw_cast_shadow(
    rasterizer: Rasterizer, image: Image.Image, geometry: Geometry, shadow: ShadowSpec,
) -> bool:
    """Draw the cast shadow for *geometry*. Returns False if it casts none."""
    if isinstance(geometry, Rect):
        draw_rectangle_cast_shadow(rasterizer, image, geometry, shadow)
    elif isinstance(geometry, Circle):
        draw_circle_cast_shadow(rasterizer, image, geometry.x, geometry.y,
                                geometry.radius, shadow)
    elif isinstance(geometry, Ellipse):
        radius = (geometry.width + geometry.height) / 4
        draw_circle_cast_shadow(rasterizer, image, geometry.x, geometry.y, radius, shadow)
    elif isinstance(geometry, Polygon):
        draw_polygon_cast_shadow(rasterizer, image, geometry.points, shadow)
    else:
        return False
    return True
