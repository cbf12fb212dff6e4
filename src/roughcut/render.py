"""Render composition — one frame's worth of shapes onto a surface.

For each live shape, in insertion (paint) order:

  1. compute the tween transform; skip the shape if should_skip
  2. open a compositing layer carrying the transform's opacity and offset
  3. cast shadow geometry (cast shadows only)
  4. drop shadow parameters set on the context
  5. geometry via the rasterizer
  6. drop shadow cleared (shadow composited under the geometry)
  7. label at the shape-specific anchor
  8. close the layer: opacity applied to its alpha, shifted by the offset
     and alpha-composited onto the surface

Opacity is applied per layer, not per primitive, so overlapping strokes
inside one shape fade together.
"""

from typing import Callable

import numpy as np
from PIL import Image, ImageFilter

from .cast_shadow import draw_cast_shadow
from .common import parse_color
from .position import Position
from .rasterizer import Rasterizer
from .shapes import Circle, Ellipse, Line, Polygon, Rect, Shape, Text
from .styles import LabelSpec, ShadowSpec
from .tween import RemovalInfo, compute_transform


LABEL_EDGE_MARGIN = 5  # px between a top/bottom label and the rect edge


# ── Drawing context ──────────────────────────────────────────────


def apply_opacity(image: Image.Image, opacity: float) -> Image.Image:
    """Scale an RGBA image's alpha channel by opacity (0..1)."""
    if opacity >= 1:
        return image
    arr = np.array(image)
    alpha = arr[:, :, 3].astype(np.float32) * max(0.0, opacity)
    arr[:, :, 3] = alpha.astype(np.uint8)
    return Image.fromarray(arr)


def shift(image: Image.Image, dx: float, dy: float) -> Image.Image:
    """Translate an image by a (possibly fractional) offset."""
    if dx == 0 and dy == 0:
        return image
    return image.transform(
        image.size, Image.AFFINE, (1, 0, -dx, 0, 1, -dy), resample=Image.BILINEAR,
    )


class DrawingContext:
    """Surface plus the state a render pass threads through each shape.

    `target` is where primitives go right now: the surface, a shape layer,
    or a drop-shadow sublayer.
    """

    def __init__(self, surface: Image.Image, rasterizer: Rasterizer):
        if surface.mode != "RGBA":
            raise ValueError(f"Surface must be RGBA, got {surface.mode}")
        self.surface = surface
        self.rasterizer = rasterizer
        self.target = surface
        self._layers: list[tuple[Image.Image, float, Position]] = []
        self._shadow: tuple[Image.Image, ShadowSpec] | None = None

    def _blank(self) -> Image.Image:
        return Image.new("RGBA", self.surface.size, (0, 0, 0, 0))

    def begin_layer(self, opacity: float = 1.0, offset: Position = Position(0, 0)) -> None:
        self._layers.append((self.target, opacity, offset))
        self.target = self._blank()

    def end_layer(self) -> None:
        if not self._layers:
            raise RuntimeError("end_layer() without begin_layer()")
        parent, opacity, offset = self._layers.pop()
        layer = shift(apply_opacity(self.target, opacity), offset.x, offset.y)
        parent.alpha_composite(layer)
        self.target = parent

    def set_shadow(self, shadow: ShadowSpec) -> None:
        """Route following primitives to a sublayer that will cast *shadow*."""
        if self._shadow is not None:
            raise RuntimeError("Drop shadow already set")
        self._shadow = (self.target, shadow)
        self.target = self._blank()

    def clear_shadow(self) -> None:
        if self._shadow is None:
            return
        parent, shadow = self._shadow
        self._shadow = None
        geometry = self.target
        self.target = parent

        r, g, b, a = parse_color(shadow.color)
        alpha = np.array(geometry)[:, :, 3].astype(np.float32) * (a / 255.0)
        silhouette = np.zeros((geometry.height, geometry.width, 4), dtype=np.uint8)
        silhouette[:, :, :3] = (r, g, b)
        silhouette[:, :, 3] = alpha.astype(np.uint8)

        cast = shift(Image.fromarray(silhouette), shadow.offset_x, shadow.offset_y)
        if shadow.blur > 0:
            # Canvas shadowBlur maps to a Gaussian of sigma blur / 2.
            cast = cast.filter(ImageFilter.GaussianBlur(shadow.blur / 2))
        parent.alpha_composite(cast)
        parent.alpha_composite(geometry)


# ── Anchors ──────────────────────────────────────────────────────


def label_position(shape: Shape, label: LabelSpec) -> Position:
    """Where a shape's label is centered, offset included."""
    geometry = shape.geometry
    if isinstance(geometry, Rect):
        x = geometry.x + geometry.width / 2
        if label.align == "top":
            y = geometry.y + label.font_size / 2 + LABEL_EDGE_MARGIN
        elif label.align == "bottom":
            y = geometry.y + geometry.height - label.font_size / 2 - LABEL_EDGE_MARGIN
        else:
            y = geometry.y + geometry.height / 2
        anchor = Position(x, y)
    elif isinstance(geometry, Polygon):
        anchor = geometry.centroid()
    else:
        anchor = geometry.anchor()
    return anchor.offset(label.offset_x, label.offset_y)


# ── Per-shape drawing ────────────────────────────────────────────


def draw_geometry(ctx: DrawingContext, shape: Shape) -> None:
    geometry, options, target = shape.geometry, shape.draw_options, ctx.target
    raster = ctx.rasterizer
    if isinstance(geometry, Rect):
        raster.rectangle(target, geometry.x, geometry.y, geometry.width, geometry.height, options)
    elif isinstance(geometry, Circle):
        raster.circle(target, geometry.x, geometry.y, geometry.radius * 2, options)
    elif isinstance(geometry, Ellipse):
        raster.ellipse(target, geometry.x, geometry.y, geometry.width, geometry.height, options)
    elif isinstance(geometry, Line):
        raster.line(target, geometry.x1, geometry.y1, geometry.x2, geometry.y2, options)
    elif isinstance(geometry, Polygon):
        raster.polygon(target, list(geometry.points), options)
    elif isinstance(geometry, Text):
        raster.text(target, geometry.text, geometry.x, geometry.y, {
            "font_size": geometry.font_size,
            "font_family": geometry.font_family,
            "color": geometry.color,
            "text_align": geometry.text_align,
            "text_baseline": geometry.text_baseline,
            "sketchy": geometry.sketchy,
            "jitter": geometry.jitter,
            "roughness": geometry.roughness,
        })
    else:
        raise ValueError(f"Shape {shape.id}: unknown geometry {geometry!r}")


def draw_label(ctx: DrawingContext, shape: Shape) -> None:
    label = shape.label
    anchor = label_position(shape, label)
    ctx.rasterizer.text(ctx.target, label.text, anchor.x, anchor.y, {
        "font_size": label.font_size,
        "font_family": label.font_family,
        "color": label.color,
        "text_align": "center",
        "text_baseline": "middle",
        "sketchy": label.sketchy,
        "jitter": label.jitter,
        "roughness": label.roughness,
    })


def render_shape(ctx: DrawingContext, shape: Shape, opacity: float, offset: Position) -> None:
    """Draw one shape (shadow, geometry, label) inside its own layer."""
    shadow = shape.shadow
    ctx.begin_layer(opacity, offset)
    if shadow is not None and shadow.kind == "cast":
        draw_cast_shadow(ctx.rasterizer, ctx.target, shape.geometry, shadow)
    drop = shadow is not None and shadow.kind == "drop"
    if drop:
        ctx.set_shadow(shadow)
    draw_geometry(ctx, shape)
    if drop:
        ctx.clear_shadow()
    if shape.label is not None:
        draw_label(ctx, shape)
    ctx.end_layer()


def render_shapes(
    ctx: DrawingContext,
    shapes: list[Shape],
    now: float,
    removal_info: Callable[[Shape], RemovalInfo | None] = lambda shape: None,
) -> int:
    """Render a snapshot of shapes at time *now*. Returns how many were drawn.

    Args:
        ctx: Drawing context over the target surface.
        shapes: Live shapes in paint order.
        now: Frame timestamp in ms.
        removal_info: Pending-removal lookup, consulted ahead of each
            shape's own state.
    """
    drawn = 0
    for shape in shapes:
        transform = compute_transform(shape, now, removal_info(shape))
        if transform.should_skip:
            continue
        render_shape(ctx, shape, transform.opacity, transform.offset)
        drawn += 1
    return drawn
