"""Shapes — geometry variants, lifecycle state and factory helpers.

A Shape is the mutable unit of animation state owned by the registry:

    id            monotonic per registry generation, starting at 1
    geometry      Rect | Circle | Ellipse | Line | Polygon | Text
    draw_options  pass-through options for the rasterizer (stroke, fill, ...)
    shadow        ShadowSpec or None
    label         LabelSpec or None
    animate_in    AnimationSpec or None (entrance)
    animate_out   AnimationSpec or None (exit)
    state         entering → visible → exiting, never backward
    added_at      ms timestamp of creation
    removed_at    ms timestamp of the removal request; set iff exiting

Factory helpers (rect_shape, circle_shape, ...) build a ShapeDescriptor: the
creation request before the registry assigns identity and timestamps. Every
factory accepts either absolute x, y or a single anchor Position, and
pulls shadow/label/animate_in/animate_out out of the keyword options into
their own fields. Whatever remains is handed to the rasterizer untouched.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from .animate import AnimationSpec, to_animation_spec
from .position import Position
from .styles import LabelSpec, ShadowSpec, to_label_spec, to_shadow_spec


class ShapeState(Enum):
    ENTERING = "entering"
    VISIBLE = "visible"
    EXITING = "exiting"


# ── Geometry variants ────────────────────────────────────────────


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    kind = "rectangle"

    def anchor(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class Circle:
    x: float  # center
    y: float
    radius: float
    kind = "circle"

    def anchor(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class Ellipse:
    x: float  # center
    y: float
    width: float
    height: float
    kind = "ellipse"

    def anchor(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    kind = "line"

    def anchor(self) -> Position:
        return Position(self.x1, self.y1)


@dataclass(frozen=True)
class Polygon:
    points: tuple[tuple[float, float], ...]
    origin: Position | None = None
    kind = "polygon"

    def anchor(self) -> Position:
        # Triangles remember the anchor they were built from; free-form
        # polygons are anchored at their first vertex.
        if self.origin is not None:
            return self.origin
        return Position(*self.points[0])

    def centroid(self) -> Position:
        n = len(self.points)
        return Position(
            sum(p[0] for p in self.points) / n,
            sum(p[1] for p in self.points) / n,
        )


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    font_size: float = 24
    font_family: str | None = None
    color: object = "#000000"
    text_align: str = "left"
    text_baseline: str = "alphabetic"
    sketchy: bool = False
    jitter: float = 1
    roughness: float = 2

    @property
    def kind(self) -> str:
        return "sketchy_text" if self.sketchy else "text"

    def anchor(self) -> Position:
        return Position(self.x, self.y)


Geometry = Rect | Circle | Ellipse | Line | Polygon | Text


# ── Descriptor and Shape ─────────────────────────────────────────


@dataclass(frozen=True)
class ShapeDescriptor:
    """A shape creation request, normalized and ready for the registry."""

    geometry: Geometry
    draw_options: dict = field(default_factory=dict)
    shadow: ShadowSpec | None = None
    label: LabelSpec | None = None
    animate_in: AnimationSpec | None = None
    animate_out: AnimationSpec | None = None


@dataclass(eq=False)
class Shape:
    id: int
    geometry: Geometry
    draw_options: dict
    shadow: ShadowSpec | None
    label: LabelSpec | None
    animate_in: AnimationSpec | None
    animate_out: AnimationSpec | None
    state: ShapeState
    added_at: float
    removed_at: float | None = None

    @classmethod
    def create(cls, shape_id: int, descriptor: ShapeDescriptor, now: float) -> "Shape":
        """Stamp identity and time onto a descriptor.

        Shapes with an entrance spec start entering, all others visible.
        """
        state = ShapeState.ENTERING if descriptor.animate_in else ShapeState.VISIBLE
        return cls(
            id=shape_id,
            geometry=descriptor.geometry,
            draw_options=dict(descriptor.draw_options),
            shadow=descriptor.shadow,
            label=descriptor.label,
            animate_in=descriptor.animate_in,
            animate_out=descriptor.animate_out,
            state=state,
            added_at=now,
        )

    @property
    def kind(self) -> str:
        return self.geometry.kind

    @property
    def anchor(self) -> Position:
        return self.geometry.anchor()

    def mark_visible(self) -> bool:
        """entering → visible. Returns False if the shape is not entering."""
        if self.state is not ShapeState.ENTERING:
            return False
        self.state = ShapeState.VISIBLE
        return True

    def mark_exiting(self, now: float, exit_spec: AnimationSpec | None) -> bool:
        """entering/visible → exiting. Returns False if already exiting."""
        if self.state is ShapeState.EXITING:
            return False
        self.state = ShapeState.EXITING
        self.removed_at = now
        self.animate_out = exit_spec
        return True


# ── Option handling ──────────────────────────────────────────────

def describe(geometry: Geometry, options: dict | None = None) -> ShapeDescriptor:
    """Split keyword options into dedicated fields and draw options."""
    draw_options = dict(options or {})
    shadow = to_shadow_spec(draw_options.pop("shadow", None))
    label = to_label_spec(draw_options.pop("label", None))
    animate_in = to_animation_spec(draw_options.pop("animate_in", None))
    animate_out = to_animation_spec(draw_options.pop("animate_out", None))
    return ShapeDescriptor(
        geometry=geometry,
        draw_options=draw_options,
        shadow=shadow,
        label=label,
        animate_in=animate_in,
        animate_out=animate_out,
    )


def _split_anchor(args: tuple, count: int, name: str) -> tuple[Position, tuple]:
    """Collapse (x, y, *rest) and (Position, *rest) into (anchor, rest)."""
    if args and isinstance(args[0], Position):
        anchor, rest = args[0], args[1:]
    elif len(args) >= 2:
        anchor, rest = Position(args[0], args[1]), args[2:]
    else:
        raise TypeError(f"{name}() needs x, y or a Position anchor")
    if len(rest) != count:
        raise TypeError(
            f"{name}() takes an anchor plus {count} size argument(s), got {len(rest)}"
        )
    return anchor, rest


def _points(points) -> tuple[tuple[float, float], ...]:
    result = tuple(Position.from_pair(p).to_tuple() for p in points)
    if len(result) < 2:
        raise ValueError(f"Polygon needs at least 2 points, got {len(result)}")
    return result


# ── Factory helpers ──────────────────────────────────────────────


def rect_shape(*args, **options) -> ShapeDescriptor:
    """rect(x, y, width, height) or rect(anchor, width, height)."""
    anchor, (width, height) = _split_anchor(args, 2, "rect")
    return describe(Rect(anchor.x, anchor.y, width, height), options)


def square_shape(*args, **options) -> ShapeDescriptor:
    """square(x, y, size) or square(anchor, size)."""
    anchor, (size,) = _split_anchor(args, 1, "square")
    return describe(Rect(anchor.x, anchor.y, size, size), options)


def circle_shape(*args, **options) -> ShapeDescriptor:
    """circle(cx, cy, radius) or circle(center, radius)."""
    anchor, (radius,) = _split_anchor(args, 1, "circle")
    return describe(Circle(anchor.x, anchor.y, radius), options)


def ellipse_shape(*args, **options) -> ShapeDescriptor:
    """ellipse(cx, cy, width, height) or ellipse(center, width, height)."""
    anchor, (width, height) = _split_anchor(args, 2, "ellipse")
    return describe(Ellipse(anchor.x, anchor.y, width, height), options)


def line_shape(*args, **options) -> ShapeDescriptor:
    """line(x1, y1, x2, y2) or line(start, end)."""
    if len(args) == 2 and all(isinstance(a, Position) for a in args):
        start, end = args
    elif len(args) == 4:
        start, end = Position(args[0], args[1]), Position(args[2], args[3])
    else:
        raise TypeError("line() takes x1, y1, x2, y2 or two Positions")
    return describe(Line(start.x, start.y, end.x, end.y), options)


def triangle_vertices(anchor: Position, size: float) -> tuple[tuple[float, float], ...]:
    """Equilateral triangle with its top vertex centered above the base.

    The anchor is the top-left of the bounding box; height = size·√3/2.
    """
    height = math.sqrt(3) / 2 * size
    return (
        (anchor.x + size / 2, anchor.y),
        (anchor.x + size, anchor.y + height),
        (anchor.x, anchor.y + height),
    )


def triangle_shape(*args, **options) -> ShapeDescriptor:
    """triangle(x, y, size) or triangle(anchor, size)."""
    anchor, (size,) = _split_anchor(args, 1, "triangle")
    geometry = Polygon(triangle_vertices(anchor, size), origin=anchor)
    return describe(geometry, options)


def polygon_shape(points, **options) -> ShapeDescriptor:
    """polygon([(x, y), ...]) — points may be pairs or Positions."""
    return describe(Polygon(_points(points)), options)


_TEXT_FIELDS = (
    "font_size", "font_family", "color", "text_align", "text_baseline",
    "jitter", "roughness",
)


def _text_shape(content: str, args: tuple, options: dict, sketchy: bool) -> ShapeDescriptor:
    anchor, _ = _split_anchor(args, 0, "sketchy_text" if sketchy else "text")
    text_fields = {k: options.pop(k) for k in _TEXT_FIELDS if k in options}
    geometry = Text(anchor.x, anchor.y, str(content), sketchy=sketchy, **text_fields)
    return describe(geometry, options)


def text_shape(content: str, *args, **options) -> ShapeDescriptor:
    """text(content, x, y) or text(content, anchor)."""
    return _text_shape(content, args, options, sketchy=False)


def sketchy_text_shape(content: str, *args, **options) -> ShapeDescriptor:
    """sketchy_text(content, x, y) or sketchy_text(content, anchor)."""
    options.setdefault("jitter", 1.5)
    options.setdefault("roughness", 3)
    return _text_shape(content, args, options, sketchy=True)


# ── Dict form ────────────────────────────────────────────────────
# Shape dicts (add_shape / manifests): {type: rect, x: 0, y: 0, width: 10,
# height: 10, <options>}. Geometry keys are consumed, everything else is
# treated as options.

SHAPE_TYPES = {
    "rect": ("x", "y", "width", "height"),
    "rectangle": ("x", "y", "width", "height"),
    "square": ("x", "y", "size"),
    "circle": ("x", "y", "radius"),
    "ellipse": ("x", "y", "width", "height"),
    "line": ("x1", "y1", "x2", "y2"),
    "triangle": ("x", "y", "size"),
    "polygon": ("points",),
    "text": ("text", "x", "y"),
    "sketchy_text": ("text", "x", "y"),
}

_DICT_FACTORIES = {
    "rect": rect_shape,
    "rectangle": rect_shape,
    "square": square_shape,
    "circle": circle_shape,
    "ellipse": ellipse_shape,
    "line": line_shape,
    "triangle": triangle_shape,
    "polygon": polygon_shape,
    "text": text_shape,
    "sketchy_text": sketchy_text_shape,
}


def descriptor_from_dict(spec: dict) -> ShapeDescriptor:
    """Build a descriptor from a shape dict.

    Raises:
        ValueError: Unknown type or missing geometry field.
    """
    fields = dict(spec)
    shape_type = fields.pop("type", None)
    if shape_type not in SHAPE_TYPES:
        raise ValueError(
            f"Unknown shape type '{shape_type}'. Valid: {sorted(SHAPE_TYPES)}"
        )
    required = SHAPE_TYPES[shape_type]
    missing = [k for k in required if k not in fields]
    if missing:
        raise ValueError(f"Shape '{shape_type}' missing required field(s): {missing}")
    positional = [fields.pop(k) for k in required]
    return _DICT_FACTORIES[shape_type](*positional, **fields)


def to_descriptor(value) -> ShapeDescriptor:
    """Normalize a ShapeDescriptor or shape dict."""
    if isinstance(value, ShapeDescriptor):
        return value
    if isinstance(value, dict):
        return descriptor_from_dict(value)
    raise ValueError(f"Cannot interpret shape {value!r}")
