"""Position — immutable 2D point / vector.

Used both as an absolute shape anchor (canvas pixels, y grows downward) and
as a relative displacement, e.g. the offset a slide effect starts from.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    # ── Factories ────────────────────────────────────────────────

    @classmethod
    def at(cls, x: float, y: float) -> "Position":
        return cls(x, y)

    @classmethod
    def zero(cls) -> "Position":
        return cls(0, 0)

    @classmethod
    def from_pair(cls, pair) -> "Position":
        """Build from an (x, y) sequence or an object with x/y attributes."""
        if isinstance(pair, Position):
            return pair
        if hasattr(pair, "x") and hasattr(pair, "y"):
            return cls(pair.x, pair.y)
        x, y = pair
        return cls(x, y)

    @classmethod
    def from_left(cls, distance: float) -> "Position":
        return cls(-distance, 0)

    @classmethod
    def from_right(cls, distance: float) -> "Position":
        return cls(distance, 0)

    @classmethod
    def from_top(cls, distance: float) -> "Position":
        return cls(0, -distance)

    @classmethod
    def from_bottom(cls, distance: float) -> "Position":
        return cls(0, distance)

    # ── Offsets ──────────────────────────────────────────────────

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def move_right(self, amount: float) -> "Position":
        return Position(self.x + amount, self.y)

    def move_left(self, amount: float) -> "Position":
        return Position(self.x - amount, self.y)

    def move_down(self, amount: float) -> "Position":
        return Position(self.x, self.y + amount)

    def move_up(self, amount: float) -> "Position":
        return Position(self.x, self.y - amount)

    # ── Vector math ──────────────────────────────────────────────

    def __add__(self, other: "Position") -> "Position":
        if not isinstance(other, Position):
            return NotImplemented
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Position") -> "Position":
        if not isinstance(other, Position):
            return NotImplemented
        return Position(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Position":
        if isinstance(scalar, Position):
            return NotImplemented
        return Position(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Position":
        if isinstance(scalar, Position):
            return NotImplemented
        if scalar == 0:
            raise ZeroDivisionError("Cannot divide position by zero")
        return Position(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Position":
        return Position(-self.x, -self.y)

    def scale(self, factor: float) -> "Position":
        return self * factor

    # ── Geometry ─────────────────────────────────────────────────

    def distance(self, other: "Position") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Position":
        mag = self.magnitude()
        if mag == 0:
            return Position.zero()
        return self / mag

    def rotate(self, degrees: float, origin: "Position | None" = None) -> "Position":
        """Rotate around *origin* (default 0,0).

        Positive angles turn clockwise on screen, since y points down.
        """
        origin = origin or Position.zero()
        radians = math.radians(degrees)
        cos, sin = math.cos(radians), math.sin(radians)
        dx, dy = self.x - origin.x, self.y - origin.y
        return Position(
            dx * cos - dy * sin + origin.x,
            dx * sin + dy * cos + origin.y,
        )

    def angle(self) -> float:
        """Vector angle in degrees (0 = right, 90 = down)."""
        return math.degrees(math.atan2(self.y, self.x))

    def dot(self, other: "Position") -> float:
        return self.x * other.x + self.y * other.y

    # ── Interpolation ────────────────────────────────────────────

    def lerp(self, other: "Position", t: float) -> "Position":
        """Linear interpolation: t=0 is self, t=1 is other."""
        return Position(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )

    def midpoint(self, other: "Position") -> "Position":
        return self.lerp(other, 0.5)

    # ── Utilities ────────────────────────────────────────────────

    def clamp(self, lo: "Position", hi: "Position") -> "Position":
        return Position(
            max(lo.x, min(hi.x, self.x)),
            max(lo.y, min(hi.y, self.y)),
        )

    def round(self) -> "Position":
        return Position(round(self.x), round(self.y))

    def floor(self) -> "Position":
        return Position(math.floor(self.x), math.floor(self.y))

    def ceil(self) -> "Position":
        return Position(math.ceil(self.x), math.ceil(self.y))

    def equals(self, other: "Position", tolerance: float = 0.001) -> bool:
        return (
            abs(self.x - other.x) < tolerance
            and abs(self.y - other.y) < tolerance
        )

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __iter__(self):
        yield self.x
        yield self.y


# ── Directions ───────────────────────────────────────────────────

VALID_DIRECTIONS = {"left", "right", "top", "bottom"}


def direction_vector(direction: str, distance: float) -> Position:
    """Resolve a named direction + distance into a displacement vector.

    Raises:
        ValueError: Unknown direction name.
    """
    if direction == "left":
        return Position(-distance, 0)
    if direction == "right":
        return Position(distance, 0)
    if direction == "top":
        return Position(0, -distance)
    if direction == "bottom":
        return Position(0, distance)
    raise ValueError(
        f"Unknown direction '{direction}'. Valid: {sorted(VALID_DIRECTIONS)}"
    )
