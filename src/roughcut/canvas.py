"""Canvas geometry helpers for positioning and sizing shapes.

Available to choreography routines as `api.canvas`:

    api.rect(api.canvas.center_x, api.canvas.center_y, 100, 100)

    p = api.canvas.padding(50)
    api.rect(p.left, p.top, 100, 100)

    api.rect(100, 100, api.canvas.percent(50), api.canvas.percent(30, "height"))
    api.circle(api.canvas.pos.bottom_right.offset(-100, -100), 50)

    cell = api.canvas.grid(3, 2).cell(1, 0)
    api.circle(cell.center_x, cell.center_y, cell.width / 4)

Global padding (set_padding) shrinks the content area: width/height, the
edges and the named anchors under `pos` all respect it. center_x/center_y
stay at the middle of the full surface, as do the raw_* values.

Size presets (PRESETS) cover common video formats and are accepted
wherever a manifest takes a resolution.
"""

from dataclasses import dataclass

from .position import Position


PRESETS = {
    "instagram_story": (1080, 1920),
    "instagram_reel": (1080, 1920),
    "youtube_video": (1920, 1080),
    "youtube_shorts": (1080, 1920),
    "tiktok": (1080, 1920),
    "square": (1080, 1080),
    "portrait": (1080, 1350),
    "landscape": (1200, 628),
    "small_square": (400, 400),
    "twitter": (1200, 675),
}

VALID_DIMENSIONS = {"width", "height"}


@dataclass(frozen=True)
class Bounds:
    """Rectangular content area returned by padding/margin/inset."""

    left: float
    top: float
    right: float
    bottom: float
    center_x: float
    center_y: float
    width: float
    height: float


@dataclass(frozen=True)
class Cell:
    col: int
    row: int
    left: float
    top: float
    width: float
    height: float

    @property
    def x(self) -> float:
        return self.left

    @property
    def y(self) -> float:
        return self.top

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    @property
    def center(self) -> Position:
        return Position(self.center_x, self.center_y)


@dataclass(frozen=True)
class Grid:
    cols: int
    rows: int
    cell_width: float
    cell_height: float

    def cell(self, col: int, row: int) -> Cell:
        return Cell(
            col=col,
            row=row,
            left=col * self.cell_width,
            top=row * self.cell_height,
            width=self.cell_width,
            height=self.cell_height,
        )


class CanvasPositions:
    """Named anchors on the padded content area (canvas.pos)."""

    def __init__(self, canvas: "CanvasGeometry"):
        self._canvas = canvas

    @property
    def center(self) -> Position:
        return self._canvas.center

    @property
    def top_left(self) -> Position:
        return Position(self._canvas.left, self._canvas.top)

    @property
    def top_right(self) -> Position:
        return Position(self._canvas.right, self._canvas.top)

    @property
    def bottom_left(self) -> Position:
        return Position(self._canvas.left, self._canvas.bottom)

    @property
    def bottom_right(self) -> Position:
        return Position(self._canvas.right, self._canvas.bottom)

    def top(self, x: float) -> Position:
        return Position(x, self._canvas.top)

    def bottom(self, x: float) -> Position:
        return Position(x, self._canvas.bottom)

    def left(self, y: float) -> Position:
        return Position(self._canvas.left, y)

    def right(self, y: float) -> Position:
        return Position(self._canvas.right, y)

    def center_x(self, y: float) -> Position:
        return Position(self._canvas.center_x, y)

    def center_y(self, x: float) -> Position:
        return Position(x, self._canvas.center_y)


class CanvasGeometry:
    def __init__(self, width: float, height: float):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._padding = 0

    @classmethod
    def from_preset(cls, name: str) -> "CanvasGeometry":
        if name not in PRESETS:
            raise ValueError(f"Unknown canvas preset '{name}'. Valid: {sorted(PRESETS)}")
        return cls(*PRESETS[name])

    # ── Padding ──────────────────────────────────────────────────

    def set_padding(self, amount: float) -> "CanvasGeometry":
        self._padding = amount
        return self

    def get_padding(self) -> float:
        return self._padding

    # ── Dimensions ───────────────────────────────────────────────

    @property
    def width(self) -> float:
        return self._width - self._padding * 2

    @property
    def height(self) -> float:
        return self._height - self._padding * 2

    @property
    def raw_width(self) -> float:
        return self._width

    @property
    def raw_height(self) -> float:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return (round(self._width), round(self._height))

    # ── Edges ────────────────────────────────────────────────────

    @property
    def left(self) -> float:
        return self._padding

    @property
    def top(self) -> float:
        return self._padding

    @property
    def right(self) -> float:
        return self._width - self._padding

    @property
    def bottom(self) -> float:
        return self._height - self._padding

    raw_left = 0
    raw_top = 0

    @property
    def raw_right(self) -> float:
        return self._width

    @property
    def raw_bottom(self) -> float:
        return self._height

    @property
    def center_x(self) -> float:
        return self._width / 2

    @property
    def center_y(self) -> float:
        return self._height / 2

    @property
    def center(self) -> Position:
        return Position(self.center_x, self.center_y)

    @property
    def pos(self) -> CanvasPositions:
        return CanvasPositions(self)

    # ── Sizing ───────────────────────────────────────────────────

    def _base(self, dimension: str) -> float:
        if dimension not in VALID_DIMENSIONS:
            raise ValueError(
                f"Unknown dimension '{dimension}'. Valid: {sorted(VALID_DIMENSIONS)}"
            )
        return self.width if dimension == "width" else self.height

    def percent(self, percentage: float, dimension: str = "width") -> float:
        """Percentage of the padded width (or height)."""
        return self._base(dimension) * percentage / 100

    def fraction(self, numerator: float, denominator: float, dimension: str = "width") -> float:
        """numerator/denominator of the padded width (or height)."""
        if denominator == 0:
            raise ZeroDivisionError("Cannot take a fraction with denominator zero")
        return self._base(dimension) * numerator / denominator

    # ── Spacing ──────────────────────────────────────────────────
    # These ignore the global padding and measure from the raw surface.

    def inset(
        self,
        top: float,
        right: float | None = None,
        bottom: float | None = None,
        left: float | None = None,
    ) -> Bounds:
        """CSS-style inset: missing sides fall back like margin shorthand."""
        right = top if right is None else right
        bottom = top if bottom is None else bottom
        left = right if left is None else left
        return Bounds(
            left=left,
            top=top,
            right=self._width - right,
            bottom=self._height - bottom,
            center_x=self._width / 2,
            center_y=self._height / 2,
            width=self._width - left - right,
            height=self._height - top - bottom,
        )

    def padding(self, amount: float) -> Bounds:
        return self.inset(amount)

    def margin(self, amount: float) -> Bounds:
        return self.inset(amount)

    def grid(self, cols: int, rows: int) -> Grid:
        """Divide the full surface into cols × rows equal cells."""
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Grid needs at least one column and row, got {cols}x{rows}")
        return Grid(cols, rows, self._width / cols, self._height / rows)

    def __repr__(self) -> str:
        return f"CanvasGeometry({self._width}x{self._height}, padding={self._padding})"
