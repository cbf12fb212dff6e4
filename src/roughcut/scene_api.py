"""SceneApi — the capability object handed to choreography routines.

A routine receives one SceneApi per scene entry and uses it to add shapes,
pause, and read canvas geometry:

    async def intro(api):
        box = api.rect(80, 120, 100, 100, stroke="#3b82f6",
                       animate_in=fade_in(600).slide_from("left", 150, 700))
        await api.wait(Duration.seconds(1))
        await box.remove()

Factories return a ShapeHandle. get_surface() and get_rasterizer() only
work while the stage is rendering a frame; routines run between frames, so
calling them from a routine raises RenderPassError.
"""

from .canvas import CanvasGeometry
from .registry import ShapeHandle
from .shapes import (
    circle_shape,
    ellipse_shape,
    line_shape,
    polygon_shape,
    rect_shape,
    sketchy_text_shape,
    square_shape,
    text_shape,
    triangle_shape,
)


class RenderPassError(RuntimeError):
    """A render-only capability was used outside a render pass."""


class SceneApi:
    def __init__(self, scheduler, canvas: CanvasGeometry | None = None, stage=None):
        self._scheduler = scheduler
        self._stage = stage
        self.canvas = canvas

    # ── Timing ───────────────────────────────────────────────────

    def wait(self, duration):
        """Suspend the routine for *duration* (Duration or ms)."""
        if duration is None:
            raise ValueError("wait() requires a duration")
        return self._scheduler.wait(duration)

    @property
    def now(self) -> float:
        """Current scheduler time in ms."""
        return self._scheduler.now

    @property
    def elapsed(self) -> float:
        """Milliseconds since the current scene started."""
        return self._scheduler.now - self._scheduler.scene_started_at

    # ── Shapes ───────────────────────────────────────────────────

    def add_shape(self, shape) -> ShapeHandle:
        """Add a ShapeDescriptor or shape dict ({type: rect, x: ...})."""
        return self._scheduler.add_shape(shape)

    def clear_shapes(self) -> None:
        self._scheduler.clear_shapes()

    def rect(self, *args, **options) -> ShapeHandle:
        return self.add_shape(rect_shape(*args, **options))

    def square(self, *args, **options) -> ShapeHandle:
        return self.add_shape(square_shape(*args, **options))

    def circle(self, *args, **options) -> ShapeHandle:
        return self.add_shape(circle_shape(*args, **options))

    def ellipse(self, *args, **options) -> ShapeHandle:
        return self.add_shape(ellipse_shape(*args, **options))

    def line(self, *args, **options) -> ShapeHandle:
        return self.add_shape(line_shape(*args, **options))

    def triangle(self, *args, **options) -> ShapeHandle:
        return self.add_shape(triangle_shape(*args, **options))

    def polygon(self, points, **options) -> ShapeHandle:
        return self.add_shape(polygon_shape(points, **options))

    def text(self, content: str, *args, **options) -> ShapeHandle:
        return self.add_shape(text_shape(content, *args, **options))

    def sketchy_text(self, content: str, *args, **options) -> ShapeHandle:
        return self.add_shape(sketchy_text_shape(content, *args, **options))

    # ── Render-only ──────────────────────────────────────────────

    def _require_render_pass(self, what: str):
        stage = self._stage
        if stage is None or not stage.in_render_pass:
            raise RenderPassError(f"{what}() is only available during a render pass")
        return stage

    def get_surface(self):
        return self._require_render_pass("get_surface").surface

    def get_rasterizer(self):
        return self._require_render_pass("get_rasterizer").rasterizer
