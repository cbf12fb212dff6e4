"""Stage — binds a timeline to a surface size and draws frames.

    stage = Stage(timeline, (400, 400), seed=7)
    frame = stage.render_frame(1500)        # PIL RGBA image at t=1.5s

draw(surface, now) is the per-tick entry point a host calls with its own
clock (ms). It advances the scheduler to `now` first, so scene switches,
routine wake-ups, promotions and purges all happen before anything is
painted. Then it fills the scene background and renders a snapshot of
the registry. Time must not go backwards; rebuild the stage to rewind.
A stage that was never started plays the timeline from 0; call start(t)
first to put the origin elsewhere.

With a seed, every random choice (stroke jitter, sketchy text wobble)
comes from one Random, so rendering the same timestamps in the same order
reproduces the same frames.
"""

import logging
import random

from PIL import Image

from .canvas import CanvasGeometry
from .common import parse_color
from .rasterizer import PillowRasterizer, Rasterizer
from .registry import ShapeRegistry
from .render import DrawingContext, render_shapes
from .scene_api import SceneApi
from .scheduler import Scheduler
from .timeline import DEFAULT_BACKGROUND, Timeline


log = logging.getLogger(__name__)


class Stage:
    def __init__(
        self,
        timeline: Timeline,
        size: tuple[int, int],
        rasterizer: Rasterizer | None = None,
        seed: int | None = None,
    ):
        width, height = size
        self.timeline = timeline
        self.canvas = CanvasGeometry(width, height)
        self.rng = random.Random(seed)
        self.rasterizer = rasterizer if rasterizer is not None else PillowRasterizer(self.rng)
        self.scheduler = Scheduler(timeline, api_factory=self._make_api)

        # Set only while render_shapes runs.
        self.surface: Image.Image | None = None
        self.in_render_pass = False

    def _make_api(self, scheduler: Scheduler) -> SceneApi:
        return SceneApi(scheduler, canvas=self.canvas, stage=self)

    @property
    def registry(self) -> ShapeRegistry:
        return self.scheduler.registry

    @property
    def size(self) -> tuple[int, int]:
        return self.canvas.size

    @property
    def background_color(self):
        """Background of the current scene; a halted timeline keeps its last."""
        index = self.scheduler.scene_index
        if index is None:
            return DEFAULT_BACKGROUND
        return self.timeline.scenes[index].background_color

    def start(self, now: float = 0.0) -> None:
        self.scheduler.start(now)

    def draw(self, surface: Image.Image, now: float) -> int:
        """Advance to *now* (ms) and paint the frame onto *surface*.

        Returns:
            Number of shapes drawn.
        """
        if not self.scheduler.started:
            self.scheduler.start(0)
        self.scheduler.advance_to(now)

        surface.paste(parse_color(self.background_color), (0, 0, surface.width, surface.height))
        shapes = self.registry.snapshot()

        self.surface = surface
        self.in_render_pass = True
        try:
            drawn = render_shapes(
                DrawingContext(surface, self.rasterizer),
                shapes,
                now,
                self.scheduler.removal_info,
            )
        finally:
            self.in_render_pass = False
            self.surface = None

        log.debug("Frame %.0fms: %d of %d shapes drawn", now, drawn, len(shapes))
        return drawn

    def render_frame(self, now: float) -> Image.Image:
        """Draw the frame at *now* (ms) onto a fresh RGBA surface."""
        surface = Image.new("RGBA", self.size, (0, 0, 0, 0))
        self.draw(surface, now)
        return surface
