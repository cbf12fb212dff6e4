"""Shared test fixtures for roughcut tests."""

import pytest
from PIL import Image

from roughcut.scheduler import Scheduler
from roughcut.timeline import Timeline


class RecordingRasterizer:
    """Rasterizer stand-in that records every primitive call.

    Each call is stored as (method, args, options) so tests can assert on
    paint order without inspecting pixels. The image argument is dropped
    but the number of distinct target images is tracked, so layering can
    be checked too.
    """

    def __init__(self):
        self.calls = []
        self.targets = []

    def _record(self, method, image, args, options):
        self.calls.append((method, args, dict(options)))
        self.targets.append(image)

    def rectangle(self, image, x, y, width, height, options):
        self._record("rectangle", image, (x, y, width, height), options)

    def circle(self, image, cx, cy, diameter, options):
        self._record("circle", image, (cx, cy, diameter), options)

    def ellipse(self, image, cx, cy, width, height, options):
        self._record("ellipse", image, (cx, cy, width, height), options)

    def line(self, image, x1, y1, x2, y2, options):
        self._record("line", image, (x1, y1, x2, y2), options)

    def polygon(self, image, points, options):
        self._record("polygon", image, (tuple(tuple(p) for p in points),), options)

    def text(self, image, content, x, y, options):
        self._record("text", image, (content, x, y), options)

    @property
    def methods(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def recorder():
    return RecordingRasterizer()


@pytest.fixture
def surface():
    """Small opaque white RGBA surface."""
    return Image.new("RGBA", (200, 200), (255, 255, 255, 255))


@pytest.fixture
def make_scheduler():
    """Build a started Scheduler from (duration_ms, routine) pairs."""

    def _make(*scenes, loop=True, start=0):
        timeline = Timeline().loop(loop)
        for duration, routine in scenes:
            timeline.add_scene(duration, routine)
        scheduler = Scheduler(timeline)
        scheduler.start(start)
        return scheduler

    return _make
