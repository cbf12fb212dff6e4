"""Tests for roughcut.scene_api.SceneApi."""

import pytest

from roughcut.canvas import CanvasGeometry
from roughcut.position import Position
from roughcut.registry import ShapeHandle
from roughcut.scene_api import RenderPassError, SceneApi


class FakeStage:
    def __init__(self):
        self.in_render_pass = False
        self.surface = "surface"
        self.rasterizer = "rasterizer"


@pytest.fixture
def api(make_scheduler):
    scheduler = make_scheduler((1000, lambda api: None))
    return SceneApi(scheduler, canvas=CanvasGeometry(200, 200), stage=FakeStage())


class TestFactories:
    def test_every_factory_returns_a_handle(self, api):
        handles = [
            api.rect(0, 0, 10, 10),
            api.square(Position(0, 0), 10),
            api.circle(50, 50, 10),
            api.ellipse(50, 50, 20, 10),
            api.line(0, 0, 10, 10),
            api.triangle(0, 0, 10),
            api.polygon([(0, 0), (10, 0), (5, 5)]),
            api.text("Hi", 10, 10),
            api.sketchy_text("Hi", Position(10, 10)),
        ]
        assert all(isinstance(h, ShapeHandle) for h in handles)
        assert [h.id for h in handles] == list(range(1, 10))
        kinds = [s.kind for s in api._scheduler.registry.snapshot()]
        assert kinds == [
            "rectangle", "rectangle", "circle", "ellipse", "line",
            "polygon", "polygon", "text", "sketchy_text",
        ]

    def test_get_position(self, api):
        handle = api.circle(Position(30, 40), 5)
        assert handle.get_position() == Position(30, 40)

    def test_clear_shapes(self, api):
        api.square(0, 0, 5)
        api.clear_shapes()
        assert len(api._scheduler.registry) == 0


class TestTiming:
    def test_wait_requires_duration(self, api):
        with pytest.raises(ValueError, match="requires a duration"):
            api.wait(None)

    def test_wait_rejects_negative(self, api):
        with pytest.raises(ValueError, match=">= 0"):
            api.wait(-1)

    def test_now_and_elapsed(self, api):
        assert api.now == 0
        assert api.elapsed == 0


class TestRenderOnly:
    def test_outside_render_pass(self, api):
        with pytest.raises(RenderPassError, match="get_surface\\(\\) is only available"):
            api.get_surface()
        with pytest.raises(RenderPassError, match="get_rasterizer"):
            api.get_rasterizer()

    def test_inside_render_pass(self, api):
        api._stage.in_render_pass = True
        assert api.get_surface() == "surface"
        assert api.get_rasterizer() == "rasterizer"

    def test_without_stage(self, make_scheduler):
        scheduler = make_scheduler((1000, lambda api: None))
        with pytest.raises(RenderPassError):
            SceneApi(scheduler).get_surface()
