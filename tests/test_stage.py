"""Tests for roughcut.stage.Stage frame drawing."""

import pytest
from PIL import Image

from roughcut.animate import fade_in
from roughcut.stage import Stage
from roughcut.timeline import DEFAULT_BACKGROUND, Timeline


SOLID_BLACK = {"fill": "#000000", "fill_style": "solid", "stroke": "none"}


def idle(api):
    return None


def two_scene_timeline(loop=True):
    def second(api):
        api.rect(0, 0, 20, 20, **SOLID_BLACK)

    return (
        Timeline()
        .add_scene("red", 1000, idle, "#ff0000")
        .add_scene("green", 1000, second, "#00ff00")
        .loop(loop)
    )


class TestBackground:
    def test_default_before_start(self):
        stage = Stage(Timeline().add_scene(1000, idle), (10, 10))
        assert stage.background_color == DEFAULT_BACKGROUND

    def test_per_scene_background(self):
        stage = Stage(two_scene_timeline(), (40, 40))
        assert stage.render_frame(500).getpixel((30, 30)) == (255, 0, 0, 255)
        assert stage.render_frame(1500).getpixel((30, 30)) == (0, 255, 0, 255)

    def test_halted_keeps_last_background_and_no_shapes(self):
        stage = Stage(two_scene_timeline(loop=False), (40, 40))
        surface = Image.new("RGBA", (40, 40))
        assert stage.draw(surface, 1500) == 1
        assert stage.draw(surface, 2500) == 0
        assert stage.scheduler.halted
        assert surface.getpixel((5, 5)) == (0, 255, 0, 255)


class TestDraw:
    def test_unstarted_stage_plays_from_zero(self):
        stage = Stage(two_scene_timeline(), (40, 40))
        frame = stage.render_frame(1500)
        assert stage.scheduler.scene_index == 1
        assert stage.scheduler.scene_started_at == 1000
        assert frame.getpixel((30, 30)) == (0, 255, 0, 255)

    def test_explicit_start_sets_origin(self):
        stage = Stage(two_scene_timeline(), (40, 40))
        stage.start(1500)
        frame = stage.render_frame(1500)
        assert stage.scheduler.scene_index == 0
        assert frame.getpixel((30, 30)) == (255, 0, 0, 255)

    def test_frame_size(self):
        frame = Stage(two_scene_timeline(), (64, 48)).render_frame(0)
        assert frame.size == (64, 48)
        assert frame.mode == "RGBA"

    def test_shapes_painted_over_background(self):
        stage = Stage(two_scene_timeline(), (40, 40))
        frame = stage.render_frame(1200)
        assert frame.getpixel((10, 10)) == (0, 0, 0, 255)
        assert frame.getpixel((30, 30)) == (0, 255, 0, 255)

    def test_entrance_fade_in_pixels(self):
        def routine(api):
            api.rect(0, 0, 20, 20, animate_in=fade_in(1000), **SOLID_BLACK)

        timeline = Timeline().add_scene(2000, routine, "#ffffff")
        stage = Stage(timeline, (40, 40))
        r, g, b, _ = stage.render_frame(500).getpixel((10, 10))
        assert 100 < r < 160
        assert stage.render_frame(1000).getpixel((10, 10)) == (0, 0, 0, 255)

    def test_uses_injected_rasterizer(self, recorder):
        stage = Stage(two_scene_timeline(), (40, 40), rasterizer=recorder)
        stage.render_frame(1000)
        assert recorder.methods == ["rectangle"]

    def test_time_must_not_go_backwards(self):
        stage = Stage(two_scene_timeline(), (40, 40))
        stage.render_frame(800)
        with pytest.raises(ValueError, match="Time went backwards"):
            stage.render_frame(100)

    def test_same_seed_same_frames(self):
        def sketchy(api):
            api.circle(20, 20, 15, roughness=2, fill="#3b82f6")

        timeline = Timeline().add_scene(1000, sketchy, "#ffffff")
        first = Stage(timeline, (40, 40), seed=9).render_frame(100)
        second = Stage(timeline, (40, 40), seed=9).render_frame(100)
        assert first.tobytes() == second.tobytes()


class SurfaceSpy:
    """Rasterizer that reads the render-pass surface through the scene API."""

    def __init__(self, apis):
        self.apis = apis
        self.seen = []

    def rectangle(self, image, x, y, width, height, options):
        self.seen.append(self.apis[0].get_surface())

    def circle(self, *args):
        pass

    def ellipse(self, *args):
        pass

    def line(self, *args):
        pass

    def polygon(self, *args):
        pass

    def text(self, *args):
        pass


class TestRenderPass:
    def test_surface_available_only_while_drawing(self):
        apis = []

        def routine(api):
            apis.append(api)
            api.rect(0, 0, 5, 5)

        spy = SurfaceSpy(apis)
        stage = Stage(Timeline().add_scene(1000, routine), (20, 20), rasterizer=spy)
        surface = Image.new("RGBA", (20, 20))
        stage.draw(surface, 0)
        assert spy.seen == [surface]
        assert not stage.in_render_pass
        assert apis[0].canvas.size == (20, 20)
