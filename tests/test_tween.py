"""Tests for roughcut.tween transform calculation."""

import pytest

from roughcut.animate import fade_in, fade_out, slide_from, slide_to
from roughcut.position import Position
from roughcut.shapes import Shape, rect_shape
from roughcut.tween import (
    IDENTITY,
    RemovalInfo,
    compute_transform,
    entrance_transform,
    exit_transform,
)


def make_shape(now=0, **options):
    return Shape.create(1, rect_shape(0, 0, 10, 10, **options), now)


ENTRANCE = fade_in(600).slide_from("left", 150, 700)


class TestEntrance:
    def test_midway(self):
        t = entrance_transform(350, ENTRANCE)
        assert t.opacity == pytest.approx(350 / 600)
        assert t.offset.x == pytest.approx(-75)
        assert t.offset.y == pytest.approx(0)
        assert not t.should_skip

    def test_start(self):
        t = entrance_transform(0, ENTRANCE)
        assert t.opacity == 0
        assert t.offset.x == pytest.approx(-150)

    def test_fade_finishes_before_slide(self):
        t = entrance_transform(650, ENTRANCE)
        assert t.opacity == 1
        assert t.offset.x == pytest.approx(-150 * 50 / 700)

    def test_complete(self):
        t = entrance_transform(700, ENTRANCE)
        assert t.opacity == 1
        assert t.offset.equals(Position.zero())

    def test_no_spec_is_identity(self):
        assert entrance_transform(10, None) is IDENTITY

    def test_zero_duration_effect_is_complete(self):
        assert entrance_transform(0, fade_in(0)).opacity == 1


class TestExit:
    def test_fade_out_progress(self):
        t = exit_transform(250, fade_out(500))
        assert t.opacity == pytest.approx(0.5)

    def test_slide_toward(self):
        t = exit_transform(100, slide_to("bottom", 40, 200))
        assert t.offset == Position(0, 20)

    def test_offset_slide(self):
        t = exit_transform(50, slide_to(Position(10, -10), 100))
        assert t.offset.equals(Position(5, -5))

    def test_skip_at_duration(self):
        assert exit_transform(500, fade_out(500)).should_skip
        assert exit_transform(900, fade_out(500)).should_skip

    def test_no_spec_is_identity(self):
        assert exit_transform(0, None) is IDENTITY


class TestComputeTransform:
    def test_entering_shape(self):
        shape = make_shape(now=1000, animate_in=ENTRANCE)
        t = compute_transform(shape, 1350)
        assert t.opacity == pytest.approx(350 / 600)

    def test_visible_shape_is_identity(self):
        shape = make_shape(animate_in=ENTRANCE)
        shape.mark_visible()
        assert compute_transform(shape, 100) is IDENTITY

    def test_exiting_shape_uses_removed_at(self):
        shape = make_shape()
        shape.mark_exiting(1000, fade_out(400))
        assert compute_transform(shape, 1100).opacity == pytest.approx(0.75)

    def test_exiting_without_spec_is_identity(self):
        shape = make_shape()
        shape.mark_exiting(1000, None)
        assert compute_transform(shape, 1100) is IDENTITY

    def test_removal_record_takes_precedence(self):
        # Still entering, but a removal was recorded at 200ms.
        shape = make_shape(animate_in=ENTRANCE)
        removal = RemovalInfo(200, fade_out(100))
        t = compute_transform(shape, 250, removal)
        assert t.opacity == pytest.approx(0.5)
        assert t.offset.equals(Position.zero())

    def test_removal_record_past_duration_skips(self):
        shape = make_shape()
        assert compute_transform(shape, 400, RemovalInfo(200, fade_out(100))).should_skip

    def test_recomputable_in_any_order(self):
        shape = make_shape(animate_in=ENTRANCE)
        later = compute_transform(shape, 500)
        earlier = compute_transform(shape, 100)
        assert compute_transform(shape, 500) == later
        assert earlier.opacity < later.opacity

    def test_slide_only_entrance(self):
        shape = make_shape(animate_in=slide_from(Position(0, 100), 1000))
        t = compute_transform(shape, 250)
        assert t.opacity == 1
        assert t.offset.equals(Position(0, 75))
