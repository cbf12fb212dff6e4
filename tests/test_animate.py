"""Tests for roughcut.animate."""

import pytest

from roughcut.animate import (
    AnimationEffect,
    AnimationSpec,
    fade_in,
    fade_out,
    slide_from,
    slide_to,
    to_animation_spec,
)
from roughcut.duration import Duration
from roughcut.position import Position


class TestBuilders:
    def test_fade_in_plain_number_is_ms(self):
        spec = fade_in(600)
        assert len(spec) == 1
        assert spec.duration == 600

    def test_fade_in_duration_object(self):
        assert fade_in(Duration.seconds(1)).duration == 1000

    def test_chained_effects_run_concurrently(self):
        spec = fade_in(600).slide_from("left", 150, 700)
        assert len(spec) == 2
        assert spec.duration == 700

    def test_slide_from_direction(self):
        (effect,) = slide_from("left", 150, 700)
        assert effect.kind == "slide"
        assert effect.displacement() == Position(-150, 0)

    def test_slide_to_offset(self):
        (effect,) = slide_to(Position.from_bottom(100), 600)
        assert effect.offset == Position(0, 100)
        assert effect.duration == 600

    def test_fade_out(self):
        spec = fade_out(500).slide_to("bottom", 100, 600)
        assert [e.kind for e in spec] == ["fade", "slide"]
        assert spec.duration == 600

    def test_builders_return_new_spec(self):
        first = fade_in(600)
        second = first.fade_out(100)
        assert len(first) == 1
        assert len(second) == 2

    def test_direction_slide_requires_duration(self):
        with pytest.raises(ValueError, match="Duration is required"):
            slide_from("left", 150)

    def test_offset_slide_takes_two_arguments(self):
        with pytest.raises(ValueError, match="offset"):
            slide_from(Position(10, 0), 100, 200)

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            fade_in(-5)

    def test_empty_spec(self):
        spec = AnimationSpec()
        assert not spec
        assert spec.duration == 0


class TestAnimationEffect:
    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown effect"):
            AnimationEffect("spin", 100)

    def test_slide_needs_direction_or_offset(self):
        with pytest.raises(ValueError, match="either direction"):
            AnimationEffect("slide", 100)

    def test_slide_rejects_both(self):
        with pytest.raises(ValueError, match="either direction"):
            AnimationEffect("slide", 100, direction="left", distance=10,
                            offset=Position(1, 1))

    def test_unknown_direction(self):
        with pytest.raises(ValueError, match="Unknown direction"):
            AnimationEffect("slide", 100, direction="up", distance=10)

    def test_fade_takes_no_direction(self):
        with pytest.raises(ValueError, match="no direction"):
            AnimationEffect("fade", 100, direction="left")

    def test_fade_has_no_displacement(self):
        assert AnimationEffect("fade", 100).displacement() == Position(0, 0)


class TestToAnimationSpec:
    def test_none(self):
        assert to_animation_spec(None) is None

    def test_empty_collapses_to_none(self):
        assert to_animation_spec([]) is None
        assert to_animation_spec(AnimationSpec()) is None

    def test_spec_passes_through(self):
        spec = fade_in(100)
        assert to_animation_spec(spec) is spec

    def test_single_effect_dict_in_seconds(self):
        spec = to_animation_spec({"fade": 0.6})
        assert spec.duration == pytest.approx(600)

    def test_list_form(self):
        spec = to_animation_spec([
            {"fade": 0.6},
            {"slide": {"direction": "left", "distance": 150}, "duration": 0.7},
        ])
        assert len(spec) == 2
        assert spec.duration == pytest.approx(700)
        assert spec.effects[1].displacement() == Position(-150, 0)

    def test_offset_form(self):
        spec = to_animation_spec({"slide": {"offset": [-150, 0]}, "duration": 0.7})
        assert spec.effects[0].offset == Position(-150, 0)

    def test_slide_requires_duration(self):
        with pytest.raises(ValueError, match="requires 'duration'"):
            to_animation_spec({"slide": {"direction": "left", "distance": 10}})

    def test_slide_requires_distance(self):
        with pytest.raises(ValueError, match="direction \\+ distance"):
            to_animation_spec({"slide": {"direction": "left"}, "duration": 1})

    def test_unknown_effect(self):
        with pytest.raises(ValueError, match="unknown effect"):
            to_animation_spec({"spin": 1})

    def test_negative_seconds(self):
        with pytest.raises(ValueError, match="effect 0"):
            to_animation_spec({"fade": -1})

    def test_uninterpretable(self):
        with pytest.raises(ValueError, match="Cannot interpret"):
            to_animation_spec("fade")
