"""Tests for roughcut.styles shadow and label specs."""

import pytest

from roughcut.styles import LabelSpec, ShadowSpec, to_label_spec, to_shadow_spec


class TestShadowSpec:
    def test_drop_defaults(self):
        shadow = ShadowSpec.drop()
        assert shadow.kind == "drop"
        assert shadow.color == "rgba(0, 0, 0, 0.3)"
        assert (shadow.offset_x, shadow.offset_y, shadow.blur) == (5, 5, 4)

    def test_cast_defaults(self):
        shadow = ShadowSpec.cast()
        assert shadow.kind == "cast"
        assert shadow.color == "rgba(0, 0, 0, 0.7)"
        assert (shadow.offset_x, shadow.offset_y, shadow.blur) == (15, 15, 0)

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown shadow kind"):
            ShadowSpec(kind="inner")


class TestToShadowSpec:
    def test_none_and_spec_pass_through(self):
        spec = ShadowSpec.drop()
        assert to_shadow_spec(None) is None
        assert to_shadow_spec(spec) is spec

    def test_cast_dict_uses_cast_defaults(self):
        shadow = to_shadow_spec({"type": "cast", "color": "#000000"})
        assert shadow.kind == "cast"
        assert (shadow.offset_x, shadow.offset_y) == (15, 15)
        assert shadow.color == "#000000"

    def test_offset_pair(self):
        shadow = to_shadow_spec({"offset": [2, 3], "blur": 8})
        assert shadow.kind == "drop"
        assert (shadow.offset_x, shadow.offset_y, shadow.blur) == (2, 3, 8)

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown shadow kind"):
            to_shadow_spec({"type": "glow"})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError, match="Cannot interpret shadow"):
            to_shadow_spec("drop")


class TestLabelSpec:
    def test_defaults(self):
        label = LabelSpec("DB")
        assert label.font_size == 16
        assert label.color == "#000000"
        assert label.align == "middle"
        assert not label.sketchy

    def test_sketchy_style_returns_copy(self):
        label = LabelSpec("DB")
        sketchy = label.sketchy_style(jitter=2, roughness=4)
        assert sketchy.sketchy and (sketchy.jitter, sketchy.roughness) == (2, 4)
        assert not label.sketchy

    def test_bad_align(self):
        with pytest.raises(ValueError, match="Unknown label align"):
            LabelSpec("x", align="left")


class TestToLabelSpec:
    def test_bare_string(self):
        assert to_label_spec("API") == LabelSpec("API")

    def test_dict_with_offset(self):
        label = to_label_spec({"text": "DB", "font_size": 14, "offset": [0, 10]})
        assert label.font_size == 14
        assert (label.offset_x, label.offset_y) == (0, 10)

    def test_missing_text(self):
        with pytest.raises(ValueError, match="requires 'text'"):
            to_label_spec({"font_size": 12})

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Invalid label fields"):
            to_label_spec({"text": "x", "weight": "bold"})
