"""Entrance and exit animation specs.

An AnimationSpec is an ordered list of effects that all run concurrently,
each over its own duration. The spec's overall duration is the longest
effect. Two effect kinds exist:

  - fade: opacity ramps 0→1 on entrance, 1→0 on exit.
  - slide: displacement that decays to zero on entrance (the shape arrives
    from the offset) and grows from zero on exit (the shape leaves toward
    the offset). Given either as direction + distance or as a Position.

Specs are immutable. Builders return a new spec with the effect appended;
the module-level starters begin a fresh spec:

    fade_in(Duration.milliseconds(600)).slide_from("left", 150, Duration.milliseconds(700))
    fade_out(500).slide_to(Position.from_bottom(100), 600)

Plain numbers are milliseconds.

Manifest form (plain dicts) is normalized by to_animation_spec():

    [{fade: 0.6}, {slide: {direction: left, distance: 150}, duration: 0.7}]

Manifest durations are in seconds, like every duration in a manifest.
"""

from dataclasses import dataclass

from .duration import Duration, to_duration
from .position import Position, VALID_DIRECTIONS, direction_vector


VALID_EFFECT_KINDS = {"fade", "slide"}


@dataclass(frozen=True)
class AnimationEffect:
    """One fade or slide effect.

    A slide holds exactly one of (direction + distance) or offset.
    """

    kind: str
    duration: float  # milliseconds
    direction: str | None = None
    distance: float | None = None
    offset: Position | None = None

    def __post_init__(self):
        if self.kind not in VALID_EFFECT_KINDS:
            raise ValueError(
                f"Unknown effect '{self.kind}'. Valid: {sorted(VALID_EFFECT_KINDS)}"
            )
        if self.duration < 0:
            raise ValueError(f"Effect duration must be >= 0, got {self.duration!r}")
        if self.kind == "fade":
            if self.direction is not None or self.offset is not None:
                raise ValueError("A fade effect takes no direction or offset")
            return
        has_direction = self.direction is not None
        has_offset = self.offset is not None
        if has_direction == has_offset:
            raise ValueError(
                "A slide effect needs either direction + distance or an offset"
            )
        if has_direction:
            if self.direction not in VALID_DIRECTIONS:
                raise ValueError(
                    f"Unknown direction '{self.direction}'. "
                    f"Valid: {sorted(VALID_DIRECTIONS)}"
                )
            if self.distance is None:
                raise ValueError("Slide with a direction requires a distance")

    def displacement(self) -> Position:
        """Full displacement vector of a slide (zero for a fade)."""
        if self.kind != "slide":
            return Position.zero()
        if self.offset is not None:
            return self.offset
        return direction_vector(self.direction, self.distance)


@dataclass(frozen=True)
class AnimationSpec:
    effects: tuple[AnimationEffect, ...] = ()

    @property
    def duration(self) -> float:
        """Longest effect duration in milliseconds (0 when empty)."""
        return max((e.duration for e in self.effects), default=0)

    def __bool__(self) -> bool:
        return bool(self.effects)

    def __len__(self) -> int:
        return len(self.effects)

    def __iter__(self):
        return iter(self.effects)

    # ── Builders ─────────────────────────────────────────────────
    # fade_in/fade_out and slide_from/slide_to build identical effects;
    # the tween calculator reads them according to the entrance/exit slot
    # they are attached to.

    def fade_in(self, duration) -> "AnimationSpec":
        return self._with(AnimationEffect("fade", _ms(duration)))

    def fade_out(self, duration) -> "AnimationSpec":
        return self._with(AnimationEffect("fade", _ms(duration)))

    def slide_from(self, direction_or_offset, distance_or_duration, duration=None) -> "AnimationSpec":
        """Slide in from a direction (direction, distance, duration) or an offset (offset, duration)."""
        return self._with(_slide(direction_or_offset, distance_or_duration, duration))

    def slide_to(self, direction_or_offset, distance_or_duration, duration=None) -> "AnimationSpec":
        """Slide out toward a direction (direction, distance, duration) or an offset (offset, duration)."""
        return self._with(_slide(direction_or_offset, distance_or_duration, duration))

    def _with(self, effect: AnimationEffect) -> "AnimationSpec":
        return AnimationSpec(self.effects + (effect,))


def _slide(direction_or_offset, distance_or_duration, duration) -> AnimationEffect:
    if isinstance(direction_or_offset, Position):
        if duration is not None:
            raise ValueError("Slide with an offset takes (offset, duration)")
        return AnimationEffect(
            "slide", _ms(distance_or_duration), offset=direction_or_offset,
        )
    if duration is None:
        raise ValueError("Duration is required when sliding with a direction")
    return AnimationEffect(
        "slide", _ms(duration),
        direction=direction_or_offset, distance=distance_or_duration,
    )


# ── Starters ─────────────────────────────────────────────────────


def fade_in(duration) -> AnimationSpec:
    return AnimationSpec().fade_in(duration)


def fade_out(duration) -> AnimationSpec:
    return AnimationSpec().fade_out(duration)


def slide_from(direction_or_offset, distance_or_duration, duration=None) -> AnimationSpec:
    return AnimationSpec().slide_from(direction_or_offset, distance_or_duration, duration)


def slide_to(direction_or_offset, distance_or_duration, duration=None) -> AnimationSpec:
    return AnimationSpec().slide_to(direction_or_offset, distance_or_duration, duration)


def _ms(value) -> float:
    return to_duration(value).ms


# ── Boundary normalization ───────────────────────────────────────


def to_animation_spec(value) -> AnimationSpec | None:
    """Normalize an animation argument into an AnimationSpec (or None).

    Accepts an AnimationSpec, None, a single effect dict, or a list of
    effect dicts in manifest form. Empty specs collapse to None.

    Raises:
        ValueError: Malformed effect dict.
    """
    if value is None:
        return None
    if isinstance(value, AnimationSpec):
        return value if value else None
    if isinstance(value, AnimationEffect):
        return AnimationSpec((value,))
    if isinstance(value, dict):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Cannot interpret animation {value!r}")
    effects = tuple(_effect_from_dict(item, i) for i, item in enumerate(value))
    return AnimationSpec(effects) if effects else None


def _effect_from_dict(item, index: int) -> AnimationEffect:
    """Parse one manifest effect.

    Forms:
      {fade: 0.6}
      {slide: {direction: left, distance: 150}, duration: 0.7}
      {slide: {offset: [-150, 0]}, duration: 0.7}
    """
    if isinstance(item, AnimationEffect):
        return item
    if not isinstance(item, dict):
        raise ValueError(f"Animation effect {index}: expected a mapping, got {item!r}")

    if "fade" in item:
        return AnimationEffect("fade", _seconds_to_ms(item["fade"], index))

    if "slide" in item:
        slide = item["slide"]
        if "duration" not in item:
            raise ValueError(f"Animation effect {index}: slide requires 'duration'")
        duration = _seconds_to_ms(item["duration"], index)
        if not isinstance(slide, dict):
            raise ValueError(f"Animation effect {index}: 'slide' must be a mapping")
        if "offset" in slide:
            return AnimationEffect(
                "slide", duration, offset=Position.from_pair(slide["offset"]),
            )
        if "direction" not in slide or "distance" not in slide:
            raise ValueError(
                f"Animation effect {index}: slide needs direction + distance or offset"
            )
        return AnimationEffect(
            "slide", duration,
            direction=slide["direction"], distance=slide["distance"],
        )

    raise ValueError(
        f"Animation effect {index}: unknown effect {sorted(item)}. "
        f"Valid: {sorted(VALID_EFFECT_KINDS)}"
    )


def _seconds_to_ms(value, index: int) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValueError(
            f"Animation effect {index}: duration must be a number >= 0, got {value!r}"
        )
    return Duration.seconds(value).ms
