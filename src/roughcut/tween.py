"""Tween calculator — per-frame opacity and offset for a shape.

Pure and stateless: called once per live shape per render tick with the
shape's lifecycle snapshot and the frame timestamp. Every value is derived
from `now - added_at` or `now - removed_at`, never from an accumulator, so a
frame can be recomputed for any timestamp in any order.

Entrance (state entering, entrance spec present), per effect:
    progress = clamp(elapsed / duration, 0, 1)
    fade   → opacity *= progress
    slide  → offset  += full_offset * (1 - progress)

Exit (removal recorded, exit spec present):
    elapsed >= spec duration → should_skip (shape is eligible for purge)
    fade   → opacity *= 1 - progress
    slide  → offset  += full_offset * progress

Fades multiply and slides sum, so a spec may hold several of each.
"""

from dataclasses import dataclass

from .animate import AnimationSpec
from .position import Position
from .shapes import Shape, ShapeState


@dataclass(frozen=True)
class Transform:
    opacity: float = 1.0
    offset: Position = Position(0, 0)
    should_skip: bool = False


IDENTITY = Transform()
SKIP = Transform(opacity=0.0, should_skip=True)


@dataclass(frozen=True)
class RemovalInfo:
    """Pending-removal bookkeeping consulted ahead of the shape's own state."""

    removed_at: float
    animate_out: AnimationSpec | None


def _progress(elapsed: float, duration: float) -> float:
    if duration <= 0:
        return 1.0
    return max(0.0, min(1.0, elapsed / duration))


def entrance_transform(elapsed: float, spec: AnimationSpec | None) -> Transform:
    """Transform of an entering shape *elapsed* ms after it was added."""
    if not spec:
        return IDENTITY
    opacity = 1.0
    offset = Position.zero()
    for effect in spec:
        progress = _progress(elapsed, effect.duration)
        if effect.kind == "fade":
            opacity *= progress
        else:
            offset = offset + effect.displacement() * (1 - progress)
    return Transform(opacity, offset)


def exit_transform(elapsed: float, spec: AnimationSpec | None) -> Transform:
    """Transform of an exiting shape *elapsed* ms after removal was requested."""
    if not spec:
        return IDENTITY
    if exit_complete(elapsed, spec):
        return SKIP
    opacity = 1.0
    offset = Position.zero()
    for effect in spec:
        progress = _progress(elapsed, effect.duration)
        if effect.kind == "fade":
            opacity *= 1 - progress
        else:
            offset = offset + effect.displacement() * progress
    return Transform(opacity, offset)


def entrance_complete(elapsed: float, spec: AnimationSpec | None) -> bool:
    return not spec or elapsed >= spec.duration


def exit_complete(elapsed: float, spec: AnimationSpec | None) -> bool:
    return not spec or elapsed >= spec.duration


def compute_transform(
    shape: Shape,
    now: float,
    removal: RemovalInfo | None = None,
) -> Transform:
    """Compute the transform for *shape* at time *now* (ms).

    Args:
        shape: Live shape (only lifecycle fields are read).
        now: Frame timestamp in milliseconds.
        removal: Pending-removal record for this shape, if any. Takes
            precedence over shape.state so a shape stops drawing the
            moment removal is requested.

    Returns:
        Transform with opacity, offset and should_skip.
    """
    if removal is not None:
        return exit_transform(now - removal.removed_at, removal.animate_out)

    if shape.state is ShapeState.ENTERING and shape.animate_in:
        return entrance_transform(now - shape.added_at, shape.animate_in)

    if (
        shape.state is ShapeState.EXITING
        and shape.removed_at is not None
        and shape.animate_out
    ):
        return exit_transform(now - shape.removed_at, shape.animate_out)

    return IDENTITY
