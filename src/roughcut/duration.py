"""Duration — semantic time values for scenes, waits and animation effects.

All durations are stored in milliseconds, the unit the scheduler and the
tween calculator work in. Construct them by meaning rather than by magic
number:

    Duration.milliseconds(600)
    Duration.seconds(0.7)
    Duration.minutes(2)

Durations are never negative: named factories and subtraction clamp at 0.
"""

import math
from functools import total_ordering


_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE


@total_ordering
class Duration:
    """Immutable time quantity in milliseconds."""

    __slots__ = ("_ms",)

    def __init__(self, milliseconds: float = 0):
        object.__setattr__(self, "_ms", max(0.0, float(milliseconds)))

    def __setattr__(self, name, value):
        raise AttributeError("Duration is immutable")

    # ── Factories ────────────────────────────────────────────────

    @classmethod
    def milliseconds(cls, value: float) -> "Duration":
        return cls(value)

    @classmethod
    def seconds(cls, value: float) -> "Duration":
        return cls(value * _MS_PER_SECOND)

    s = seconds

    @classmethod
    def minutes(cls, value: float) -> "Duration":
        return cls(value * _MS_PER_MINUTE)

    m = minutes

    @classmethod
    def hours(cls, value: float) -> "Duration":
        return cls(value * _MS_PER_HOUR)

    h = hours

    @classmethod
    def zero(cls) -> "Duration":
        return cls(0)

    # ── Accessors / conversion ───────────────────────────────────

    @property
    def ms(self) -> float:
        """Raw value in milliseconds."""
        return self._ms

    def to_milliseconds(self) -> float:
        return self._ms

    def to_seconds(self) -> float:
        return self._ms / _MS_PER_SECOND

    def to_minutes(self) -> float:
        return self._ms / _MS_PER_MINUTE

    def to_hours(self) -> float:
        return self._ms / _MS_PER_HOUR

    # ── Arithmetic ───────────────────────────────────────────────

    def __add__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self._ms + other._ms)

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self._ms - other._ms)

    def __mul__(self, factor: float) -> "Duration":
        if isinstance(factor, Duration):
            return NotImplemented
        return Duration(self._ms * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> "Duration":
        if isinstance(factor, Duration):
            return NotImplemented
        if factor == 0:
            raise ZeroDivisionError("Cannot divide duration by zero")
        return Duration(self._ms / factor)

    # ── Comparison ───────────────────────────────────────────────

    def __eq__(self, other) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ms == other._ms

    def __lt__(self, other: "Duration") -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ms < other._ms

    def __hash__(self) -> int:
        return hash(self._ms)

    def __bool__(self) -> bool:
        return self._ms > 0

    def equals(self, other: "Duration", tolerance: float = 1) -> bool:
        """Equality within *tolerance* milliseconds."""
        return abs(self._ms - other._ms) < tolerance

    def is_longer_than(self, other: "Duration") -> bool:
        return self._ms > other._ms

    def is_shorter_than(self, other: "Duration") -> bool:
        return self._ms < other._ms

    # ── Rounding ─────────────────────────────────────────────────

    def round(self) -> "Duration":
        return Duration(round(self._ms))

    def floor(self) -> "Duration":
        return Duration(math.floor(self._ms))

    def ceil(self) -> "Duration":
        return Duration(math.ceil(self._ms))

    def clamp(self, lo: "Duration", hi: "Duration") -> "Duration":
        return Duration(max(lo._ms, min(hi._ms, self._ms)))

    def __repr__(self) -> str:
        if self._ms < _MS_PER_SECOND:
            return f"Duration({self._ms:g}ms)"
        if self._ms < _MS_PER_MINUTE:
            return f"Duration({self.to_seconds():g}s)"
        if self._ms < _MS_PER_HOUR:
            return f"Duration({self.to_minutes():g}m)"
        return f"Duration({self.to_hours():g}h)"


def to_duration(value: "Duration | float | int | None") -> Duration | None:
    """Normalize a Duration or a plain millisecond count.

    Returns None for None so optional scene durations pass through.

    Raises:
        ValueError: Negative or non-numeric input.
    """
    if value is None or isinstance(value, Duration):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a Duration or milliseconds, got {value!r}")
    if value < 0:
        raise ValueError(f"Duration must be >= 0, got {value!r}")
    return Duration(value)
