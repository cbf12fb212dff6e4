"""Timeline — an ordered list of scenes plus a loop flag.

    async def intro(api):
        box = api.rect(80, 120, 100, 100, animate_in=fade_in(600))
        await api.wait(Duration.seconds(1))
        await box.remove(fade_out(500))

    timeline = (
        Timeline()
        .add_scene("intro", Duration.seconds(3), intro)
        .add_scene(Duration.seconds(2), outro, "#ffffff")
        .loop(True)
    )

A scene's duration is optional. Without one the scene runs until it is
advanced by hand (Scheduler.advance_scene); the routine returning does not
end the scene.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable

from .duration import Duration, to_duration


DEFAULT_BACKGROUND = "rgb(63, 63, 70)"

Routine = Callable[..., Awaitable[None] | None]


@dataclass(frozen=True)
class Scene:
    routine: Routine
    name: str | None = None
    duration: Duration | None = None
    background_color: object = DEFAULT_BACKGROUND

    def describe(self, index: int) -> str:
        """Human-readable tag for logs: '2 (intro)' or '2'."""
        return f"{index} ({self.name})" if self.name else str(index)


class Timeline:
    def __init__(self):
        self._scenes: list[Scene] = []
        self._loop = True

    def add_scene(
        self,
        *args,
        name: str | None = None,
        duration=None,
        routine: Routine | None = None,
        background_color=None,
    ) -> "Timeline":
        """Append a scene. Returns the timeline for chaining.

        Positional forms:
            add_scene(name, duration, routine, background_color=None)
            add_scene(duration, routine, background_color=None)

        Durations may be Duration objects or milliseconds; None means the
        scene has no fixed length. A zero duration raises ValueError.
        """
        rest = list(args)
        if rest and isinstance(rest[0], str):
            name = rest.pop(0)
        if rest and (rest[0] is None or isinstance(rest[0], (Duration, int, float))):
            duration = rest.pop(0)
        if rest and callable(rest[0]):
            routine = rest.pop(0)
        if rest and background_color is None:
            background_color = rest.pop(0)
        if rest:
            raise TypeError(f"add_scene() got unexpected arguments: {rest!r}")
        if routine is None:
            raise TypeError("add_scene() requires a choreography routine")

        duration = to_duration(duration)
        if duration is not None and duration.ms <= 0:
            raise ValueError(
                f"Scene duration must be > 0, got {duration!r} (use None for an open-ended scene)"
            )

        self._scenes.append(Scene(
            routine=routine,
            name=name,
            duration=duration,
            background_color=background_color or DEFAULT_BACKGROUND,
        ))
        return self

    def loop(self, enabled: bool = True) -> "Timeline":
        self._loop = enabled
        return self

    @property
    def should_loop(self) -> bool:
        return self._loop

    @property
    def scenes(self) -> tuple[Scene, ...]:
        return tuple(self._scenes)

    def get_total_duration(self) -> Duration:
        """Sum of declared scene durations (open-ended scenes count as 0)."""
        total = Duration.zero()
        for scene in self._scenes:
            if scene.duration is not None:
                total = total + scene.duration
        return total

    def get_scene_count(self) -> int:
        return len(self._scenes)

    def __len__(self) -> int:
        return len(self._scenes)
