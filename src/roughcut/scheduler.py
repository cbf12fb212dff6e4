"""Scene scheduler — cooperative execution of choreography routines.

Choreography routines are plain `async def` functions. They are not run on
an asyncio loop: the Scheduler drives them itself by sending into the
coroutine, and a routine may only suspend on the two awaitables this
package hands out:

  - api.wait(duration)      resume once `duration` has elapsed
  - handle.remove(...)      resume once the shape's exit has finished

Everything time-based is an entry in one heap keyed by (due_ms, sequence):
routine wake-ups, scene end timers, entrance completions (entering →
visible) and exit completions (purge + resolve the removal's Completion).
advance_to(now) pops entries in order and sets the scheduler clock to each
entry's due time while it runs, so a shape added after `await
api.wait(1000)` is stamped exactly one second after the scene started,
whatever the render cadence.

Scene lifecycle:
  enter(i)   registry cleared (ids restart at 1), end timer armed if the
             scene declares a duration, routine run to its first suspension
  advance    i+1, or 0 when looping, or halt; the previous routine is
             closed and every shape dropped, including exiting ones
  halt       nothing runs any more, the stage stays empty

A routine that raises is logged with its scene tag and abandoned; the
scene's end timer still fires.
"""

import heapq
import inspect
import itertools
import logging
from typing import Callable

from .animate import AnimationSpec, to_animation_spec
from .duration import to_duration
from .registry import (
    Completion,
    PendingRemoval,
    PendingRemovals,
    ShapeHandle,
    ShapeKey,
    ShapeRegistry,
)
from .shapes import Shape, ShapeState, to_descriptor
from .timeline import Scene, Timeline
from .tween import RemovalInfo


log = logging.getLogger(__name__)


# ── Awaitables and tasks ─────────────────────────────────────────


class Sleep:
    """Awaitable returned by wait(); yields itself to the scheduler."""

    __slots__ = ("ms",)

    def __init__(self, ms: float):
        self.ms = ms

    def __await__(self):
        yield self


class SceneTask:
    """A running choreography routine bound to one scene entry."""

    def __init__(self, coro, scene: Scene, index: int, epoch: int):
        self.coro = coro
        self.scene = scene
        self.index = index
        self.epoch = epoch
        self.closed = False
        self.finished = False

    @property
    def tag(self) -> str:
        return self.scene.describe(self.index)


async def _await_result(awaitable):
    await awaitable


# ── Scheduler ────────────────────────────────────────────────────


class Scheduler:
    """Owns the scene cursor, the registry and the continuation queue.

    Args:
        timeline: Scenes to play.
        api_factory: Builds the capability object handed to each routine.
            Called with the scheduler; defaults to a bare SceneApi.
    """

    def __init__(self, timeline: Timeline, api_factory: Callable | None = None):
        self.timeline = timeline
        self.registry = ShapeRegistry()
        self.removals = PendingRemovals()
        self.now = 0.0
        self.scene_index: int | None = None
        self.scene_started_at = 0.0
        self.started = False
        self.halted = False

        if api_factory is None:
            from .scene_api import SceneApi
            api_factory = SceneApi
        self._api_factory = api_factory

        self._queue: list = []
        self._sequence = itertools.count()
        self._epoch = 0
        self._task: SceneTask | None = None
        self._yielded: list[SceneTask] = []

    # ── Clock ────────────────────────────────────────────────────

    def start(self, now: float = 0.0) -> None:
        """Enter the first scene at time *now* (ms)."""
        if self.started:
            raise RuntimeError("Scheduler already started")
        self.started = True
        self.now = now
        if not self.timeline.scenes:
            self.halted = True
            log.info("Timeline has no scenes, nothing to play")
            return
        self._enter_scene(0)

    def advance_to(self, now: float) -> None:
        """Run everything due up to and including *now* (ms).

        Raises:
            ValueError: *now* is earlier than the scheduler clock.
        """
        if not self.started:
            self.start(0)
        if now < self.now:
            raise ValueError(
                f"Time went backwards: {now:.1f}ms < {self.now:.1f}ms"
            )
        while self._queue and self._queue[0][0] <= now:
            due, _, callback, args = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback(*args)
        self.now = now

        # Zero-length waits resume on the next advance, not this one.
        yielded, self._yielded = self._yielded, []
        for task in yielded:
            self._schedule(now, self._step, task)

    def _schedule(self, due: float, callback, *args) -> None:
        heapq.heappush(self._queue, (due, next(self._sequence), callback, args))

    @property
    def pending_events(self) -> int:
        return len(self._queue)

    # ── Scenes ───────────────────────────────────────────────────

    @property
    def current_scene(self) -> Scene | None:
        if self.scene_index is None or self.halted:
            return None
        return self.timeline.scenes[self.scene_index]

    def advance_scene(self) -> None:
        """Move to the next scene (wrapping when looping, else halting)."""
        if not self.started or self.halted:
            return
        count = self.timeline.get_scene_count()
        next_index = self.scene_index + 1
        if next_index < count:
            self._enter_scene(next_index)
        elif self.timeline.should_loop:
            self._enter_scene(0)
        else:
            self._halt()

    def _enter_scene(self, index: int) -> None:
        self._close_task()
        self.registry.clear_all()
        self._epoch += 1
        self.scene_index = index
        self.scene_started_at = self.now

        scene = self.timeline.scenes[index]
        log.info("Entering scene %s at %.0fms", scene.describe(index), self.now)

        if scene.duration is not None:
            self._schedule(self.now + scene.duration.ms, self._on_scene_end, self._epoch)

        api = self._api_factory(self)
        try:
            result = scene.routine(api)
        except Exception:
            log.error("Error in scene %s", scene.describe(index), exc_info=True)
            return
        if result is None:
            return
        if not inspect.iscoroutine(result):
            if not inspect.isawaitable(result):
                return
            result = _await_result(result)

        self._task = SceneTask(result, scene, index, self._epoch)
        self._step(self._task)

    def _on_scene_end(self, epoch: int) -> None:
        if epoch != self._epoch or self.halted:
            return
        self.advance_scene()

    def _halt(self) -> None:
        self._close_task()
        self.registry.clear_all()
        self._epoch += 1
        self.halted = True
        log.info("Timeline finished at %.0fms", self.now)

    def _close_task(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.closed:
            return
        task.closed = True
        try:
            task.coro.close()
        except Exception:
            log.error("Error closing scene %s", task.tag, exc_info=True)

    # ── Routine execution ────────────────────────────────────────

    def _step(self, task: SceneTask) -> None:
        if task.closed:
            return
        try:
            request = task.coro.send(None)
        except StopIteration:
            task.closed = task.finished = True
            log.debug("Scene %s routine finished at %.0fms", task.tag, self.now)
            return
        except Exception:
            task.closed = True
            log.error("Error in scene %s", task.tag, exc_info=True)
            return

        if isinstance(request, Sleep):
            if request.ms <= 0:
                self._yielded.append(task)
            else:
                self._schedule(self.now + request.ms, self._step, task)
        elif isinstance(request, Completion):
            request.add_done_callback(
                lambda _done: self._schedule(self.now, self._step, task)
            )
        else:
            task.closed = True
            task.coro.close()
            log.error(
                "Error in scene %s: routine awaited unsupported object %r "
                "(only api.wait() and handle.remove() may be awaited)",
                task.tag, request,
            )

    def wait(self, duration) -> Sleep:
        return Sleep(to_duration(duration).ms)

    # ── Shapes ───────────────────────────────────────────────────

    def lookup(self, key: ShapeKey) -> Shape | None:
        generation, shape_id = key
        if generation != self.registry.generation:
            return None
        return self.registry.get(shape_id)

    def add_shape(self, descriptor) -> ShapeHandle:
        """Register a shape now and return its handle."""
        shape = self.registry.add(to_descriptor(descriptor), self.now)
        key = (self.registry.generation, shape.id)
        if shape.state is ShapeState.ENTERING:
            self._schedule(self.now + shape.animate_in.duration, self._promote, key)
        return ShapeHandle(self, key[0], shape.id, shape.anchor)

    def clear_shapes(self) -> None:
        self.registry.clear_all()

    def _promote(self, key: ShapeKey) -> None:
        shape = self.lookup(key)
        if shape is not None and shape.mark_visible():
            log.debug("Shape %d visible at %.0fms", shape.id, self.now)

    def request_removal(
        self, key: ShapeKey, effect_override: AnimationSpec | None = None,
    ) -> Completion:
        """Start a shape's exit. See ShapeHandle.remove().

        A second request for a shape already exiting is a no-op that
        returns the first request's Completion. Shapes that are already
        gone yield a resolved Completion.
        """
        pending = self.removals.get(key)
        if pending is not None:
            return pending.completion
        shape = self.lookup(key)
        if shape is None:
            return Completion.resolved()

        if effect_override is not None:
            exit_spec = to_animation_spec(effect_override)
        else:
            exit_spec = shape.animate_out
        shape.mark_exiting(self.now, exit_spec)

        completion = Completion()
        if not exit_spec or exit_spec.duration <= 0:
            self.registry.remove(shape.id)
            completion.resolve()
            return completion

        due = self.now + exit_spec.duration
        self.removals.add(key, PendingRemoval(
            info=RemovalInfo(self.now, exit_spec),
            completion=completion,
            due=due,
        ))
        self._schedule(due, self._purge, key)
        return completion

    def _purge(self, key: ShapeKey) -> None:
        entry = self.removals.pop(key)
        generation, shape_id = key
        if generation == self.registry.generation:
            self.registry.remove(shape_id)
        log.debug("Shape %d purged at %.0fms", shape_id, self.now)
        if entry is not None:
            entry.completion.resolve()

    def removal_info(self, shape: Shape) -> RemovalInfo | None:
        """Pending-removal record for a live shape, if any."""
        return self.removals.info((self.registry.generation, shape.id))
