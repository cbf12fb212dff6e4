"""Shape registry, removal bookkeeping and the handle protocol.

ShapeRegistry owns the live shapes of one scene generation: an arena
id → Shape kept in insertion order (insertion order is paint order) plus a
monotonic id counter. clear_all() wipes both and bumps `generation`, so a
(generation, id) pair names one shape for the lifetime of the process even
though ids restart at 1 on every scene.

PendingRemovals lives beside the registry, not inside it. clear_all() does
not touch it: a removal in flight when the scene switches still resolves
its Completion on schedule.

ShapeHandle is what choreography routines get back from a factory. It
holds only (generation, id) and a back-reference to the scheduler; it never
owns the Shape.
"""

from dataclasses import dataclass
from typing import Callable, Iterator

from .animate import AnimationSpec
from .position import Position
from .shapes import Shape, ShapeDescriptor
from .tween import RemovalInfo


ShapeKey = tuple[int, int]  # (generation, id)


# ── Completion ───────────────────────────────────────────────────


class Completion:
    """One-shot completion signal, awaitable from a choreography routine.

    The scheduler parks a routine that awaits an unresolved Completion and
    resumes it once resolve() is called.
    """

    __slots__ = ("done", "_callbacks")

    def __init__(self, done: bool = False):
        self.done = done
        self._callbacks: list[Callable[["Completion"], None]] = []

    @classmethod
    def resolved(cls) -> "Completion":
        return cls(done=True)

    def resolve(self) -> None:
        if self.done:
            return
        self.done = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def add_done_callback(self, callback: Callable[["Completion"], None]) -> None:
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def __await__(self):
        while not self.done:
            yield self

    def __repr__(self) -> str:
        return f"Completion(done={self.done})"


# ── Registry ─────────────────────────────────────────────────────


class ShapeRegistry:
    def __init__(self):
        self._shapes: dict[int, Shape] = {}
        self._next_id = 1
        self.generation = 0

    def add(self, descriptor: ShapeDescriptor, now: float) -> Shape:
        """Assign the next id, stamp added_at and store the shape."""
        shape = Shape.create(self._next_id, descriptor, now)
        self._next_id += 1
        self._shapes[shape.id] = shape
        return shape

    def remove(self, shape_id: int) -> Shape | None:
        """Physically delete a shape. Returns it, or None if absent."""
        return self._shapes.pop(shape_id, None)

    def clear_all(self) -> None:
        """Drop every shape, reset the id counter and start a new generation."""
        self._shapes.clear()
        self._next_id = 1
        self.generation += 1

    def get(self, shape_id: int) -> Shape | None:
        return self._shapes.get(shape_id)

    def snapshot(self) -> list[Shape]:
        """Shapes in paint order, detached from later mutation."""
        return list(self._shapes.values())

    def ids(self) -> list[int]:
        return list(self._shapes)

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._shapes)

    def __contains__(self, shape_id: int) -> bool:
        return shape_id in self._shapes

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.snapshot())


# ── Pending removals ─────────────────────────────────────────────


@dataclass
class PendingRemoval:
    info: RemovalInfo
    completion: Completion
    due: float


class PendingRemovals:
    def __init__(self):
        self._entries: dict[ShapeKey, PendingRemoval] = {}

    def add(self, key: ShapeKey, entry: PendingRemoval) -> None:
        self._entries[key] = entry

    def get(self, key: ShapeKey) -> PendingRemoval | None:
        return self._entries.get(key)

    def info(self, key: ShapeKey) -> RemovalInfo | None:
        entry = self._entries.get(key)
        return entry.info if entry else None

    def pop(self, key: ShapeKey) -> PendingRemoval | None:
        return self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: ShapeKey) -> bool:
        return key in self._entries


# ── Handle ───────────────────────────────────────────────────────


class ShapeHandle:
    """Capability returned for each created shape.

    remove() starts the exit animation (optionally with a different exit
    spec) and returns a Completion that resolves once the exit duration has
    elapsed and the shape is gone from the registry. get_position() returns
    the shape's anchor, or the last one seen once the shape is gone.
    """

    def __init__(self, controller, generation: int, shape_id: int, anchor: Position):
        self._controller = controller
        self.generation = generation
        self.id = shape_id
        self._last_position = anchor

    @property
    def key(self) -> ShapeKey:
        return (self.generation, self.id)

    def remove(self, effect_override: AnimationSpec | None = None) -> Completion:
        return self._controller.request_removal(self.key, effect_override)

    def get_position(self) -> Position:
        shape = self._controller.lookup(self.key)
        if shape is not None:
            self._last_position = shape.anchor
        return self._last_position

    @property
    def alive(self) -> bool:
        return self._controller.lookup(self.key) is not None

    def __repr__(self) -> str:
        return f"ShapeHandle(generation={self.generation}, id={self.id})"
