"""
Worms and the Worm Arena
========================
A worm is a reusable chain of segments. The arena keeps every worm ever
allocated in a list of slots; the slot index of a worm that dies is pushed
onto a free list and the next spawn revives it, so a warm pool never grows
past the number of worms visible at once.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, TypeVar

from wormholeindicator.model.host import Canvas
from wormholeindicator.model.segments import Frame, Segment

if TYPE_CHECKING:
    from wormholeindicator.model.field import WormField

_S = TypeVar("_S", bound=Segment)


class Worm:
    def __init__(self, field: WormField, index: int) -> None:
        self.field = field
        self.index = index
        self.segments: list[Segment] = []
        self.dir: int = 1
        self.alive: bool = False

    def revive(self, dir: int) -> None:
        self.segments = []
        self.dir = dir
        self.alive = True

    def kill(self) -> None:
        self.alive = False
        self.segments = []

    def add(self, segment: _S) -> _S:
        self.segments.append(segment)
        return segment

    def advance(self, dt: float) -> None:
        # segments spawned during this pass start moving on the next one
        for segment in list(self.segments):
            segment.advance(dt)

        live = [segment for segment in self.segments if segment.alive]
        if not live:
            self.kill()
        else:
            self.segments = live

    def render(self, canvas: Canvas, frame: Frame) -> None:
        for segment in self.segments:
            segment.render(canvas, frame)


class WormArena:
    def __init__(self) -> None:
        self._slots: list[Worm] = []
        self._free: list[int] = []

    def __len__(self) -> int:
        """Number of allocated slots, dead or alive."""
        return len(self._slots)

    def __iter__(self) -> Iterator[Worm]:
        """Live worms."""
        return (worm for worm in self._slots if worm.alive)

    @property
    def live_count(self) -> int:
        return sum(1 for _ in self)

    @property
    def free_count(self) -> int:
        return len(self._free)

    def spawn(self, field: WormField, dir: int) -> Worm:
        if self._free:
            worm = self._slots[self._free.pop()]
        else:
            worm = Worm(field, len(self._slots))
            self._slots.append(worm)
        worm.revive(dir)
        return worm

    def advance(self, dt: float) -> None:
        for worm in list(self._slots):
            if not worm.alive:
                continue
            worm.advance(dt)
            if not worm.alive:
                self._free.append(worm.index)

    def render(self, canvas: Canvas, frame: Frame) -> None:
        for worm in self:
            worm.render(canvas, frame)

    def clear(self) -> None:
        self._slots.clear()
        self._free.clear()
