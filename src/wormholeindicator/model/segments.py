"""
Worm Segments
=============
The visual primitives a worm is chained from.

Geometry is stored in base units relative to the indicator anchor, where
one base unit is the shorter side of the viewport. A Frame converts them to
pixels at render time, so segments follow viewport resizes.

Chain rule:
    RingSegment --(angle reached)--> ConnectorSegment --(length reached)--> RingSegment ...

A ring that reaches the outer orbit ends the chain. When a label is queued
on the field, the chain finishes with two LeaderLines and a TextLabel.

Every segment moves forward through its states only. A segment that
reaches its target switches to FADE_OUT before running its spawn action,
so the action runs exactly once.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Callable, Optional

from wormholeindicator.model.host import Canvas, TextAlign

if TYPE_CHECKING:
    from wormholeindicator.model.worms import Worm

TAU = 2 * math.pi

# Orbits and lengths (base units)
R1 = 0.075                      # starting orbit
R2 = 0.2                        # outer orbit, ends the chain
STEP = (R2 - R1) / 15           # connector length unit
STEPV = 2                       # connector length is STEP * [1..STEPV]
LINE_WIDTH = 0.003
FONT_SIZE = 0.04                # status label
LOW_FONT_SIZE = FONT_SIZE * 0.75

# Speeds (base units or radians per second)
CONNECTOR_SPEED = 5.0
RING_SPEED = TAU * 2
LEADER_SPEED = 0.5

# Durations (seconds)
FADE = 1.2
TEXT_FADE_IN = 2.0

# Ring angular targets (radians)
MIN_ANGLE = 0.2
MAX_ANGLE = math.pi / 2
START_ANGLE = 1.0
START_TARGET = 2.0


class SegmentState(IntEnum):
    ACTIVE = 0
    FADE_IN = 1
    FADE_OUT = 2
    STABLE = 5
    DEAD = 11


@dataclass
class Frame:
    """Per-frame render parameters: anchor, scale, phase alpha and color."""
    x: float
    y: float
    base: float
    alpha: float = 1.0
    color: str = "#ffffff"

    def point(self, orbit: float, angle: float) -> tuple[float, float]:
        r = orbit * self.base
        return self.x + math.cos(angle) * r, self.y + math.sin(angle) * r

    def offset(self, dx: float, dy: float) -> tuple[float, float]:
        return self.x + dx * self.base, self.y + dy * self.base


class Segment(ABC):
    """Base class of all segment variants."""

    def __init__(self, worm: Worm) -> None:
        self.worm = worm
        self.state = SegmentState.ACTIVE
        self.time = 0.0
        self.fade = 1.0               # alpha countdown while fading out

    @property
    def alive(self) -> bool:
        return self.state < SegmentState.DEAD

    @property
    def opacity(self) -> float:
        return self.fade if self.state == SegmentState.FADE_OUT else 1.0

    def kill(self) -> None:
        self.state = SegmentState.DEAD

    def _start_fade_out(self) -> None:
        self.state = SegmentState.FADE_OUT
        self.fade = 1.0

    def _advance_fade_out(self, dt: float) -> None:
        self.fade -= dt / FADE
        if self.fade <= 0:
            self.fade = 0.0
            self.kill()

    @abstractmethod
    def advance(self, dt: float) -> None:
        """Advance the animation by `dt` seconds."""

    @abstractmethod
    def render(self, canvas: Canvas, frame: Frame) -> None:
        """Draw the segment in its current state."""


class _OrbitSegment(Segment):
    """A segment whose `shift` grows at a fixed rate until it reaches `target`."""
    SPEED: float = 0.0

    def __init__(self, worm: Worm, orbit: float, angle: float, target: float) -> None:
        super().__init__(worm)
        self.orbit = orbit
        self.angle = angle
        self.target = target
        self.shift = 0.0

    @property
    def dir(self) -> int:
        return self.worm.dir

    def advance(self, dt: float) -> None:
        if not self.alive:
            return

        self.time += dt
        if self.state == SegmentState.FADE_OUT:
            self._advance_fade_out(dt)
            return

        self.shift += self.SPEED * dt
        if self.shift >= self.target:
            self.shift = self.target
            self._start_fade_out()
            self.on_target()

    @abstractmethod
    def on_target(self) -> None:
        """Spawn the next link of the chain."""

    def _stroke(self, canvas: Canvas, frame: Frame) -> None:
        canvas.set_alpha(frame.alpha * self.opacity)
        canvas.set_line_width(LINE_WIDTH * frame.base)
        canvas.set_stroke(frame.color)


class RingSegment(_OrbitSegment):
    """An arc that sweeps around the anchor at a fixed orbit."""
    SPEED = RING_SPEED

    @property
    def end_angle(self) -> float:
        return self.angle + self.dir * self.shift

    def on_target(self) -> None:
        if self.orbit >= R2:
            self.worm.field.finish_chain(self)
            return

        rng = self.worm.field.rng
        length = STEP * int(rng.integers(1, STEPV + 1))
        self.worm.add(ConnectorSegment(self.worm, self.orbit, self.end_angle, length))

    def render(self, canvas: Canvas, frame: Frame) -> None:
        if not self.alive:
            return
        canvas.save()
        self._stroke(canvas, frame)
        start, end = sorted((self.angle, self.end_angle))
        canvas.arc(frame.x, frame.y, self.orbit * frame.base, start, end)
        canvas.restore()


class ConnectorSegment(_OrbitSegment):
    """A radial line that carries the chain to the next orbit."""
    SPEED = CONNECTOR_SPEED

    def on_target(self) -> None:
        rng = self.worm.field.rng
        self.worm.add(RingSegment(
            self.worm,
            self.orbit + self.target,
            self.angle,
            float(rng.uniform(MIN_ANGLE, MAX_ANGLE)),
        ))

    def render(self, canvas: Canvas, frame: Frame) -> None:
        if not self.alive:
            return
        canvas.save()
        self._stroke(canvas, frame)
        x1, y1 = frame.point(self.orbit, self.angle)
        x2, y2 = frame.point(self.orbit + self.shift, self.angle)
        canvas.line(x1, y1, x2, y2)
        canvas.restore()


class LeaderLine(Segment):
    """
    A straight line growing from `start` to `end` (base units from the anchor).

    Used for the stem and the shelf leading from the outer orbit to a label.
    `on_target` runs once when the line is fully drawn.
    """

    def __init__(
        self,
        worm: Worm,
        start: tuple[float, float],
        end: tuple[float, float],
        on_target: Optional[Callable[[LeaderLine], None]] = None,
    ) -> None:
        super().__init__(worm)
        self.start = start
        self.end = end
        self.length = math.dist(start, end)
        self.target_time = self.length / LEADER_SPEED
        self.on_target = on_target

    @property
    def progress(self) -> float:
        if self.state != SegmentState.ACTIVE or self.target_time <= 0:
            return 1.0
        return min(self.time / self.target_time, 1.0)

    def advance(self, dt: float) -> None:
        if not self.alive:
            return
        if self.state == SegmentState.FADE_OUT:
            self._advance_fade_out(dt)
            return

        self.time += dt
        if self.time >= self.target_time:
            self.time = 0.0
            self._start_fade_out()
            if self.on_target:
                self.on_target(self)

    def render(self, canvas: Canvas, frame: Frame) -> None:
        if not self.alive:
            return
        canvas.save()
        canvas.set_alpha(frame.alpha * self.opacity)
        canvas.set_line_width(LINE_WIDTH * frame.base)
        canvas.set_stroke(frame.color)
        (sx, sy), (ex, ey) = self.start, self.end
        p = self.progress
        x1, y1 = frame.offset(sx, sy)
        x2, y2 = frame.offset(sx + (ex - sx) * p, sy + (ey - sy) * p)
        canvas.line(x1, y1, x2, y2)
        canvas.restore()


class TextLabel(Segment):
    """
    A text message placed either at a fraction of the viewport (`anchor`)
    or at an `offset` from the indicator anchor in base units.

    Two lifetimes:
      - stable (duration is None): fades in over `fade_in` seconds and then
        stays at full opacity for good,
      - timed: a triangular envelope over `duration`, rising during the
        first half and falling during the second; the label dies at the end.
    """

    def __init__(
        self,
        worm: Worm,
        message: str,
        *,
        anchor: Optional[tuple[float, float]] = None,
        offset: tuple[float, float] = (0.0, 0.0),
        dir: int = 0,
        duration: Optional[float] = None,
        fade_in: float = TEXT_FADE_IN,
        name: Optional[str] = None,
        font_size: float = LOW_FONT_SIZE,
    ) -> None:
        super().__init__(worm)
        self.state = SegmentState.FADE_IN
        self.message = message
        self.anchor = anchor
        self.offset = offset
        self.dir = dir
        self.duration = duration
        self.fade_in = fade_in
        self.name = name
        self.font_size = font_size

    @property
    def stable(self) -> bool:
        return self.duration is None

    @property
    def align(self) -> TextAlign:
        if self.dir < 0:
            return TextAlign.LEFT
        if self.dir > 0:
            return TextAlign.RIGHT
        return TextAlign.CENTER

    @property
    def opacity(self) -> float:
        if self.stable:
            if self.state == SegmentState.STABLE or self.fade_in <= 0:
                return 1.0
            return min(self.time / self.fade_in, 1.0)

        if self.duration <= 0:
            return 0.0
        a = self.time / self.duration
        if a < 0.5:
            return a * 2
        return max(1 - (a - 0.5) * 2, 0.0)

    def advance(self, dt: float) -> None:
        if not self.alive:
            return
        self.time += dt

        if self.stable:
            if self.state == SegmentState.FADE_IN and self.time >= self.fade_in:
                self.state = SegmentState.STABLE
            return

        if self.time >= self.duration:
            self.kill()
        elif self.state == SegmentState.FADE_IN and self.time >= self.duration / 2:
            self.state = SegmentState.FADE_OUT

    def position(self, canvas: Canvas, frame: Frame) -> tuple[float, float]:
        if self.anchor is not None:
            return canvas.rx(self.anchor[0]), canvas.ry(self.anchor[1])
        return frame.offset(*self.offset)

    def render(self, canvas: Canvas, frame: Frame) -> None:
        if not self.alive:
            return
        canvas.save()
        canvas.set_alpha(frame.alpha * self.opacity)
        canvas.set_font(self.font_size * frame.base)
        canvas.set_fill(frame.color)
        x, y = self.position(canvas, frame)
        canvas.text(self.message, x, y, self.align)
        canvas.restore()
