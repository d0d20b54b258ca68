"""
Worm Field
==========
The segment animation system: spawns worms as a Poisson-like process,
advances them, renders them, and finishes chains that reach the outer orbit
with any label waiting in the queue.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from wormholeindicator.model.host import Canvas
from wormholeindicator.model.segments import (
    R1, R2, START_ANGLE, START_TARGET, TEXT_FADE_IN,
    Frame, LeaderLine, RingSegment, TextLabel,
)
from wormholeindicator.model.worms import Worm, WormArena

logger = logging.getLogger(__name__)

FQ = 5.0                        # worm births per second
STEM_MIN = 0.1
STEM_MAX = 0.2
SHELF_MIN = 0.05                # shelf length as a fraction of viewport width
SHELF_MAX = 0.4
LABEL_GAP = 0.01


class WormField:
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
        self.arena = WormArena()
        self.pending_labels: list[str] = []
        self.outer_ring_worms = 0
        self.aspect = 1.0       # viewport width in base units, updated on render

    def clear(self) -> None:
        self.arena.clear()
        self.pending_labels.clear()
        self.outer_ring_worms = 0

    # ---- spawning ----

    def queue_label(self, message: str) -> None:
        """Queue a message for the next chain that reaches the outer orbit."""
        self.pending_labels.append(message)

    def spawn_worm(self) -> Worm:
        dir = 1 if self.rng.random() < 0.5 else -1
        worm = self.arena.spawn(self, dir)
        worm.add(RingSegment(worm, R1, START_ANGLE, START_TARGET))
        return worm

    def spawn_label(self, message: str, **kwargs) -> TextLabel:
        """Spawn a free-standing label in a worm of its own."""
        worm = self.arena.spawn(self, 1)
        return worm.add(TextLabel(worm, message, **kwargs))

    def find_label(self, name: str) -> Optional[TextLabel]:
        for worm in self.arena:
            for segment in worm.segments:
                if isinstance(segment, TextLabel) and segment.alive and segment.name == name:
                    return segment
        return None

    def finish_chain(self, ring: RingSegment) -> None:
        """End a chain at the outer orbit: stem, shelf and label when one is queued."""
        self.outer_ring_worms += 1
        if not self.pending_labels:
            return

        message = self.pending_labels.pop()
        worm = ring.worm
        a = ring.angle
        reach = ring.orbit + float(self.rng.uniform(STEM_MIN, STEM_MAX))
        start = (math.cos(a) * ring.orbit, math.sin(a) * ring.orbit)
        end = (math.cos(a) * reach, math.sin(a) * reach)

        def spawn_shelf(stem: LeaderLine) -> None:
            length = float(self.rng.uniform(SHELF_MIN * self.aspect, SHELF_MAX * self.aspect - R2))
            if stem.start[0] > stem.end[0]:
                length = -length
            x, y = stem.end

            def spawn_text(shelf: LeaderLine) -> None:
                # text sits past the shelf end, aligned away from the line
                if length < 0:
                    dir, gap = 1, -LABEL_GAP
                else:
                    dir, gap = -1, LABEL_GAP
                ex, ey = shelf.end
                worm.add(TextLabel(
                    worm, message, offset=(ex + gap, ey), dir=dir, fade_in=TEXT_FADE_IN,
                ))

            worm.add(LeaderLine(worm, stem.end, (x + length, y), spawn_text))

        worm.add(LeaderLine(worm, start, end, spawn_shelf))
        logger.debug(f"Chain {self.outer_ring_worms} leads to label '{message}'.")

    # ---- frame ----

    def advance(self, dt: float) -> None:
        self.arena.advance(dt)
        if self.rng.random() < FQ * dt:
            self.spawn_worm()

    def render(self, canvas: Canvas, frame: Frame) -> None:
        if frame.base > 0:
            self.aspect = canvas.width / frame.base
        self.arena.render(canvas, frame)
