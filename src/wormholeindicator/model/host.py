"""
Host Interfaces
===============
Everything the indicator consumes from the application that embeds it.

Angles are in radians, clockwise on screen (y grows downwards), and all
coordinates and sizes handed to a Canvas are in pixels.
"""
from __future__ import annotations

from enum import StrEnum
from typing import Protocol


class TextAlign(StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Canvas(Protocol):
    """Drawing primitives of the host's rendering surface."""
    width: float
    height: float

    def rx(self, fraction: float) -> float: ...
    def ry(self, fraction: float) -> float: ...

    def save(self) -> None: ...
    def restore(self) -> None: ...

    def set_alpha(self, alpha: float) -> None: ...
    def set_line_width(self, width: float) -> None: ...
    def set_stroke(self, color: str) -> None: ...
    def set_fill(self, color: str) -> None: ...
    def set_font(self, size: float) -> None: ...

    def clear(self) -> None: ...
    def background(self, color: str) -> None: ...
    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None: ...
    def line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...
    def text(self, message: str, x: float, y: float, align: TextAlign = TextAlign.CENTER) -> None: ...


class AssetTracker(Protocol):
    """Load progress of the host's resources."""

    @property
    def loaded(self) -> int: ...

    @property
    def included(self) -> int: ...

    @property
    def errors(self) -> int: ...


class SoundPlayer(Protocol):
    def play(self, res: str, volume: float) -> bool:
        """Play a sound effect by resource key; False when the key is unknown."""
        ...
