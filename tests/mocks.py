"""
Test doubles for the host interfaces: a canvas that records every call,
asset counters and a sound player that remembers what it played.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from wormholeindicator.model.host import TextAlign


class RecordingCanvas:
    def __init__(self, width: float = 800, height: float = 600) -> None:
        self.width = width
        self.height = height
        self.calls: list[tuple] = []
        self.alpha = 1.0

    def named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def texts(self) -> list[str]:
        return [call[1] for call in self.named("text")]

    def rx(self, fraction: float) -> float:
        return self.width * fraction

    def ry(self, fraction: float) -> float:
        return self.height * fraction

    def save(self) -> None:
        self.calls.append(("save",))

    def restore(self) -> None:
        self.calls.append(("restore",))

    def set_alpha(self, alpha: float) -> None:
        self.alpha = alpha
        self.calls.append(("alpha", alpha))

    def set_line_width(self, width: float) -> None:
        self.calls.append(("line_width", width))

    def set_stroke(self, color: str) -> None:
        self.calls.append(("stroke", color))

    def set_fill(self, color: str) -> None:
        self.calls.append(("fill", color))

    def set_font(self, size: float) -> None:
        self.calls.append(("font", size))

    def clear(self) -> None:
        self.calls.append(("clear",))

    def background(self, color: str) -> None:
        self.calls.append(("background", color, self.alpha))

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        self.calls.append(("arc", x, y, radius, start, end))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.calls.append(("line", x1, y1, x2, y2))

    def text(self, message: str, x: float, y: float, align: TextAlign = TextAlign.CENTER) -> None:
        self.calls.append(("text", message, x, y, align, self.alpha))


@dataclass
class FakeAssets:
    loaded: int = 0
    included: int = 10
    errors: int = 0


@dataclass
class FakeSound:
    known: set[str] = field(default_factory=set)
    played: list[tuple[str, float]] = field(default_factory=list)

    def play(self, res: str, volume: float) -> bool:
        if res not in self.known:
            return False
        self.played.append((res, volume))
        return True
