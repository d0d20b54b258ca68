"""
QPainter Canvas
===============
Implements the indicator's Canvas protocol on top of a QPainter.

Angles arrive in radians, clockwise on screen. QPainter arcs take
sixteenths of a degree, counter-clockwise, so both the start angle and the
span are negated.
"""
from __future__ import annotations

import math

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QPainter, QPen

from wormholeindicator.model.host import TextAlign

DEFAULT_FONT_FAMILY = "Sans Serif"


def _qt_angle(radians: float) -> int:
    return int(round(-math.degrees(radians) * 16))


class QPainterCanvas:
    def __init__(
        self,
        painter: QPainter,
        width: float,
        height: float,
        font_family: str = DEFAULT_FONT_FAMILY,
    ) -> None:
        self.painter = painter
        self.width = float(width)
        self.height = float(height)
        self.font_family = font_family

        self._pen = QPen(QColor("#ffffff"))
        self._pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        self._fill = QColor("#ffffff")
        self._font = QFont(font_family)
        self._stack: list[tuple[QPen, QColor, QFont]] = []

        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)

    # ---- viewport ----

    def rx(self, fraction: float) -> float:
        return self.width * fraction

    def ry(self, fraction: float) -> float:
        return self.height * fraction

    # ---- state ----

    def save(self) -> None:
        self.painter.save()
        self._stack.append((QPen(self._pen), QColor(self._fill), QFont(self._font)))

    def restore(self) -> None:
        self.painter.restore()
        if self._stack:
            self._pen, self._fill, self._font = self._stack.pop()

    def set_alpha(self, alpha: float) -> None:
        self.painter.setOpacity(max(0.0, min(alpha, 1.0)))

    def set_line_width(self, width: float) -> None:
        self._pen.setWidthF(max(width, 1.0))

    def set_stroke(self, color: str) -> None:
        self._pen.setColor(QColor(color))

    def set_fill(self, color: str) -> None:
        self._fill = QColor(color)

    def set_font(self, size: float) -> None:
        self._font = QFont(self.font_family)
        self._font.setPixelSize(max(1, int(round(size))))

    # ---- drawing ----

    def clear(self) -> None:
        mode = self.painter.compositionMode()
        self.painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        self.painter.fillRect(QRectF(0, 0, self.width, self.height), Qt.GlobalColor.transparent)
        self.painter.setCompositionMode(mode)

    def background(self, color: str) -> None:
        self.painter.fillRect(QRectF(0, 0, self.width, self.height), QColor(color))

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        self.painter.setPen(self._pen)
        self.painter.setBrush(Qt.BrushStyle.NoBrush)
        rect = QRectF(x - radius, y - radius, radius * 2, radius * 2)
        self.painter.drawArc(rect, _qt_angle(start), _qt_angle(end - start))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.painter.setPen(self._pen)
        self.painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    def text(self, message: str, x: float, y: float, align: TextAlign = TextAlign.CENTER) -> None:
        if not message:
            return
        metrics = QFontMetricsF(self._font)
        width = metrics.horizontalAdvance(message)
        if align == TextAlign.CENTER:
            x -= width / 2
        elif align == TextAlign.RIGHT:
            x -= width

        # vertically centered on y
        baseline = y + (metrics.ascent() - metrics.descent()) / 2
        self.painter.setFont(self._font)
        self.painter.setPen(QPen(self._fill))
        self.painter.drawText(QPointF(x, baseline), message)
