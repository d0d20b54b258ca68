import math

import pytest

from wormholeindicator.app.canvas import QPainterCanvas, _qt_angle
from wormholeindicator.model.host import TextAlign

pytestmark = pytest.mark.gui


@pytest.fixture
def image(qapp):
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QImage

    image = QImage(100, 80, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(Qt.GlobalColor.transparent)
    return image


def paint(image, draw):
    from PySide6.QtGui import QPainter

    painter = QPainter(image)
    try:
        canvas = QPainterCanvas(painter, image.width(), image.height())
        draw(canvas)
    finally:
        painter.end()


def test_qt_angle_is_negated_sixteenths():
    assert _qt_angle(0.0) == 0
    assert _qt_angle(math.pi / 2) == -90 * 16
    assert _qt_angle(-math.pi) == 180 * 16


def test_viewport_fractions(image):
    def check(canvas):
        assert canvas.rx(0.5) == 50.0
        assert canvas.ry(0.25) == 20.0

    paint(image, check)


def test_background_fills_viewport(image):
    paint(image, lambda canvas: canvas.background("#ff0000"))
    color = image.pixelColor(10, 70)
    assert (color.red(), color.green(), color.blue(), color.alpha()) == (255, 0, 0, 255)


def test_clear_makes_pixels_transparent(image):
    def draw(canvas):
        canvas.background("#00ff00")
        canvas.clear()

    paint(image, draw)
    assert image.pixelColor(50, 40).alpha() == 0


def test_alpha_applies_to_fills(image):
    def draw(canvas):
        canvas.set_alpha(0.0)
        canvas.background("#ffffff")

    paint(image, draw)
    assert image.pixelColor(50, 40).alpha() == 0


def test_save_restore_keeps_stroke(image):
    def draw(canvas):
        canvas.set_stroke("#123456")
        canvas.save()
        canvas.set_stroke("#abcdef")
        canvas.restore()
        assert canvas._pen.color().name() == "#123456"

    paint(image, draw)


def test_shapes_and_text_draw_something(image):
    def draw(canvas):
        canvas.set_line_width(3)
        canvas.set_stroke("#ffffff")
        canvas.arc(50, 40, 20, 0.0, math.pi)
        canvas.line(0, 0, 99, 79)
        canvas.set_font(12)
        canvas.set_fill("#ffffff")
        canvas.text("", 50, 40)
        canvas.text("42%", 50, 40, TextAlign.CENTER)

    paint(image, draw)
    opaque = [
        image.pixelColor(x, y).alpha()
        for x in range(image.width())
        for y in range(image.height())
    ]
    assert max(opaque) > 0
