"""
Boot Widget
===========
The host side of the frame loop.

A ~60 Hz QTimer calls `evo()` with the measured frame delta and schedules a
repaint; `paintEvent` wraps a QPainter in a QPainterCanvas and calls
`draw()`. The widget also decides when loading is complete (progress at
100% with no error and no alert) and tells the session to fade out.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QElapsedTimer, QTimer, Signal, Slot
from PySide6.QtGui import QPainter, QPaintEvent
from PySide6.QtWidgets import QWidget

from wormholeindicator.app.canvas import QPainterCanvas
from wormholeindicator.model.session import BootContext, BootSession
from wormholeindicator.model.state import BootState

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16
MAX_FRAME_DT = 0.1              # a stalled event loop must not fast-forward the boot


class BootWidget(QWidget):
    boot_completed = Signal()

    def __init__(
        self,
        context: BootContext,
        session: Optional[BootSession] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.context = context
        self.session = session or BootSession()
        self.context.on_complete = self._on_boot_complete

        self._clock = QElapsedTimer()
        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._tick)

        self.setMinimumSize(320, 240)

    def start(self) -> bool:
        started = self.session.reset(self.context)
        self._clock.start()
        self._frame_timer.start()
        return started

    def stop(self) -> None:
        self._frame_timer.stop()

    def loading_complete(self) -> bool:
        assets = self.context.assets
        return (
            self.context.active is self.session
            and self.session.state == BootState.HOLDING
            and not assets.errors
            and not self.context.alert.active
            and self.session.completion(self.context) >= 1.0
        )

    @Slot()
    def _tick(self) -> None:
        dt = min(self._clock.restart() / 1000.0, MAX_FRAME_DT)
        self.session.evo(self.context, dt)
        if self.loading_complete():
            self.session.begin_fade()
        self.update()

    def _on_boot_complete(self, session: BootSession) -> None:
        logger.info("Boot indicator finished; handing over to the host.")
        self.boot_completed.emit()

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            canvas = QPainterCanvas(painter, self.width(), self.height())
            self.session.draw(self.context, canvas)
        finally:
            painter.end()
