"""
Simulated Asset Loader
Stands in for a real resource loader in the demo: loads one asset per
timer tick and can be told to fail at a given asset to show the error label.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

logger = logging.getLogger(__name__)


class SimulatedAssetLoader(QObject):
    done = Signal()

    def __init__(
        self,
        included: int = 40,
        interval_ms: int = 60,
        fail_at: Optional[int] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._included = included
        self._loaded = 0
        self._errors = 0
        self._fail_at = fail_at

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._load_next)

    @property
    def loaded(self) -> int:
        return self._loaded

    @property
    def included(self) -> int:
        return self._included

    @property
    def errors(self) -> int:
        return self._errors

    def start(self) -> None:
        self._timer.start()

    @Slot()
    def _load_next(self) -> None:
        if self._fail_at is not None and self._loaded == self._fail_at:
            self._errors += 1
            self._timer.stop()
            logger.error(f"Simulated failure while loading asset {self._loaded + 1}/{self._included}.")
            return

        self._loaded = min(self._loaded + 1, self._included)
        if self._loaded >= self._included:
            self._timer.stop()
            logger.info(f"All {self._included} simulated assets loaded.")
            self.done.emit()
