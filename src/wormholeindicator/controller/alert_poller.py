"""
Alert Polling (Threading)
=========================
This module polls the regional alert service in the background.

Why is this file needed?
------------------------
1. Responsiveness: An HTTP request on the GUI thread would stall the
   animation. Each poll runs in a QThread worker.
2. Signals: The worker hands its result back through a Qt signal, which is
   delivered on the GUI thread. The slot only appends the result to the
   BootContext inbox; the next frame drains it.
3. Best effort: A failed poll is logged and dropped. There is no retry
   other than the next tick of the timer.
4. Teardown: A QThread destroyed while running aborts the process, so
   `stop()` waits for the request in flight. The demo calls it when the
   application is about to quit.

Classes:
    AlertFetchWorker: Runs one GET request and evaluates the payload.
    AlertPoller: Cancellable 5 second timer that starts the workers.
"""
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

from PySide6.QtCore import QObject, QThread, QTimer, Signal, Slot

from wormholeindicator.model.alerts import AlertUpdate, evaluate
from wormholeindicator.model.session import BootContext

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 5000
REQUEST_TIMEOUT = 4.0


def fetch_regions(url: str, timeout: float = REQUEST_TIMEOUT) -> dict[str, Any]:
    """GET the region status map."""
    request = urllib.request.Request(url, headers={"Accept": "application/json"}, method="GET")
    with urllib.request.urlopen(request, timeout=timeout) as response:
        payload = json.loads(response.read().decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}.")
    return payload


class AlertFetchWorker(QThread):
    fetched = Signal(object)        # AlertUpdate
    failed = Signal(str)

    def __init__(self, url: str, war: str, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.url = url
        self.war = war

    def run(self) -> None:
        try:
            regions = fetch_regions(self.url)
            if self.isInterruptionRequested():
                return
            self.fetched.emit(evaluate(regions, self.war))
        except (urllib.error.URLError, OSError, ValueError) as e:
            logger.debug(f"Alert poll failed: {e}")
            self.failed.emit(str(e))


class AlertPoller(QObject):
    """Polls while monitoring is enabled; results land in `context.inbox`."""

    def __init__(self, context: BootContext, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.context = context
        self.url = context.options.war_endpoint
        self.war = context.options.war
        self._worker: Optional[AlertFetchWorker] = None

        self._timer = QTimer(self)
        self._timer.setInterval(POLL_INTERVAL_MS)
        self._timer.timeout.connect(self.poll)

    @property
    def enabled(self) -> bool:
        return bool(self.war)

    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> bool:
        if not self.enabled:
            return False
        logger.info(f"Monitoring air raid alerts for: {self.war}")
        self.poll()
        self._timer.start()
        return True

    @Slot()
    def stop(self) -> None:
        """Cancel the timer and block until an in-flight request has returned."""
        self._timer.stop()
        worker = self._worker
        if worker is not None and worker.isRunning():
            logger.debug("Waiting for the running alert poll to finish.")
            worker.requestInterruption()
            worker.wait()

    @Slot()
    def poll(self) -> None:
        # skip the tick while the previous request is still in flight
        if self._worker is not None and self._worker.isRunning():
            return
        worker = AlertFetchWorker(self.url, self.war, self)
        worker.fetched.connect(self._on_fetched)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker
        worker.start()

    @Slot(object)
    def _on_fetched(self, update: AlertUpdate) -> None:
        self.context.post(update)

    @Slot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if worker is self._worker:
            self._worker = None
        if worker is not None:
            worker.deleteLater()
