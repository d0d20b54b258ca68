import io
import threading
import urllib.error

import pytest

from tests.mocks import FakeAssets
from wormholeindicator.controller import alert_poller
from wormholeindicator.controller.alert_poller import (
    AlertFetchWorker, AlertPoller, fetch_regions,
)
from wormholeindicator.model.alerts import AlertUpdate
from wormholeindicator.model.session import BootContext
from wormholeindicator.model.settings import BootOptions

pytestmark = pytest.mark.gui

PAYLOAD = {"12": {"name": "Lviv", "alertnow": True}}


def test_fetch_regions_parses_object(monkeypatch):
    def fake_urlopen(request, timeout):
        assert request.get_header("Accept") == "application/json"
        return io.BytesIO(b'{"12": {"name": "Lviv", "alertnow": true}}')

    monkeypatch.setattr(alert_poller.urllib.request, "urlopen", fake_urlopen)
    assert fetch_regions("http://example.invalid/war") == PAYLOAD


def test_fetch_regions_rejects_non_object(monkeypatch):
    monkeypatch.setattr(
        alert_poller.urllib.request, "urlopen", lambda request, timeout: io.BytesIO(b"[1, 2]"),
    )
    with pytest.raises(ValueError):
        fetch_regions("http://example.invalid/war")


def test_worker_emits_evaluated_update(qapp, monkeypatch):
    monkeypatch.setattr(alert_poller, "fetch_regions", lambda url: PAYLOAD)
    worker = AlertFetchWorker("http://example.invalid/war", "lviv")
    received = []
    worker.fetched.connect(received.append)

    worker.run()
    [update] = received
    assert update.alert_now
    assert update.lead.name == "Lviv"


def test_worker_reports_failure(qapp, monkeypatch):
    def unreachable(url):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(alert_poller, "fetch_regions", unreachable)
    worker = AlertFetchWorker("http://example.invalid/war", "lviv")
    fetched, failed = [], []
    worker.fetched.connect(fetched.append)
    worker.failed.connect(failed.append)

    worker.run()
    assert fetched == []
    assert len(failed) == 1
    assert "connection refused" in failed[0]


def test_fetched_update_lands_in_inbox(qapp):
    context = BootContext(assets=FakeAssets(), options=BootOptions(war="lviv"))
    poller = AlertPoller(context)
    update = AlertUpdate(alert_now=False)
    poller._on_fetched(update)
    assert list(context.inbox) == [update]


def test_poller_disabled_without_regions(qapp):
    poller = AlertPoller(BootContext(assets=FakeAssets()))
    assert not poller.enabled
    assert not poller.start()
    assert not poller.is_active()


def test_stop_waits_for_request_in_flight(qapp, monkeypatch):
    import shiboken6
    from PySide6.QtCore import QObject

    release = threading.Event()
    entered = threading.Event()

    def slow_fetch(url):
        entered.set()
        release.wait(5.0)
        return PAYLOAD

    monkeypatch.setattr(alert_poller, "fetch_regions", slow_fetch)
    parent = QObject()
    context = BootContext(assets=FakeAssets(), options=BootOptions(war="lviv"))
    poller = AlertPoller(context, parent=parent)

    assert poller.start()
    worker = poller._worker
    assert entered.wait(5.0)
    assert worker.isRunning()

    threading.Timer(0.2, release.set).start()
    poller.stop()
    assert not worker.isRunning()
    assert not poller.is_active()

    # destroying the owner after stop() must not take down a running thread
    shiboken6.delete(parent)
    assert not context.inbox


def test_stop_without_request_returns_immediately(qapp):
    poller = AlertPoller(BootContext(assets=FakeAssets(), options=BootOptions(war="lviv")))
    poller.stop()
    assert not poller.is_active()


def test_poller_start_polls_once_and_stop(qapp, monkeypatch):
    context = BootContext(assets=FakeAssets(), options=BootOptions(war="kyiv"))
    poller = AlertPoller(context)
    polls = []
    monkeypatch.setattr(poller, "poll", lambda: polls.append(1))

    assert poller.start()
    assert polls == [1]
    assert poller.is_active()
    poller.stop()
    assert not poller.is_active()
