"""
Global pytest configuration and fixtures for the wormholeindicator test suite.
Qt runs on the offscreen platform so GUI tests work without a display.
"""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Make 'tests.mocks' and the src package importable from a plain checkout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.join(ROOT, "src"))

import numpy as np
import pytest

from tests.mocks import FakeAssets, FakeSound


def pytest_configure(config):
    config.addinivalue_line("markers", "gui: mark test as requiring a Qt GUI application")


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication for all GUI tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def assets():
    return FakeAssets(loaded=0, included=10)


@pytest.fixture
def sound():
    return FakeSound(known={"boot", "bootError"})
