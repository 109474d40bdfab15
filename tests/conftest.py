"""
Pytest configuration and fixtures for the visualizer core.
"""

import time

import pytest
from PyQt5.QtCore import QCoreApplication

from linklist.ll_model import LinkedListModel, ListKind


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """One QCoreApplication so QTimer has an event dispatcher."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def pump():
    """Process Qt events until ``predicate`` holds or ``timeout`` seconds pass."""

    def _pump(predicate, timeout=5.0):
        deadline = time.monotonic() + timeout
        while not predicate():
            if time.monotonic() > deadline:
                return False
            QCoreApplication.processEvents()
            time.sleep(0.005)
        return True

    return _pump


@pytest.fixture
def make_list():
    """Build a model of ``kind`` holding ``values`` in order."""

    def _make(kind, values):
        model = LinkedListModel(kind)
        model.create_from_iterable(values)
        return model

    return _make


@pytest.fixture(params=list(ListKind), ids=lambda kind: kind.value)
def any_kind(request) -> ListKind:
    return request.param
