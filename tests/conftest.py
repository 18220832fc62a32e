from __future__ import annotations

import os
import tempfile

import pytest

os.environ.setdefault("ISLAND_LAYOUT_LOG_DIR", os.path.join(tempfile.gettempdir(), "island-layout-tests"))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from island_core.order_engine import OrderEngine  # noqa: E402
from tests.fakes import ContainerFactoryRecorder, RecordingContainer, make_ids  # noqa: E402


@pytest.fixture
def container() -> RecordingContainer:
    return RecordingContainer()


@pytest.fixture
def make_engine(container: RecordingContainer):
    def _make(max_active: int = 1, max_shown: int = 2) -> OrderEngine:
        return OrderEngine(container, max_active=max_active, max_shown=max_shown, name="test")

    return _make


@pytest.fixture
def abcd():
    return make_ids("A", "B", "C", "D")


@pytest.fixture
def container_factory() -> ContainerFactoryRecorder:
    return ContainerFactoryRecorder()


@pytest.fixture(scope="session")
def qapp():
    qt_widgets = pytest.importorskip("PySide6.QtWidgets")
    app = qt_widgets.QApplication.instance() or qt_widgets.QApplication([])
    yield app
