from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtCore import QPoint, QRect, QSize  # noqa: E402
from PySide6.QtWidgets import QApplication, QLabel  # noqa: E402

from island_core.order_engine import OrderEngine  # noqa: E402
from island_core.qt_container import HIDDEN_PROPERTY, MODE_PROPERTY, QtActivityContainer, anchored_position  # noqa: E402
from island_core.settings import WindowPosition  # noqa: E402
from island_shared.activity_id import ActivityMode  # noqa: E402
from tests.fakes import assert_invariants, make_ids  # noqa: E402


def _layout_order(container: QtActivityContainer):
    layout = container.window.activity_layout
    return [layout.itemAt(index).widget() for index in range(layout.count())]


def test_append_hides_until_shown(qapp) -> None:
    container = QtActivityContainer("test")
    label = QLabel("A")

    container.append(label)

    assert container.children() == [label]
    assert _layout_order(container) == [label]
    assert label.parent() is container.window
    assert label.isHidden()
    assert not container.is_shown(label)
    assert container.mode(label) is ActivityMode.MINIMAL

    container.set_shown(label, True)
    assert container.is_shown(label)
    assert not label.isHidden()
    assert label.property(HIDDEN_PROPERTY) is False
    container.destroy()


def test_set_mode_updates_property_and_emits(qapp) -> None:
    container = QtActivityContainer("test")
    label = QLabel("A")
    container.append(label)
    changes = []
    container.window.modeChanged.connect(lambda widget, mode: changes.append((widget, mode)))

    container.set_mode(label, ActivityMode.EXPANDED)

    assert label.property(MODE_PROPERTY) == "expanded"
    assert container.mode(label) is ActivityMode.EXPANDED
    assert changes == [(label, "expanded")]
    container.destroy()


def test_remove_detaches_widget(qapp) -> None:
    container = QtActivityContainer("test")
    label = QLabel("A")
    container.append(label)

    container.remove(label)
    container.remove(label)

    assert container.children() == []
    assert _layout_order(container) == []
    assert label.parent() is None
    container.destroy()


def test_engine_drives_qt_layout(qapp) -> None:
    container = QtActivityContainer("test")
    engine = OrderEngine(container, max_active=1, max_shown=2, name="test")
    ids = make_ids("A", "B", "C")
    labels = {activity_id: QLabel(activity_id.activity) for activity_id in ids}
    for activity_id in ids:
        engine.add(activity_id, labels[activity_id])

    engine.activate(ids[2])

    expected = [labels[activity_id] for activity_id in engine.list_activities()]
    assert _layout_order(container) == expected
    assert container.mode(labels[ids[2]]) is ActivityMode.COMPACT
    assert labels[ids[1]].isHidden()
    assert not labels[ids[2]].isHidden()
    assert_invariants(engine)

    engine.next()
    assert _layout_order(container) == [labels[activity_id] for activity_id in engine.list_activities()]
    assert_invariants(engine)
    container.destroy()


def test_back_and_forward_buttons_request_cycle(qapp) -> None:
    from PySide6.QtCore import QEvent, QPointF, Qt
    from PySide6.QtGui import QMouseEvent

    container = QtActivityContainer("test")
    requests = []
    container.window.cycleRequested.connect(requests.append)

    for button in (Qt.MouseButton.BackButton, Qt.MouseButton.ForwardButton, Qt.MouseButton.LeftButton):
        event = QMouseEvent(
            QEvent.Type.MouseButtonPress,
            QPointF(1, 1),
            QPointF(1, 1),
            button,
            button,
            Qt.KeyboardModifier.NoModifier,
        )
        container.window.mousePressEvent(event)

    assert requests == [True, False]
    container.destroy()


@pytest.mark.parametrize(
    ("position", "expected"),
    [
        (WindowPosition(h_anchor="start", v_anchor="start", margin_x=10, margin_y=5), QPoint(10, 5)),
        (WindowPosition(h_anchor="center", v_anchor="start", margin_x=30, margin_y=8), QPoint(400, 8)),
        (WindowPosition(h_anchor="end", v_anchor="end", margin_x=12, margin_y=6), QPoint(788, 754)),
        (WindowPosition(h_anchor="center", v_anchor="center"), QPoint(400, 380)),
    ],
)
def test_anchored_position(position, expected) -> None:
    assert anchored_position(QRect(0, 0, 1000, 800), QSize(200, 40), position) == expected


def test_anchored_position_respects_area_origin() -> None:
    position = WindowPosition(h_anchor="start", v_anchor="end", margin_x=4, margin_y=4)

    assert anchored_position(QRect(100, 50, 600, 400), QSize(100, 30), position) == QPoint(104, 416)


def test_window_replaced_after_engine_changes(qapp) -> None:
    screen = QApplication.primaryScreen()
    if screen is None:
        pytest.skip("no screen available")
    container = QtActivityContainer("test")
    container.set_position(WindowPosition(h_anchor="end", v_anchor="end", margin_x=16, margin_y=16))
    container.window.present()
    engine = OrderEngine(container, max_active=1, max_shown=3, name="test")

    for activity_id in make_ids("A", "B", "C"):
        engine.add(activity_id, QLabel(activity_id.activity * 20))

    window = container.window
    assert window.pos() == anchored_position(screen.availableGeometry(), window.size(), window.position)
    container.destroy()
