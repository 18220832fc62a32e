"""
PySide6 container hosting the activity widgets of one layout window.
"""

from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import QPoint, QRect, QSize, Qt, Signal
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QApplication, QHBoxLayout, QWidget

from island_core.container import ActivityContainer
from island_core.settings import WindowPosition
from island_shared.activity_id import ActivityMode

MODE_PROPERTY = "activityMode"
HIDDEN_PROPERTY = "activityHidden"


def anchored_position(area: QRect, size: QSize, position: WindowPosition) -> QPoint:
    """Top-left corner that places a window of ``size`` at ``position`` inside ``area``."""
    x = _anchor(area.x(), area.width(), size.width(), position.h_anchor, position.margin_x)
    y = _anchor(area.y(), area.height(), size.height(), position.v_anchor, position.margin_y)
    return QPoint(x, y)


def _anchor(start: int, available: int, extent: int, anchor: str, margin: int) -> int:
    if anchor == "start":
        return start + margin
    if anchor == "end":
        return start + available - extent - margin
    return start + (available - extent) // 2


class LayoutWindow(QWidget):
    """Frameless always-on-top strip that lays activities out horizontally."""

    cycleRequested = Signal(bool)
    modeChanged = Signal(object, str)

    def __init__(self, name: str = "", parent: QWidget | None = None) -> None:
        flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        super().__init__(parent)
        self.setWindowFlags(flags)
        self.setObjectName("LayoutWindow")
        self.setWindowTitle(name or "default")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.position = WindowPosition()

        self.activity_layout = QHBoxLayout(self)
        self.activity_layout.setContentsMargins(0, 0, 0, 0)
        self.activity_layout.setSpacing(5)

        self.setStyleSheet(
            """
            QWidget#LayoutWindow [activityMode="minimal"] {
                border-radius: 14px;
            }
            QWidget#LayoutWindow [activityMode="compact"] {
                border-radius: 20px;
            }
            QWidget#LayoutWindow [activityHidden="true"] {
                min-width: 0px;
                max-width: 0px;
            }
            """
        )

    def set_position(self, position: WindowPosition) -> None:
        self.position = position
        if self.isVisible():
            self.reposition()

    def present(self) -> None:
        """Display the window at its configured anchor on the primary screen."""
        self.reposition()
        self.show()

    def reposition(self) -> None:
        """Fit the window to its contents and move it back onto its anchor."""
        self.adjustSize()
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        self.move(anchored_position(screen.availableGeometry(), self.size(), self.position))

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        super().mousePressEvent(event)
        if event.button() == Qt.MouseButton.BackButton:
            self.cycleRequested.emit(True)
        elif event.button() == Qt.MouseButton.ForwardButton:
            self.cycleRequested.emit(False)


class QtActivityContainer(ActivityContainer):
    """ActivityContainer backed by a LayoutWindow and its box layout."""

    def __init__(self, name: str = "", parent: QWidget | None = None) -> None:
        self.name = name
        self.window = LayoutWindow(name, parent)
        self._children: List[QWidget] = []

    def children(self) -> List[QWidget]:
        return list(self._children)

    def append(self, widget: QWidget) -> None:
        # Hidden until the engine marks it shown.
        widget.setProperty(HIDDEN_PROPERTY, True)
        widget.setVisible(False)
        self._children.append(widget)
        self.window.activity_layout.addWidget(widget)

    def remove(self, widget: QWidget) -> None:
        if widget not in self._children:
            return
        self._children.remove(widget)
        self.window.activity_layout.removeWidget(widget)
        widget.setProperty(HIDDEN_PROPERTY, True)
        widget.hide()
        widget.setParent(None)

    def move_after(self, widget: QWidget, sibling: Optional[QWidget]) -> None:
        self._children.remove(widget)
        index = 0 if sibling is None else self._children.index(sibling) + 1
        self._children.insert(index, widget)
        self.window.activity_layout.removeWidget(widget)
        self.window.activity_layout.insertWidget(index, widget)

    def mode(self, widget: QWidget) -> ActivityMode:
        try:
            return ActivityMode(widget.property(MODE_PROPERTY))
        except ValueError:
            return ActivityMode.MINIMAL

    def set_mode(self, widget: QWidget, mode: ActivityMode) -> None:
        widget.setProperty(MODE_PROPERTY, mode.value)
        _repolish(widget)
        self.window.modeChanged.emit(widget, mode.value)

    def is_shown(self, widget: QWidget) -> bool:
        return not bool(widget.property(HIDDEN_PROPERTY))

    def set_shown(self, widget: QWidget, shown: bool) -> None:
        widget.setProperty(HIDDEN_PROPERTY, not shown)
        widget.setVisible(shown)
        _repolish(widget)

    def set_position(self, position: WindowPosition) -> None:
        self.window.set_position(position)

    def refresh(self) -> None:
        self.window.reposition()

    def destroy(self) -> None:
        self.window.close()
        self.window.deleteLater()


def _repolish(widget: QWidget) -> None:
    style = widget.style()
    style.unpolish(widget)
    style.polish(widget)
