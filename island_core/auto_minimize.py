"""
Delayed return of expanded activities to compact mode.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from island_shared.activity_id import ActivityId


class AutoMinimizer(QObject):
    """
    Runs one single-shot timer per activity and emits ``minimizeRequested``
    when it expires. Scheduling an activity again restarts its timer.
    """

    minimizeRequested = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timers: Dict[ActivityId, QTimer] = {}
        self._hover_provider: Optional[Callable[[ActivityId], bool]] = None

    def schedule(self, activity_id: ActivityId, timeout_ms: int) -> None:
        """Start (or restart) the timer of ``activity_id``. Negative timeouts disable it."""
        self.cancel(activity_id)
        if timeout_ms < 0:
            return
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(timeout_ms)
        timer.timeout.connect(lambda: self._on_timeout(activity_id))  # type: ignore[arg-type]
        self._timers[activity_id] = timer
        timer.start()

    def cancel(self, activity_id: ActivityId) -> None:
        timer = self._timers.pop(activity_id, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()

    def cancel_all(self) -> None:
        for activity_id in list(self._timers):
            self.cancel(activity_id)

    def is_pending(self, activity_id: ActivityId) -> bool:
        return activity_id in self._timers

    def set_hover_provider(self, provider: Callable[[ActivityId], bool]) -> None:
        """
        Report whether the pointer is over an activity. A hovered activity is
        not minimized when its timer fires.
        """
        self._hover_provider = provider

    def _on_timeout(self, activity_id: ActivityId) -> None:
        timer = self._timers.pop(activity_id, None)
        if timer is None:
            return
        timer.deleteLater()
        if self._hover_provider is not None and self._hover_provider(activity_id):
            return
        self.minimizeRequested.emit(activity_id)
