"""
Application coordinator wiring configuration, routing and Qt windows together.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from PySide6.QtCore import QEvent, QObject, QTimer
from PySide6.QtWidgets import QApplication, QWidget

from island_core.auto_minimize import AutoMinimizer
from island_core.commands import Add, CycleNext, CyclePrevious, Focus, Remove, dispatch
from island_core.container import ActivityContainer, ContainerFactory
from island_core.logger import get_logger
from island_core.qt_container import QtActivityContainer
from island_core.settings import LayoutSettings, LayoutSettingsManager
from island_core.window_router import WindowRouter
from island_shared.activity_id import ActivityId, ActivityMetadata, ActivityMode

APP_NAME = "Island Layout"
APP_VERSION = "1.0.0"
SETTINGS_REFRESH_INTERVAL_MS = 15000


class LayoutCoordinator(QObject):
    """Owns the router and keeps it in step with the settings file and user input."""

    def __init__(
        self,
        *,
        settings_manager: Optional[LayoutSettingsManager] = None,
        container_factory: ContainerFactory = QtActivityContainer,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._logger = get_logger()
        self.settings_manager = settings_manager or LayoutSettingsManager()
        self._container_factory = container_factory
        self._manual_shutdown_requested = False

        self._settings: LayoutSettings = self.settings_manager.read_settings()
        self._router = WindowRouter(self._create_container, self._settings)

        self._auto_minimizer = AutoMinimizer(self)
        self._auto_minimizer.minimizeRequested.connect(self._on_minimize_requested)
        self._auto_minimizer.set_hover_provider(self._is_hovered)
        self._watched: Dict[int, ActivityId] = {}

        self._settings_timer = QTimer(self)
        self._settings_timer.setInterval(SETTINGS_REFRESH_INTERVAL_MS)
        self._settings_timer.timeout.connect(self._reload_settings)

    @property
    def router(self) -> WindowRouter:
        return self._router

    @property
    def settings(self) -> LayoutSettings:
        return self._settings

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def start(self) -> None:
        self._logger.info("Starting layout coordinator. Reading {}", self.settings_manager.config_path)
        self._router.apply_settings(self._settings)
        self._settings_timer.start()

    def shutdown(self) -> None:
        self._logger.info("Shutting down layout on user request.")
        self._manual_shutdown_requested = True
        self.close()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    def close(self) -> None:
        """Stop timers and release every window without quitting the application."""
        self._settings_timer.stop()
        self._auto_minimizer.cancel_all()
        self._watched.clear()
        self._router.close()

    def register_activity(
        self,
        activity_id: ActivityId,
        widget: Any,
        metadata: Optional[ActivityMetadata] = None,
    ) -> None:
        self.handle(Add(activity_id, widget, metadata))

    def unregister_activity(self, activity_id: ActivityId) -> None:
        self.handle(Remove(activity_id))

    def handle(self, command: object) -> bool:
        """Dispatch a layout command and run the follow-ups it needs."""
        if isinstance(command, Remove):
            self._auto_minimizer.cancel(command.activity_id)
            self._unwatch(self._router.get_activity(command.activity_id))
        handled = dispatch(self._router, command)
        if handled and isinstance(command, Add) and self._router.get_activity(command.activity_id) is command.widget:
            self._watch(command.activity_id, command.widget)
        if handled and isinstance(command, Focus):
            self._schedule_minimize(command.activity_id, command.mode)
        return handled

    def _schedule_minimize(self, activity_id: ActivityId, mode: ActivityMode) -> None:
        if mode not in (ActivityMode.EXPANDED, ActivityMode.OVERLAY):
            self._auto_minimizer.cancel(activity_id)
            return
        window_name = self._router.find_window(activity_id)
        if window_name is None:
            return
        window_settings = self._settings.for_window(window_name)
        if not window_settings.auto_minimize_enabled:
            return
        self._auto_minimizer.schedule(activity_id, window_settings.auto_minimize_timeout)

    def _on_minimize_requested(self, activity_id: ActivityId) -> None:
        self._logger.debug("Auto-minimizing {}", activity_id)
        self._router.minimize(activity_id)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() == QEvent.Type.Leave:
            activity_id = self._watched.get(id(watched))
            if activity_id is not None:
                self._on_pointer_left(activity_id)
        return super().eventFilter(watched, event)

    def _on_pointer_left(self, activity_id: ActivityId) -> None:
        # Leaving an expanded activity restarts its countdown.
        mode = self._router.get_mode(activity_id)
        if mode in (ActivityMode.EXPANDED, ActivityMode.OVERLAY):
            self._schedule_minimize(activity_id, mode)

    def _is_hovered(self, activity_id: ActivityId) -> bool:
        widget = self._router.get_activity(activity_id)
        return isinstance(widget, QWidget) and widget.underMouse()

    def _watch(self, activity_id: ActivityId, widget: Any) -> None:
        if isinstance(widget, QWidget):
            widget.installEventFilter(self)
            self._watched[id(widget)] = activity_id

    def _unwatch(self, widget: Any) -> None:
        if isinstance(widget, QWidget) and self._watched.pop(id(widget), None) is not None:
            widget.removeEventFilter(self)

    def _reload_settings(self) -> None:
        new_settings = self.settings_manager.read_settings(fallback=self._settings)
        if new_settings != self._settings:
            self._logger.info("Detected layout settings change. Applying updates.")
            self._settings = new_settings
            self._router.apply_settings(new_settings)

    def _create_container(self, window_name: str) -> ActivityContainer:
        container = self._container_factory(window_name)
        if isinstance(container, QtActivityContainer):
            container.window.cycleRequested.connect(
                lambda forward, name=window_name: self.handle(
                    CycleNext(name) if forward else CyclePrevious(name)
                )
            )
            container.window.present()
        return container
