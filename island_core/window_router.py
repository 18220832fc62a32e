"""
Routing of activities to named layout windows.

The router owns one order engine per configured window and decides which
window an activity lives in. It never touches a ring directly; every change
goes through the engine's public operations.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from island_core.container import ContainerFactory
from island_core.logger import get_logger
from island_core.order_engine import OrderEngine
from island_core.priority_rules import ActivityMatch, parse_rules, sort_activities
from island_core.settings import DEFAULT_WINDOW, LayoutSettings
from island_shared.activity_id import ActivityId, ActivityMetadata, ActivityMode


class WindowRouter:
    """Keeps the set of engines in sync with configuration and activity registration."""

    def __init__(self, container_factory: ContainerFactory, settings: Optional[LayoutSettings] = None) -> None:
        self._container_factory = container_factory
        self._settings = settings or LayoutSettings()
        self._logger = get_logger()
        self._engines: Dict[str, OrderEngine] = {}
        self._rules: Dict[str, List[ActivityMatch]] = {}
        self._metadata: Dict[ActivityId, ActivityMetadata] = {}
        self.sync_windows(self._settings.window_names)

    @property
    def settings(self) -> LayoutSettings:
        return self._settings

    @property
    def window_names(self) -> List[str]:
        return list(self._engines)

    def engine(self, window_name: str) -> Optional[OrderEngine]:
        return self._engines.get(window_name)

    # Placement

    def route(self, activity_id: ActivityId) -> str:
        """Return the declared window of ``activity_id`` when it exists, else the default window."""
        declared = self.declared_window(activity_id)
        if declared in self._engines:
            return declared
        return DEFAULT_WINDOW

    def declared_window(self, activity_id: ActivityId) -> str:
        metadata = self._metadata.get(activity_id)
        return metadata.window_name if metadata is not None else DEFAULT_WINDOW

    def find_window(self, activity_id: ActivityId) -> Optional[str]:
        for name, engine in self._engines.items():
            if activity_id in engine:
                return name
        return None

    def sync_windows(self, window_names: Iterable[str]) -> None:
        """
        Create engines for new window names and drop the ones no longer
        configured. Activities held by a dropped window are re-added to the
        window they route to.
        """
        configured = list(dict.fromkeys(window_names))
        if DEFAULT_WINDOW not in configured:
            configured.append(DEFAULT_WINDOW)

        for name in configured:
            if name not in self._engines:
                self._create_window(name)

        orphans: List[Tuple[ActivityId, Any]] = []
        for name in [name for name in self._engines if name not in configured]:
            orphans.extend(self._destroy_window(name))

        for activity_id, widget in orphans:
            target = self._place(activity_id, widget)
            self._logger.info("Moved orphaned activity {} to window '{}'.", activity_id, target)

    def relocate_if_misrouted(self) -> int:
        """
        Move every activity whose declared window exists but is not the one
        holding it. Moved activities arrive inactive at the back of the ring.
        Returns the number of moved activities.
        """
        moves: List[Tuple[str, ActivityId]] = []
        for name, engine in self._engines.items():
            for activity_id in engine.list_activities():
                declared = self.declared_window(activity_id)
                if declared != name and declared in self._engines:
                    moves.append((name, activity_id))

        for name, activity_id in moves:
            engine = self._engines[name]
            widget = engine.widget(activity_id)
            engine.remove(activity_id)
            target = self._place(activity_id, widget)
            self._logger.debug("Relocated {} from window '{}' to '{}'.", activity_id, name, target)
        return len(moves)

    # Activity registration

    def add_activity(
        self,
        activity_id: ActivityId,
        widget: Any,
        metadata: Optional[ActivityMetadata] = None,
    ) -> None:
        if self.find_window(activity_id) is not None:
            self._logger.debug("Activity {} is already registered; ignoring.", activity_id)
            return
        self._metadata[activity_id] = metadata or ActivityMetadata()
        target = self._place(activity_id, widget)
        self._logger.info("Registered activity {} in window '{}'.", activity_id, target)

    def remove_activity(self, activity_id: ActivityId) -> None:
        engine = self._holding_engine(activity_id)
        if engine is None:
            return
        engine.remove(activity_id)
        self._metadata.pop(activity_id, None)
        self._logger.info("Unregistered activity {} from window '{}'.", activity_id, engine.name)

    def update_metadata(self, activity_id: ActivityId, metadata: ActivityMetadata) -> None:
        """Record new routing metadata; call relocate_if_misrouted() to apply it."""
        if self.find_window(activity_id) is None:
            self._logger.debug("Activity {} is not registered; metadata ignored.", activity_id)
            return
        self._metadata[activity_id] = metadata

    def get_activity(self, activity_id: ActivityId) -> Optional[Any]:
        engine = self._holding_engine(activity_id)
        return engine.widget(activity_id) if engine is not None else None

    def get_mode(self, activity_id: ActivityId) -> Optional[ActivityMode]:
        engine = self._holding_engine(activity_id)
        if engine is None:
            return None
        return engine.container.mode(engine.widget(activity_id))

    def list_activities(self) -> List[ActivityId]:
        return [activity_id for engine in self._engines.values() for activity_id in engine.list_activities()]

    # Commands

    def activate(self, activity_id: ActivityId) -> None:
        engine = self._holding_engine(activity_id)
        if engine is not None:
            engine.activate(activity_id)

    def deactivate(self, activity_id: ActivityId) -> None:
        engine = self._holding_engine(activity_id)
        if engine is not None:
            engine.deactivate(activity_id)

    def focus(self, activity_id: ActivityId, mode: ActivityMode) -> None:
        engine = self._holding_engine(activity_id)
        if engine is not None:
            engine.focus(activity_id, mode)

    def minimize(self, activity_id: ActivityId) -> None:
        engine = self._holding_engine(activity_id)
        if engine is not None:
            engine.minimize(activity_id)

    def cycle(self, window_name: str = DEFAULT_WINDOW, *, forward: bool = True) -> None:
        engine = self._window_engine(window_name)
        if engine is None:
            return
        if forward:
            engine.next()
        else:
            engine.previous()

    def reorder(self, window_name: str, sequence: Iterable[ActivityId]) -> None:
        engine = self._window_engine(window_name)
        if engine is not None:
            engine.reorder(sequence)

    def reconfigure(self, window_name: str, max_active: int, max_shown: int) -> None:
        engine = self._window_engine(window_name)
        if engine is not None:
            engine.reconfigure(max_active, max_shown)

    def apply_priority(self, window_name: str) -> None:
        """Sort a window by its configured activity_order rules."""
        engine = self._engines.get(window_name)
        rules = self._rules.get(window_name)
        if engine is None or not rules:
            return
        engine.reorder(sort_activities(engine.list_activities(), rules))

    def apply_settings(self, settings: LayoutSettings) -> None:
        """Bring windows, tier limits and ordering in line with ``settings``."""
        self._settings = settings
        self.sync_windows(settings.window_names)
        for name, engine in self._engines.items():
            window_settings = settings.for_window(name)
            self._rules[name] = parse_rules(window_settings.activity_order)
            engine.container.set_position(window_settings.window_position)
            engine.reconfigure(window_settings.max_active, window_settings.max_activities)
            if window_settings.reorder_on_reload:
                self.apply_priority(name)
        moved = self.relocate_if_misrouted()
        self._logger.info("Applied layout settings: windows={}, relocated={}.", self.window_names, moved)

    def close(self) -> None:
        """Drop every window, releasing its container."""
        for name in list(self._engines):
            self._destroy_window(name)
        self._metadata.clear()

    # Internals

    def _create_window(self, name: str) -> OrderEngine:
        window_settings = self._settings.for_window(name)
        engine = OrderEngine(
            self._container_factory(name),
            max_active=window_settings.max_active,
            max_shown=window_settings.max_activities,
            name=name,
        )
        engine.container.set_position(window_settings.window_position)
        self._engines[name] = engine
        self._rules[name] = parse_rules(window_settings.activity_order)
        self._logger.debug("Created layout window '{}'.", name)
        return engine

    def _destroy_window(self, name: str) -> List[Tuple[ActivityId, Any]]:
        engine = self._engines.pop(name)
        self._rules.pop(name, None)
        entries = engine.take_all()
        engine.container.destroy()
        self._logger.debug("Destroyed layout window '{}' ({} orphaned activities).", name, len(entries))
        return entries

    def _place(self, activity_id: ActivityId, widget: Any) -> str:
        target = self.route(activity_id)
        self._engines[target].add(activity_id, widget)
        if self._settings.for_window(target).reorder_on_add:
            self.apply_priority(target)
        return target

    def _holding_engine(self, activity_id: ActivityId) -> Optional[OrderEngine]:
        name = self.find_window(activity_id)
        if name is None:
            self._logger.debug("Activity {} is not registered in any window.", activity_id)
            return None
        return self._engines[name]

    def _window_engine(self, window_name: str) -> Optional[OrderEngine]:
        engine = self._engines.get(window_name)
        if engine is None:
            self._logger.warning("No layout window named '{}'.", window_name)
        return engine
