from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from island_core.container import ActivityContainer
from island_core.order_engine import OrderEngine
from island_core.settings import WindowPosition
from island_shared.activity_id import ActivityId, ActivityMode


@dataclass(eq=False)
class FakeWidget:
    label: str

    def __repr__(self) -> str:
        return f"FakeWidget({self.label})"


class RecordingContainer(ActivityContainer):
    """In-memory container that records every side effect it receives."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.destroyed = False
        self.position: Optional[WindowPosition] = None
        self.refreshes = 0
        self.effects: List[tuple] = []
        self._children: List[Any] = []
        self._modes: Dict[Any, ActivityMode] = {}
        self._shown: Dict[Any, bool] = {}

    def children(self) -> List[Any]:
        return list(self._children)

    def append(self, widget: Any) -> None:
        self._children.append(widget)
        self.effects.append(("append", widget))

    def remove(self, widget: Any) -> None:
        self._children.remove(widget)
        self._shown.pop(widget, None)
        self.effects.append(("remove", widget))

    def move_after(self, widget: Any, sibling: Optional[Any]) -> None:
        self._children.remove(widget)
        index = 0 if sibling is None else self._children.index(sibling) + 1
        self._children.insert(index, widget)
        self.effects.append(("move", widget, sibling))

    def mode(self, widget: Any) -> ActivityMode:
        return self._modes.get(widget, ActivityMode.MINIMAL)

    def set_mode(self, widget: Any, mode: ActivityMode) -> None:
        self._modes[widget] = mode
        self.effects.append(("mode", widget, mode))

    def is_shown(self, widget: Any) -> bool:
        return self._shown.get(widget, False)

    def set_shown(self, widget: Any, shown: bool) -> None:
        self._shown[widget] = shown
        self.effects.append(("shown", widget, shown))

    def set_position(self, position: WindowPosition) -> None:
        self.position = position

    def refresh(self) -> None:
        self.refreshes += 1

    def destroy(self) -> None:
        self.destroyed = True


class ContainerFactoryRecorder:
    def __init__(self) -> None:
        self.created: Dict[str, List[RecordingContainer]] = {}

    def __call__(self, name: str) -> RecordingContainer:
        container = RecordingContainer(name)
        self.created.setdefault(name, []).append(container)
        return container

    def latest(self, name: str) -> RecordingContainer:
        return self.created[name][-1]


def make_ids(*names: str, module: str = "test-module") -> List[ActivityId]:
    return [ActivityId(module=module, activity=name) for name in names]


def fill_engine(engine: OrderEngine, ids: List[ActivityId]) -> Dict[ActivityId, FakeWidget]:
    widgets = {}
    for activity_id in ids:
        widget = FakeWidget(activity_id.activity)
        widgets[activity_id] = widget
        engine.add(activity_id, widget)
    return widgets


def tiers(engine: OrderEngine) -> Dict[str, List[str]]:
    return {
        "active": [a.activity for a in engine.active_activities()],
        "shown": [a.activity for a in engine.shown_activities()],
        "hidden": [a.activity for a in engine.hidden_activities()],
    }


def ring(engine: OrderEngine) -> List[str]:
    return [a.activity for a in engine.list_activities()]


def assert_invariants(engine: OrderEngine) -> None:
    order = engine.list_activities()
    assert len(set(order)) == len(order)
    assert engine.active_offset >= 0
    assert engine.active_count <= engine.max_active <= engine.max_shown
    assert engine.active_offset + engine.active_count <= engine.max_shown
    assert engine.active_offset + engine.active_count <= len(order)

    container = engine.container
    widgets = [engine.widget(activity_id) for activity_id in order]
    assert container.children() == widgets
    for activity_id, widget in zip(order, widgets):
        assert container.is_shown(widget) == engine.is_shown(activity_id)
        assert container.mode(widget).is_minimal != engine.is_active(activity_id)
