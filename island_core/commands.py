"""
Layout commands accepted from the shell and their dispatch to the router.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from island_core.logger import get_logger
from island_core.settings import DEFAULT_WINDOW
from island_core.window_router import WindowRouter
from island_shared.activity_id import ActivityId, ActivityMetadata, ActivityMode

_LOGGER = get_logger()


@dataclass(frozen=True, slots=True)
class Add:
    activity_id: ActivityId
    widget: Any = field(compare=False)
    metadata: Optional[ActivityMetadata] = None


@dataclass(frozen=True, slots=True)
class Remove:
    activity_id: ActivityId


@dataclass(frozen=True, slots=True)
class Activate:
    activity_id: ActivityId


@dataclass(frozen=True, slots=True)
class Deactivate:
    activity_id: ActivityId


@dataclass(frozen=True, slots=True)
class Focus:
    activity_id: ActivityId
    mode: ActivityMode


@dataclass(frozen=True, slots=True)
class CycleNext:
    window_name: str = DEFAULT_WINDOW


@dataclass(frozen=True, slots=True)
class CyclePrevious:
    window_name: str = DEFAULT_WINDOW


@dataclass(frozen=True, slots=True)
class Reconfigure:
    max_active: int
    max_shown: int
    window_name: str = DEFAULT_WINDOW


@dataclass(frozen=True, slots=True)
class Reorder:
    sequence: Tuple[ActivityId, ...]
    window_name: str = DEFAULT_WINDOW


_HANDLERS: Dict[type, Callable[[WindowRouter, Any], None]] = {
    Add: lambda router, command: router.add_activity(command.activity_id, command.widget, command.metadata),
    Remove: lambda router, command: router.remove_activity(command.activity_id),
    Activate: lambda router, command: router.activate(command.activity_id),
    Deactivate: lambda router, command: router.deactivate(command.activity_id),
    Focus: lambda router, command: router.focus(command.activity_id, command.mode),
    CycleNext: lambda router, command: router.cycle(command.window_name, forward=True),
    CyclePrevious: lambda router, command: router.cycle(command.window_name, forward=False),
    Reconfigure: lambda router, command: router.reconfigure(
        command.window_name, command.max_active, command.max_shown
    ),
    Reorder: lambda router, command: router.reorder(command.window_name, command.sequence),
}


def dispatch(router: WindowRouter, command: object) -> bool:
    """Apply ``command`` to ``router``. Returns False for unknown command types."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        _LOGGER.warning("Ignoring unknown layout command {!r}.", command)
        return False
    _LOGGER.trace("Dispatching {!r}.", command)
    handler(router, command)
    return True
