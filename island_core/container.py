"""
Interface between an order engine and the visual container it drives.

The engine only talks to a container through these calls; each one is a
single side effect the rendering side has to perform.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from island_core.settings import WindowPosition
from island_shared.activity_id import ActivityMode


class ActivityContainer(ABC):
    """Ordered set of activity widgets with per-widget mode and visibility."""

    @abstractmethod
    def children(self) -> List[Any]:
        """Return the widgets currently held, in display order."""

    @abstractmethod
    def append(self, widget: Any) -> None:
        """Insert ``widget`` at the end of the container."""

    @abstractmethod
    def remove(self, widget: Any) -> None:
        """Remove ``widget`` from the container."""

    @abstractmethod
    def move_after(self, widget: Any, sibling: Optional[Any]) -> None:
        """Place ``widget`` right after ``sibling``, or first when ``sibling`` is None."""

    @abstractmethod
    def mode(self, widget: Any) -> ActivityMode:
        ...

    @abstractmethod
    def set_mode(self, widget: Any, mode: ActivityMode) -> None:
        ...

    @abstractmethod
    def is_shown(self, widget: Any) -> bool:
        ...

    @abstractmethod
    def set_shown(self, widget: Any, shown: bool) -> None:
        ...

    def set_position(self, position: WindowPosition) -> None:
        """Anchor the container on screen. Containers without a window ignore it."""

    def refresh(self) -> None:
        """Called after a reconciliation or mode change touched the container."""

    def destroy(self) -> None:
        """Release the container once its window goes away."""


ContainerFactory = Callable[[str], ActivityContainer]
