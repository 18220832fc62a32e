"""
Activity ordering for a single layout window.

The engine keeps a ring of activity ids. Position in the ring decides the
tier of each activity:

* active: ``[active_offset, active_offset + active_count)``
* shown:  ``[0, max_shown)``
* hidden: ``[max_shown, len)``

Every mutating call finishes by reconciling the attached container, so the
container always mirrors the ring.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from island_core.container import ActivityContainer
from island_core.logger import get_logger
from island_shared.activity_id import ActivityId, ActivityMode

DEFAULT_MAX_ACTIVE = 1
DEFAULT_MAX_SHOWN = 3


class OrderEngine:
    """
    Ring of activities for one window plus its active window.

    Invalid requests (unknown ids, duplicate adds, non-permutation reorders)
    are ignored rather than raised, so a misbehaving producer cannot break
    the UI thread.
    """

    def __init__(
        self,
        container: ActivityContainer,
        *,
        max_active: int = DEFAULT_MAX_ACTIVE,
        max_shown: int = DEFAULT_MAX_SHOWN,
        name: str = "",
    ) -> None:
        self.name = name
        self._container = container
        self._logger = get_logger()
        self._order: List[ActivityId] = []
        self._widgets: Dict[ActivityId, Any] = {}
        self._active_count = 0
        self._active_offset = 0
        self._max_active = max(0, max_active)
        self._max_shown = max(max_shown, self._max_active)

    @property
    def container(self) -> ActivityContainer:
        return self._container

    @property
    def max_active(self) -> int:
        return self._max_active

    @property
    def max_shown(self) -> int:
        return self._max_shown

    @property
    def active_count(self) -> int:
        return self._active_count

    @property
    def active_offset(self) -> int:
        return self._active_offset

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, activity_id: object) -> bool:
        return activity_id in self._widgets

    def __repr__(self) -> str:
        return (
            f"OrderEngine(name={self.name!r}, order=[{', '.join(str(a) for a in self._order)}], "
            f"active_offset={self._active_offset}, active_count={self._active_count}, "
            f"max_active={self._max_active}, max_shown={self._max_shown})"
        )

    # Queries

    def list_activities(self) -> List[ActivityId]:
        return list(self._order)

    def widget(self, activity_id: ActivityId) -> Optional[Any]:
        return self._widgets.get(activity_id)

    def is_active(self, activity_id: ActivityId) -> bool:
        position = self._position(activity_id)
        return position is not None and self._is_active_position(position)

    def is_shown(self, activity_id: ActivityId) -> bool:
        position = self._position(activity_id)
        return position is not None and position < self._max_shown

    def active_activities(self) -> List[ActivityId]:
        return self._order[self._active_offset : self._active_offset + self._active_count]

    def shown_activities(self) -> List[ActivityId]:
        return self._order[: self._max_shown]

    def hidden_activities(self) -> List[ActivityId]:
        return self._order[self._max_shown :]

    # Membership

    def add(self, activity_id: ActivityId, widget: Any) -> None:
        """Append ``activity_id`` to the back of the ring, inactive."""
        if activity_id in self._widgets:
            self._logger.debug("Activity {} already in window '{}'; ignoring add.", activity_id, self.name)
            return
        self._widgets[activity_id] = widget
        self._order.append(activity_id)
        self._logger.debug("Added {} to window '{}' at position {}.", activity_id, self.name, len(self._order) - 1)
        self._update_ui()

    def remove(self, activity_id: ActivityId) -> None:
        position = self._position(activity_id)
        if position is None:
            self._logger.debug("Activity {} not in window '{}'; ignoring remove.", activity_id, self.name)
            return
        if self._is_active_position(position):
            self._active_count -= 1
        elif position < self._active_offset:
            # Everything after the hole shifts left, keep the window on the same entries.
            self._active_offset -= 1
        del self._order[position]
        del self._widgets[activity_id]
        self._logger.debug("Removed {} from window '{}'.", activity_id, self.name)
        self._update_ui()

    def take_all(self) -> List[Tuple[ActivityId, Any]]:
        """Remove and return every ``(id, widget)`` pair in ring order."""
        entries = [(activity_id, self._widgets[activity_id]) for activity_id in self._order]
        self._order.clear()
        self._widgets.clear()
        self._active_count = 0
        self._active_offset = 0
        self._update_ui()
        return entries

    # Tier changes

    def activate(self, activity_id: ActivityId) -> None:
        """
        Move ``activity_id`` into the active window.

        A hidden entry is first pulled into the last shown slot. The entry
        then joins the window on the side it comes from; when the window is
        full it keeps its size and drops the entry on the opposite edge.
        """
        position = self._position(activity_id)
        if position is None or self._is_active_position(position):
            return

        shown_limit = min(self._max_shown, len(self._order))
        if shown_limit == 0:
            self._logger.debug("Window '{}' shows nothing; cannot activate {}.", self.name, activity_id)
            return
        hidden = position >= shown_limit
        join_position = shown_limit - 1 if hidden else position

        if self._active_count == 0:
            if join_position != position:
                self._move(position, join_position)
            self._active_offset = join_position
            if self._max_active > 0:
                self._active_count = 1
        else:
            join_left = join_position <= self._active_offset
            del self._order[position]
            if position < self._active_offset:
                self._active_offset -= 1
            if join_left and hidden and self._active_count == self._max_active and self._active_offset > 0:
                # Landing on the only active slot of a full window: take the slot to its left.
                self._order.insert(self._active_offset - 1, activity_id)
                self._active_offset -= 1
            elif join_left:
                self._order.insert(self._active_offset, activity_id)
                if self._active_count < self._max_active:
                    self._active_count += 1
            else:
                self._order.insert(self._active_offset + self._active_count, activity_id)
                if self._active_count < self._max_active:
                    self._active_count += 1
                else:
                    self._active_offset += 1
            self._keep_window_shown()

        self._logger.debug(
            "Activated {} in window '{}' (offset={}, count={}).",
            activity_id,
            self.name,
            self._active_offset,
            self._active_count,
        )
        self._update_ui()

    def deactivate(self, activity_id: ActivityId) -> None:
        """Move ``activity_id`` to the nearer edge of the window and shrink it."""
        position = self._position(activity_id)
        if position is None or not self._is_active_position(position):
            return

        distance_left = position - self._active_offset
        distance_right = self._active_offset + self._active_count - 1 - position
        if distance_left <= distance_right:
            self._move(position, self._active_offset)
            self._active_offset += 1
        else:
            self._move(position, self._active_offset + self._active_count - 1)
        self._active_count -= 1

        self._logger.debug(
            "Deactivated {} in window '{}' (offset={}, count={}).",
            activity_id,
            self.name,
            self._active_offset,
            self._active_count,
        )
        self._update_ui()

    def focus(self, activity_id: ActivityId, mode: ActivityMode) -> None:
        """Show ``activity_id`` in ``mode``, activating or deactivating as needed."""
        widget = self._widgets.get(activity_id)
        if widget is None:
            return
        if mode.is_minimal:
            self.deactivate(activity_id)
            return
        if not self.is_active(activity_id):
            self.activate(activity_id)
        if not self.is_active(activity_id):
            self._logger.debug("Window '{}' cannot activate {}; focus ignored.", self.name, activity_id)
            return
        if self._container.mode(widget) is not mode:
            self._container.set_mode(widget, mode)
            self._container.refresh()

    def minimize(self, activity_id: ActivityId) -> None:
        """Return an expanded or overlay activity to compact mode."""
        widget = self._widgets.get(activity_id)
        if widget is None or not self.is_active(activity_id):
            return
        if self._container.mode(widget) in (ActivityMode.EXPANDED, ActivityMode.OVERLAY):
            self._container.set_mode(widget, ActivityMode.COMPACT)
            self._container.refresh()

    def next(self) -> None:
        if len(self._order) <= 1:
            return
        self._order.append(self._order.pop(0))
        self._update_ui()

    def previous(self) -> None:
        if len(self._order) <= 1:
            return
        self._order.insert(0, self._order.pop())
        self._update_ui()

    # Configuration

    def reconfigure(self, max_active: int, max_shown: int) -> None:
        """
        Apply new tier limits.

        ``max_shown`` never drops below ``max_active``. The active window is
        kept inside the shown tier: when it would stick out, the active
        entries move as a block so they end at the last shown slot.
        """
        self._max_active = max(0, max_active)
        self._max_shown = max(max_shown, self._max_active)
        self._active_count = min(self._active_count, self._max_active)

        if self._active_count == 0:
            self._active_offset = min(self._active_offset, self._max_shown)
        elif self._active_offset + self._active_count > self._max_shown:
            start = self._active_offset
            end = start + self._active_count
            block = self._order[start:end]
            del self._order[start:end]
            new_offset = self._max_shown - self._active_count
            self._order[new_offset:new_offset] = block
            self._active_offset = new_offset

        self._logger.debug(
            "Reconfigured window '{}' (max_active={}, max_shown={}).",
            self.name,
            self._max_active,
            self._max_shown,
        )
        self._update_ui()

    def reorder(self, sequence: Iterable[ActivityId]) -> None:
        """
        Replace the ring order with ``sequence``.

        Only a permutation of the current ring is accepted; anything else is
        ignored so a sort racing with additions or removals does nothing.
        Tier boundaries are unchanged.
        """
        new_order = list(sequence)
        try:
            is_permutation = len(new_order) == len(self._order) and sorted(new_order) == sorted(self._order)
        except TypeError:
            is_permutation = False
        if not is_permutation:
            self._logger.debug("Rejected reorder of window '{}': not a permutation of the ring.", self.name)
            return
        self._order = new_order
        self._update_ui()

    # Internals

    def _position(self, activity_id: ActivityId) -> Optional[int]:
        try:
            return self._order.index(activity_id)
        except ValueError:
            return None

    def _is_active_position(self, position: int) -> bool:
        return self._active_offset <= position < self._active_offset + self._active_count

    def _move(self, source: int, target: int) -> None:
        self._order.insert(target, self._order.pop(source))

    def _keep_window_shown(self) -> None:
        # Push the inactive entry left of the window past it until the window fits.
        while self._active_offset + self._active_count > self._max_shown and self._active_offset > 0:
            self._move(self._active_offset - 1, self._active_offset + self._active_count - 1)
            self._active_offset -= 1
        if self._active_offset + self._active_count > self._max_shown:
            self._active_count = max(0, self._max_shown - self._active_offset)

    def _update_ui(self) -> None:
        container = self._container
        children = container.children()
        if not children and not self._widgets:
            return
        changed = False

        wanted = {id(widget) for widget in self._widgets.values()}
        for child in children:
            if id(child) not in wanted:
                container.remove(child)
                changed = True

        present = {id(child) for child in children}
        for activity_id in self._order:
            widget = self._widgets[activity_id]
            if id(widget) not in present:
                container.append(widget)
                changed = True

        current = container.children()
        previous: Optional[Any] = None
        for index, activity_id in enumerate(self._order):
            widget = self._widgets[activity_id]
            if index >= len(current) or current[index] is not widget:
                container.move_after(widget, previous)
                current = container.children()
                changed = True
            previous = widget

            mode = container.mode(widget)
            if self._is_active_position(index):
                if mode.is_minimal:
                    container.set_mode(widget, ActivityMode.COMPACT)
                    changed = True
            elif not mode.is_minimal:
                container.set_mode(widget, ActivityMode.MINIMAL)
                changed = True

            shown = index < self._max_shown
            if container.is_shown(widget) != shown:
                container.set_shown(widget, shown)
                changed = True

        if changed:
            container.refresh()
