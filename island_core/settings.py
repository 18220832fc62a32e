"""
File-backed configuration for the layout runtime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from island_core.logger import get_logger
from island_shared.layout_schema import LayoutDefaults, LayoutValidationError, load_and_validate_layout

_LOGGER = get_logger()

CONFIG_ENV = "ISLAND_LAYOUT_CONFIG"
DEFAULT_CONFIG_PATH = Path(
    os.environ.get(
        CONFIG_ENV,
        str(Path.home() / ".config" / "island-layout" / "layout.json"),
    )
)
DEFAULT_WINDOW = LayoutDefaults.default_window
_MIN_MAX_ACTIVITIES = 1
_MAX_MAX_ACTIVITIES = 32


@dataclass(frozen=True)
class WindowPosition:
    """Screen anchor of a layout window: alignment on each axis plus margins from the anchored edge."""

    h_anchor: str = LayoutDefaults.h_anchor
    v_anchor: str = LayoutDefaults.v_anchor
    margin_x: int = LayoutDefaults.margin_x
    margin_y: int = LayoutDefaults.margin_y


@dataclass(eq=True)
class WindowSettings:
    max_activities: int = LayoutDefaults.max_activities
    max_active: int = LayoutDefaults.max_active
    auto_minimize_timeout: int = LayoutDefaults.auto_minimize_timeout
    reorder_on_add: bool = LayoutDefaults.reorder_on_add
    reorder_on_reload: bool = LayoutDefaults.reorder_on_reload
    window_position: WindowPosition = field(default_factory=WindowPosition)
    activity_order: List[str] = field(default_factory=list)

    @property
    def auto_minimize_enabled(self) -> bool:
        return self.auto_minimize_timeout >= 0


@dataclass(eq=True)
class LayoutSettings:
    """Top-level values double as defaults for windows that are not configured."""

    max_activities: int = LayoutDefaults.max_activities
    max_active: int = LayoutDefaults.max_active
    auto_minimize_timeout: int = LayoutDefaults.auto_minimize_timeout
    reorder_on_add: bool = LayoutDefaults.reorder_on_add
    reorder_on_reload: bool = LayoutDefaults.reorder_on_reload
    window_position: WindowPosition = field(default_factory=WindowPosition)
    windows: Dict[str, WindowSettings] = field(default_factory=lambda: {DEFAULT_WINDOW: WindowSettings()})

    def default_window_settings(self) -> WindowSettings:
        return WindowSettings(
            max_activities=self.max_activities,
            max_active=self.max_active,
            auto_minimize_timeout=self.auto_minimize_timeout,
            reorder_on_add=self.reorder_on_add,
            reorder_on_reload=self.reorder_on_reload,
            window_position=self.window_position,
        )

    def for_window(self, window_name: str) -> WindowSettings:
        settings = self.windows.get(window_name)
        if settings is None:
            return self.default_window_settings()
        return settings

    @property
    def window_names(self) -> List[str]:
        names = list(self.windows)
        if DEFAULT_WINDOW not in self.windows:
            names.append(DEFAULT_WINDOW)
        return names


class LayoutSettingsManager:
    """Loads the layout file and clamps values outside the supported range."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self.config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    def read_settings(self, fallback: Optional[LayoutSettings] = None) -> LayoutSettings:
        """
        Read the layout file.

        A missing file yields defaults. An invalid file is logged and yields
        ``fallback`` (or defaults), so a typo never tears down a running layout.
        """
        if not self.config_path.exists():
            return LayoutSettings()

        try:
            normalized = load_and_validate_layout(self.config_path)
        except LayoutValidationError as exc:
            _LOGGER.error("Invalid layout configuration in {}: {}", self.config_path, exc)
            return fallback if fallback is not None else LayoutSettings()

        top = self._clamp_limits(normalized, context="layout")
        windows = {
            name: WindowSettings(
                **self._clamp_limits(values, context=f"window '{name}'"),
                window_position=WindowPosition(**values["window_position"]),
                activity_order=list(values["activity_order"]),
            )
            for name, values in normalized["windows"].items()
        }
        return LayoutSettings(
            **top,
            window_position=WindowPosition(**normalized["window_position"]),
            windows=windows,
        )

    def _clamp_limits(self, values: Dict[str, Any], *, context: str) -> Dict[str, Any]:
        max_activities = values["max_activities"]
        if max_activities < _MIN_MAX_ACTIVITIES or max_activities > _MAX_MAX_ACTIVITIES:
            _LOGGER.warning(
                "Invalid max_activities {} for {}. Clamping to safe bounds.",
                max_activities,
                context,
            )
        max_activities = max(_MIN_MAX_ACTIVITIES, min(_MAX_MAX_ACTIVITIES, max_activities))

        max_active = values["max_active"]
        if max_active < 0 or max_active > max_activities:
            _LOGGER.warning(
                "max_active {} exceeds max_activities {} for {}. Clamping.",
                max_active,
                max_activities,
                context,
            )
        max_active = max(0, min(max_activities, max_active))

        return {
            "max_activities": max_activities,
            "max_active": max_active,
            "auto_minimize_timeout": values["auto_minimize_timeout"],
            "reorder_on_add": values["reorder_on_add"],
            "reorder_on_reload": values["reorder_on_reload"],
        }
