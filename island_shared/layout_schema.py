"""
Layout configuration schema validation shared by the runtime and its tools.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional


class LayoutValidationError(ValueError):
    """Raised when a layout file is missing required data or is malformed."""


@dataclass(frozen=True)
class LayoutDefaults:
    """Schema defaults as simple dataclass constants."""

    max_activities: int = 3
    max_active: int = 1
    auto_minimize_timeout: int = 5000
    reorder_on_add: bool = True
    reorder_on_reload: bool = True
    default_window: str = ""
    h_anchor: str = "center"
    v_anchor: str = "start"
    margin_x: int = 0
    margin_y: int = 8


_INHERITED_KEYS = (
    "max_activities",
    "max_active",
    "auto_minimize_timeout",
    "reorder_on_add",
    "reorder_on_reload",
)
_ANCHORS = ("start", "center", "end")
_POSITION_KEYS = ("h_anchor", "v_anchor", "margin_x", "margin_y")


def load_and_validate_layout(path: Path) -> Dict[str, Any]:
    """
    Load a layout JSON file and validate it against the expected schema.

    Returns a normalized dictionary where every window carries its full set
    of values, inherited from the top level where the window omits them.
    """
    try:
        contents = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise LayoutValidationError(f"Layout file not found: {path}") from exc
    except OSError as exc:
        raise LayoutValidationError(f"Unable to read layout file: {path}") from exc

    try:
        raw_layout = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise LayoutValidationError(f"Layout file is not valid JSON: {exc}") from exc

    return validate_layout(raw_layout)


def validate_layout(raw_layout: Any) -> Dict[str, Any]:
    """Validate an already decoded layout document."""
    if not isinstance(raw_layout, dict):
        raise LayoutValidationError("Layout root must be a JSON object.")

    defaults = LayoutDefaults()
    top = _validate_window_values(raw_layout, field_prefix="")
    resolved_top = {
        "max_activities": top.get("max_activities", defaults.max_activities),
        "max_active": top.get("max_active", defaults.max_active),
        "auto_minimize_timeout": top.get("auto_minimize_timeout", defaults.auto_minimize_timeout),
        "reorder_on_add": top.get("reorder_on_add", defaults.reorder_on_add),
        "reorder_on_reload": top.get("reorder_on_reload", defaults.reorder_on_reload),
    }
    default_position = {key: getattr(defaults, key) for key in _POSITION_KEYS}
    resolved_top["window_position"] = dict(
        default_position,
        **_validate_window_position(raw_layout.get("window_position"), field="window_position"),
    )

    raw_windows = raw_layout.get("windows")
    if raw_windows is None:
        raw_windows = {}
    if not isinstance(raw_windows, dict):
        raise LayoutValidationError("windows must be an object keyed by window name.")

    windows: Dict[str, Dict[str, Any]] = {}
    for name, raw_window in raw_windows.items():
        if not isinstance(name, str):
            raise LayoutValidationError("window names must be strings.")
        window_name = name.strip()
        if window_name in windows:
            raise LayoutValidationError(f"window name {name!r} is declared more than once.")
        if raw_window is None:
            raw_window = {}
        if not isinstance(raw_window, dict):
            raise LayoutValidationError(f"windows.{name} must be an object.")
        window_values = _validate_window_values(raw_window, field_prefix=f"windows.{name}.")
        resolved = {key: window_values.get(key, resolved_top[key]) for key in _INHERITED_KEYS}
        resolved["window_position"] = dict(
            resolved_top["window_position"],
            **_validate_window_position(raw_window.get("window_position"), field=f"windows.{name}.window_position"),
        )
        resolved["activity_order"] = _validate_activity_order(
            raw_window.get("activity_order"),
            field=f"windows.{name}.activity_order",
        )
        windows[window_name] = resolved

    if defaults.default_window not in windows:
        windows[defaults.default_window] = dict(
            resolved_top,
            window_position=dict(resolved_top["window_position"]),
            activity_order=[],
        )

    normalized = dict(resolved_top)
    normalized["windows"] = windows
    return normalized


def _validate_window_position(value: Any, *, field: str) -> Dict[str, Any]:
    """Validate the keys a window_position object sets; missing keys are inherited."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LayoutValidationError(f"{field} must be an object.")
    position: Dict[str, Any] = {}
    for key in ("h_anchor", "v_anchor"):
        if key in value:
            anchor = value[key]
            if not isinstance(anchor, str) or anchor.strip().lower() not in _ANCHORS:
                raise LayoutValidationError(f"{field}.{key} must be one of {', '.join(_ANCHORS)}.")
            position[key] = anchor.strip().lower()
    for key in ("margin_x", "margin_y"):
        if key in value:
            position[key] = _require_int(value[key], field=f"{field}.{key}", minimum=0)
    return position


def _validate_window_values(raw: Dict[str, Any], *, field_prefix: str) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    if "max_activities" in raw:
        values["max_activities"] = _require_int(
            raw["max_activities"], field=f"{field_prefix}max_activities", minimum=1
        )
    if "max_active" in raw:
        values["max_active"] = _require_int(raw["max_active"], field=f"{field_prefix}max_active", minimum=0)
    if "auto_minimize_timeout" in raw:
        values["auto_minimize_timeout"] = _require_int(
            raw["auto_minimize_timeout"], field=f"{field_prefix}auto_minimize_timeout"
        )
    for key in ("reorder_on_add", "reorder_on_reload"):
        if key in raw:
            values[key] = _require_bool(raw[key], field=f"{field_prefix}{key}")
    return values


def _require_int(value: Any, *, field: str, minimum: Optional[int] = None) -> int:
    """Validate that a value is an integer, rejecting booleans."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise LayoutValidationError(f"{field} must be an integer.")
    if minimum is not None and value < minimum:
        raise LayoutValidationError(f"{field} must be at least {minimum}.")
    return value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise LayoutValidationError(f"{field} must be true or false.")
    return value


def _validate_activity_order(value: Any, *, field: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise LayoutValidationError(f"{field} must be a list of strings.")
    rules: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise LayoutValidationError(f"{field} must be a list of strings.")
        stripped = item.strip()
        if stripped:
            rules.append(stripped)
    return rules
