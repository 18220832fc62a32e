"""
Shared identity types for activities hosted by the layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActivityIdError(ValueError):
    """Raised when an activity identifier string is malformed."""


class ActivityMode(Enum):
    MINIMAL = "minimal"
    COMPACT = "compact"
    EXPANDED = "expanded"
    OVERLAY = "overlay"

    @property
    def is_minimal(self) -> bool:
        return self is ActivityMode.MINIMAL


@dataclass(frozen=True, order=True, slots=True)
class ActivityId:
    """
    Opaque identity of an activity: the module that registered it plus the
    activity name inside that module.

    Ordering and hashing only look at these two fields, so the same activity
    keeps its identity when its routing metadata changes.
    """

    module: str
    activity: str

    def __post_init__(self) -> None:
        if not self.module or not self.activity:
            raise ActivityIdError("module and activity must be non-empty.")

    @classmethod
    def parse(cls, value: str) -> "ActivityId":
        """Build an identifier from its ``activity@module`` form."""
        if not isinstance(value, str):
            raise ActivityIdError("activity id must be a string.")
        parts = value.strip().split("@")
        if len(parts) != 2:
            raise ActivityIdError(f"activity id must look like 'activity@module': {value!r}")
        activity, module = (part.strip() for part in parts)
        return cls(module=module, activity=activity)

    def __str__(self) -> str:
        return f"{self.activity}@{self.module}"


@dataclass(frozen=True, slots=True)
class ActivityMetadata:
    """Routing hints declared by the producer of an activity."""

    window_name: str = ""
    instance: int = 0
