"""
Priority rules used to sort the activities of a window.

Rules come from the ``activity_order`` list of a window configuration:

* ``activity@module`` matches one activity,
* ``module`` matches every activity of a module,
* ``*`` matches anything.

Matching ignores case.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from island_core.logger import get_logger
from island_shared.activity_id import ActivityId

_LOGGER = get_logger()

WILDCARD = "*"


class RuleParseError(ValueError):
    """Raised when a priority rule string cannot be parsed."""


@dataclass(frozen=True, slots=True)
class ActivityMatch:
    module: Optional[str] = None
    activity: Optional[str] = None

    @classmethod
    def parse(cls, rule: str) -> "ActivityMatch":
        cleaned = rule.strip()
        if not cleaned:
            raise RuleParseError("rule must not be empty.")
        if cleaned == WILDCARD:
            return cls()
        parts = cleaned.split("@")
        if len(parts) == 1:
            return cls(module=parts[0])
        if len(parts) == 2 and parts[0] and parts[1]:
            return cls(module=parts[1], activity=parts[0])
        raise RuleParseError(f"invalid rule: {rule!r}")

    @property
    def is_wildcard(self) -> bool:
        return self.module is None

    def matches(self, activity_id: ActivityId) -> bool:
        if self.module is None:
            return True
        if activity_id.module.casefold() != self.module.casefold():
            return False
        if self.activity is None:
            return True
        return activity_id.activity.casefold() == self.activity.casefold()

    def __str__(self) -> str:
        if self.module is None:
            return WILDCARD
        if self.activity is None:
            return self.module
        return f"{self.activity}@{self.module}"


def parse_rules(rules: Iterable[str]) -> List[ActivityMatch]:
    """Parse rule strings, dropping the ones that are malformed."""
    parsed: List[ActivityMatch] = []
    for rule in rules:
        try:
            parsed.append(ActivityMatch.parse(rule))
        except RuleParseError as exc:
            _LOGGER.warning("Ignoring activity_order rule {!r}: {}", rule, exc)
    return parsed


def sort_activities(activities: Sequence[ActivityId], rules: Sequence[ActivityMatch]) -> List[ActivityId]:
    """
    Sort ``activities`` into one bucket per rule, in rule order.

    Each activity lands in the first specific rule that matches it; activities
    matched by no specific rule go to the first wildcard bucket, or after all
    buckets when there is no wildcard. Order inside a bucket is preserved, so
    the result is always a permutation of the input.
    """
    if not rules:
        return list(activities)

    buckets: List[List[ActivityId]] = [[] for _ in rules]
    wildcard_index = next((index for index, rule in enumerate(rules) if rule.is_wildcard), None)
    leftovers: List[ActivityId] = []

    for activity_id in activities:
        for index, rule in enumerate(rules):
            if not rule.is_wildcard and rule.matches(activity_id):
                buckets[index].append(activity_id)
                break
        else:
            if wildcard_index is None:
                leftovers.append(activity_id)
            else:
                buckets[wildcard_index].append(activity_id)

    ordered = [activity_id for bucket in buckets for activity_id in bucket]
    ordered.extend(leftovers)
    return ordered
