"""Ordered, id-unique collection of checks."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..exceptions import DuplicateCheckError
from .base import Check, Priority, applies_to


class CheckRegistry:
    """Checks in registration order, keyed by id.

    Registration order is the order findings are reported in.
    """

    def __init__(self, checks: Optional[Iterable[Check]] = None):
        self._checks: dict[str, Check] = {}
        for check in checks or ():
            self.register(check)

    def register(self, check: Check) -> Check:
        if check.id in self._checks:
            raise DuplicateCheckError(check.id)
        self._checks[check.id] = check
        return check

    def get(self, check_id: str) -> Optional[Check]:
        return self._checks.get(check_id)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks

    def __iter__(self) -> Iterator[Check]:
        return iter(self._checks.values())

    def __len__(self) -> int:
        return len(self._checks)

    def select(self, profiles: Iterable[str]) -> list[Check]:
        """Checks whose profiles intersect ``profiles``, in registry order."""
        profiles = set(profiles)
        return [c for c in self._checks.values() if applies_to(c, profiles)]

    def required_ids(self, profiles: Iterable[str]) -> frozenset[str]:
        """Ids of the checks that decide bundle status for ``profiles``."""
        return frozenset(c.id for c in self.select(profiles) if c.priority is Priority.REQUIRED)

    def tagged(self, tag: str) -> list[Check]:
        return [c for c in self._checks.values() if tag in c.tags]
