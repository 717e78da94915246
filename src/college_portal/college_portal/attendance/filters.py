from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.constants import ALL_SECTIONS, ALL_YEARS
from .model import AttendanceSession


@dataclass(frozen=True)
class SessionFilter:
    """Scope for an analytics query.

    Dates are inclusive YYYY-MM-DD bounds (``None`` leaves that side open).
    An empty ``branches`` set means every branch, ``year == 0`` every year
    and ``section == "ALL"`` every section.
    """

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    branches: frozenset[str] = field(default_factory=frozenset)
    year: int = ALL_YEARS
    section: str = ALL_SECTIONS

    def matches(self, session: AttendanceSession) -> bool:
        if not session.date:
            return False
        if self.start_date and session.date < self.start_date:
            return False
        if self.end_date and session.date > self.end_date:
            return False
        if self.branches and session.branch not in self.branches:
            return False
        if self.year != ALL_YEARS and session.year != self.year:
            return False
        if self.section != ALL_SECTIONS and session.section != self.section:
            return False
        return True

    def apply(self, sessions: Iterable[AttendanceSession]) -> list[AttendanceSession]:
        return [s for s in sessions if self.matches(s)]
