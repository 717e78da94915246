from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

PresenceValue = Union[str, bool, None]


@dataclass(frozen=True)
class SessionStats:
    """Summary counts stored alongside a session's marks."""

    present: int = 0
    total: int = 0
    absent: int = 0


@dataclass(frozen=True)
class AttendanceSession:
    """One conducted class for a branch/year/section cohort on a date.

    ``records`` maps registration number -> mark. Historical rows may hold
    booleans or lower-case strings instead of ``Present``/``Absent``.
    """

    session_id: str
    date: str
    branch: str
    year: int
    section: str
    faculty_id: str
    created_at: Optional[datetime] = None
    faculty_name: Optional[str] = None
    topic: Optional[str] = None
    subject: Optional[str] = None
    records: dict[str, PresenceValue] = field(default_factory=dict)
    stats: Optional[SessionStats] = None
    last_modified: Optional[datetime] = None


def session_key(*, date: str, branch: str, year: int, section: str) -> str:
    """Natural key: one session per cohort per day."""
    return f"{date}_{branch}_{int(year)}_{section}"


@dataclass(frozen=True)
class StudentStat:
    student_id: str
    name: str
    branch: Optional[str]
    year: Optional[int]
    section: Optional[str]
    present: int
    total: int
    percent: int


@dataclass(frozen=True)
class DistributionBucket:
    label: str
    low: int
    high: int
    count: int


@dataclass(frozen=True)
class DailyTrendPoint:
    date: str
    percent: int
    present: int
    total: int
    topic: str
    branch: str
    year: Optional[int]
    section: str


@dataclass(frozen=True)
class BranchSummaryRow:
    branch: str
    total_students: int
    avg_attendance: int


@dataclass(frozen=True)
class SubjectMatrix:
    """Conducted classes (CC) per subject and classes attended (CA) per student."""

    subjects: list[str]
    conducted: dict[str, int]
    attended: dict[str, dict[str, int]]
