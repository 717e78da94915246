from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..attendance.aggregation import (
    aggregate,
    branch_summary,
    daily_trend,
    distribution,
    normalize_presence,
    overall_percent,
    percentage,
    roster_from_sessions,
    subject_matrix,
)
from ..attendance.filters import SessionFilter
from ..attendance.model import (
    AttendanceSession,
    BranchSummaryRow,
    DailyTrendPoint,
    DistributionBucket,
    StudentStat,
    SubjectMatrix,
)
from ..attendance.repository import AttendanceRepository
from ..core.constants import ALL_SECTIONS
from ..students.model import Student
from ..students.service import RosterService
from ..users.model import StudentPrincipal


@dataclass(frozen=True)
class DashboardData:
    sessions: int
    stats: list[StudentStat]
    distribution: list[DistributionBucket]
    trend: list[DailyTrendPoint]
    branches: list[BranchSummaryRow]
    overall_percent: int


@dataclass(frozen=True)
class SubjectReport:
    students: list[Student]
    matrix: SubjectMatrix


@dataclass(frozen=True)
class StudentAttendance:
    present: int
    classes: int
    percent: int
    recent: list[dict]


class AnalyticsService:
    """Use case: attendance dashboards and reports (read only)."""

    def __init__(self, sessions: AttendanceRepository, roster: RosterService):
        self._sessions = sessions
        self._roster = roster

    def _scoped_sessions(self, flt: SessionFilter) -> list[AttendanceSession]:
        rows = self._sessions.list_sessions(
            start_date=flt.start_date,
            end_date=flt.end_date,
            branches=sorted(flt.branches) or None,
        )
        return flt.apply(rows)

    def institution_dashboard(self, flt: SessionFilter) -> DashboardData:
        sessions = self._scoped_sessions(flt)
        ids = {sid for s in sessions for sid in (s.records or {})}
        roster = roster_from_sessions(sessions, self._roster.names_for(sorted(ids)))
        stats = aggregate(roster, sessions)
        return DashboardData(
            sessions=len(sessions),
            stats=stats,
            distribution=distribution(stats),
            trend=daily_trend(sessions),
            branches=branch_summary(stats),
            overall_percent=overall_percent(stats),
        )

    def subject_report(
        self,
        *,
        branch: str,
        year: int,
        section: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subjects: Iterable[str] = (),
    ) -> SubjectReport:
        section = (section or ALL_SECTIONS).strip().upper()
        cohort_section = None if section == ALL_SECTIONS else section
        roster = self._roster.roster_for(branch=branch, year=year, section=cohort_section)
        flt = SessionFilter(
            start_date=start_date,
            end_date=end_date,
            branches=frozenset({branch.upper()}),
            year=int(year),
            section=section,
        )
        matrix = subject_matrix(roster, self._scoped_sessions(flt), subjects)
        return SubjectReport(students=roster, matrix=matrix)

    def student_attendance(self, student: StudentPrincipal, *, recent_limit: int = 10) -> StudentAttendance:
        """Attendance as a student sees it: only sessions that carry a mark for them count."""
        if not student.branch or not student.year:
            return StudentAttendance(present=0, classes=0, percent=0, recent=[])

        sessions = self._sessions.list_for_cohort(branch=student.branch, year=student.year, section=student.section)
        reg_no = student.registration_number

        marked = [s for s in sessions if reg_no in (s.records or {})]
        present = sum(1 for s in marked if normalize_presence(s.records[reg_no]))

        marked.sort(key=lambda s: (s.date, s.created_at or datetime.min), reverse=True)
        recent = [
            {
                "session_id": s.session_id,
                "date": s.date,
                "subject": s.subject,
                "topic": s.topic,
                "faculty_name": s.faculty_name,
                "status": "Present" if normalize_presence(s.records[reg_no]) else "Absent",
            }
            for s in marked[:recent_limit]
        ]
        return StudentAttendance(present=present, classes=len(marked), percent=percentage(present, len(marked)), recent=recent)
