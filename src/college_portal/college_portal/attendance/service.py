from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..common.datetime_utils import now_local, ordinal, parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_EDIT_WINDOW_MINUTES, DEFAULT_RECENT_SUBMISSIONS
from ..core.enums import MarkStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..students.service import RosterService
from ..users.model import StaffPrincipal
from .edit_window import can_edit, ensure_editable
from .model import AttendanceSession, PresenceValue, session_key
from .repository import ActivityLogRepository, AttendanceRepository
from .submission import finalize_records

logger = logging.getLogger(__name__)

MARKING_ROLES = {Role.FACULTY, Role.HOD}


@dataclass(frozen=True)
class RecentSubmission:
    session: AttendanceSession
    editable: bool
    minutes_ago: int

    @property
    def time_ago(self) -> str:
        if self.minutes_ago < 60:
            return f"{self.minutes_ago}m ago"
        return f"{self.minutes_ago // 60}h ago"


class AttendanceService:
    """Use case: faculty submit and correct class attendance."""

    def __init__(
        self,
        sessions: AttendanceRepository,
        roster: RosterService,
        logs: Optional[ActivityLogRepository] = None,
        *,
        edit_window_minutes: int = DEFAULT_EDIT_WINDOW_MINUTES,
    ):
        self._sessions = sessions
        self._roster = roster
        self._logs = logs
        self._window = timedelta(minutes=int(edit_window_minutes))

    @staticmethod
    def _require_marker(actor: StaffPrincipal) -> None:
        if not isinstance(actor, StaffPrincipal) or actor.kind not in MARKING_ROLES:
            raise AuthorizationError("Only faculty can mark attendance")

    def _roster_ids(self, *, branch: str, year: int, section: str) -> list[str]:
        students = self._roster.roster_for(branch=branch, year=year, section=section)
        if not students:
            raise ValidationError(f"No students found for {branch} year {year} section {section}")
        return [s.student_id for s in students]

    def submit(
        self,
        actor: StaffPrincipal,
        *,
        date: str,
        branch: str,
        year: int,
        section: str,
        marks: Mapping[str, PresenceValue],
        default_for_unmarked: Optional[MarkStatus] = None,
        topic: Optional[str] = None,
        subject: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        self._require_marker(actor)
        now = now or now_local()

        date = parse_iso_date(require_non_empty(date, "Date")).strftime("%Y-%m-%d")
        branch = require_non_empty(branch, "Branch").upper()
        section = require_non_empty(section, "Section").upper()
        year = int(year)

        session_id = session_key(date=date, branch=branch, year=year, section=section)
        if self._sessions.get(session_id):
            raise ValidationError("Attendance for this class and date was already submitted. Edit the existing record instead.")

        finalized = finalize_records(
            self._roster_ids(branch=branch, year=year, section=section),
            marks,
            default_for_unmarked,
        )

        session = AttendanceSession(
            session_id=session_id,
            date=date,
            branch=branch,
            year=year,
            section=section,
            faculty_id=actor.employee_id,
            faculty_name=actor.name,
            created_at=now,
            topic=(topic or "").strip() or None,
            subject=(subject or "").strip() or None,
            records=finalized.records,
            stats=finalized.stats,
        )
        self._sessions.save(session)

        if self._logs:
            self._logs.add(
                message=f"{branch} {ordinal(year)} Year Taken by {actor.name}",
                log_type="attendance",
                branch=branch,
                year=year,
                faculty_name=actor.name,
            )

        logger.info(
            "Attendance %s submitted by %s (%d/%d present)",
            session_id,
            actor.employee_id,
            finalized.stats.present,
            finalized.stats.total,
        )
        return session

    def load_for_edit(self, actor: StaffPrincipal, session_id: str, *, now: Optional[datetime] = None) -> AttendanceSession:
        self._require_marker(actor)
        session = self._sessions.get(session_id)
        if not session:
            raise NotFoundError("Attendance record not found")
        if session.faculty_id != actor.employee_id:
            raise AuthorizationError("Only the faculty member who submitted this attendance can edit it")

        try:
            ensure_editable(session.created_at, now or now_local(), self._window)
        except ValidationError:
            logger.info("Rejected edit of locked attendance %s by %s", session_id, actor.employee_id)
            raise
        return session

    def update(
        self,
        actor: StaffPrincipal,
        session_id: str,
        *,
        marks: Mapping[str, PresenceValue],
        default_for_unmarked: Optional[MarkStatus] = None,
        topic: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        now = now or now_local()
        session = self.load_for_edit(actor, session_id, now=now)

        students = self._roster.roster_for(branch=session.branch, year=session.year, section=session.section)
        ids = [s.student_id for s in students] or list(session.records)
        finalized = finalize_records(ids, marks, default_for_unmarked)

        updated = replace(
            session,
            records=finalized.records,
            stats=finalized.stats,
            topic=(topic.strip() or None) if topic is not None else session.topic,
            last_modified=now,
        )
        self._sessions.save(updated)
        logger.info("Attendance %s updated by %s", session_id, actor.employee_id)
        return updated

    def recent_submissions(
        self,
        actor: StaffPrincipal,
        *,
        now: Optional[datetime] = None,
        limit: int = DEFAULT_RECENT_SUBMISSIONS,
    ) -> list[RecentSubmission]:
        now = now or now_local()
        out: list[RecentSubmission] = []
        for session in self._sessions.recent_for_faculty(actor.employee_id, limit):
            minutes = int((now - session.created_at).total_seconds() // 60) if session.created_at else 0
            out.append(
                RecentSubmission(
                    session=session,
                    editable=can_edit(session.created_at, now, self._window),
                    minutes_ago=max(minutes, 0),
                )
            )
        return out
