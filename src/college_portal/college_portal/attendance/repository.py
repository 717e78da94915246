from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceSession


class AttendanceRepository(Protocol):
    def get(self, session_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def save(self, session: AttendanceSession) -> None:
        """Insert or overwrite a session together with all of its marks."""

        raise NotImplementedError

    def list_sessions(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        branches: Optional[Iterable[str]] = None,
    ) -> Sequence[AttendanceSession]:
        """Coarse pre-filter for analytics; SessionFilter does the exact scoping."""

        raise NotImplementedError

    def list_for_cohort(self, *, branch: str, year: int, section: Optional[str] = None) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def recent_for_faculty(self, faculty_id: str, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError


class ActivityLogRepository(Protocol):
    def add(self, *, message: str, log_type: str, branch: Optional[str] = None, year: Optional[int] = None, faculty_name: Optional[str] = None) -> None:
        raise NotImplementedError
