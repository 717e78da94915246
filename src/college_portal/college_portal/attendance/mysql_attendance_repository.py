from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import MarkStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceSession, SessionStats
from .repository import ActivityLogRepository, AttendanceRepository

_SESSION_COLUMNS = """
    session_id, session_date, branch, year, section, faculty_id, faculty_name,
    topic, subject, stats_present, stats_absent, stats_total, created_at, last_modified
"""


def _date_str(value) -> str:
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _status_text(value) -> str:
    if isinstance(value, bool):
        return MarkStatus.PRESENT.value if value else MarkStatus.ABSENT.value
    return str(value)


def _to_session(row: dict, records: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=row["session_id"],
        date=_date_str(row["session_date"]),
        branch=row["branch"],
        year=int(row["year"]),
        section=row["section"],
        faculty_id=row["faculty_id"],
        faculty_name=row.get("faculty_name"),
        created_at=row.get("created_at"),
        topic=row.get("topic"),
        subject=row.get("subject"),
        records=records,
        stats=SessionStats(
            present=int(row.get("stats_present") or 0),
            total=int(row.get("stats_total") or 0),
            absent=int(row.get("stats_absent") or 0),
        ),
        last_modified=row.get("last_modified"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_marks(self, cur, session_ids: list[str]) -> dict[str, dict[str, str]]:
        marks: dict[str, dict[str, str]] = {sid: {} for sid in session_ids}
        if not session_ids:
            return marks
        cur.execute(
            f"""
            SELECT session_id, registration_number, status
            FROM attendance_marks
            WHERE session_id IN ({in_clause(session_ids)})
            """,
            tuple(session_ids),
        )
        for r in fetchall(cur):
            marks[r["session_id"]][r["registration_number"]] = r["status"]
        return marks

    def _query_sessions(self, sql: str, params: tuple) -> list[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)
            marks = self._load_marks(cur, [r["session_id"] for r in rows])
            return [_to_session(r, marks[r["session_id"]]) for r in rows]

    def get(self, session_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (session_id,))
            row = fetchone(cur)
            if not row:
                return None
            return _to_session(row, self._load_marks(cur, [session_id])[session_id])

    def save(self, session: AttendanceSession) -> None:
        stats = session.stats or SessionStats()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    session_id, session_date, branch, year, section, faculty_id, faculty_name,
                    topic, subject, stats_present, stats_absent, stats_total, created_at, last_modified
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    faculty_id=VALUES(faculty_id), faculty_name=VALUES(faculty_name),
                    topic=VALUES(topic), subject=VALUES(subject),
                    stats_present=VALUES(stats_present), stats_absent=VALUES(stats_absent),
                    stats_total=VALUES(stats_total), last_modified=VALUES(last_modified)
                """,
                (
                    session.session_id,
                    session.date,
                    session.branch,
                    int(session.year),
                    session.section,
                    session.faculty_id,
                    session.faculty_name,
                    session.topic,
                    session.subject,
                    stats.present,
                    stats.absent,
                    stats.total,
                    session.created_at,
                    session.last_modified,
                ),
            )
            cur.execute("DELETE FROM attendance_marks WHERE session_id=%s", (session.session_id,))
            if session.records:
                cur.executemany(
                    "INSERT INTO attendance_marks(session_id, registration_number, status) VALUES(%s,%s,%s)",
                    [(session.session_id, reg_no, _status_text(status)) for reg_no, status in session.records.items()],
                )

    def list_sessions(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        branches: Optional[Iterable[str]] = None,
    ) -> Sequence[AttendanceSession]:
        sql = f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE 1=1"
        params: list = []
        if start_date:
            sql += " AND session_date >= %s"
            params.append(start_date)
        if end_date:
            sql += " AND session_date <= %s"
            params.append(end_date)
        branch_list = list(branches or [])
        if branch_list:
            sql += f" AND branch IN ({in_clause(branch_list)})"
            params.extend(branch_list)
        sql += " ORDER BY session_date DESC, created_at DESC"
        return self._query_sessions(sql, tuple(params))

    def list_for_cohort(self, *, branch: str, year: int, section: Optional[str] = None) -> Sequence[AttendanceSession]:
        sql = f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE branch=%s AND year=%s"
        params: list = [branch, int(year)]
        if section:
            sql += " AND section=%s"
            params.append(section)
        sql += " ORDER BY session_date DESC"
        return self._query_sessions(sql, tuple(params))

    def recent_for_faculty(self, faculty_id: str, limit: int) -> Sequence[AttendanceSession]:
        return self._query_sessions(
            f"""
            SELECT {_SESSION_COLUMNS} FROM attendance_sessions
            WHERE faculty_id=%s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (faculty_id, int(limit)),
        )


class MySQLActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, message: str, log_type: str, branch: Optional[str] = None, year: Optional[int] = None, faculty_name: Optional[str] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(message, log_type, branch, year, faculty_name)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (message, log_type, branch, year, faculty_name),
            )
