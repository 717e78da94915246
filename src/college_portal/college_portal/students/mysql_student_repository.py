from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Student
from .repository import StudentRepository

_COLUMNS = "registration_number, name, email, branch, year, section, entry_type"


def _to_student(row: dict) -> Student:
    entry_type = row.get("entry_type")
    return Student(
        student_id=row["registration_number"],
        name=row["name"],
        branch=row.get("branch"),
        year=int(row["year"]) if row.get("year") is not None else None,
        section=row.get("section"),
        entry_type=EntryType(entry_type) if entry_type else None,
        email=row.get("email"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_cohort(self, *, branch: str, year: int, section: Optional[str] = None) -> Sequence[Student]:
        sql = f"SELECT {_COLUMNS} FROM students WHERE branch=%s AND year=%s"
        params: list = [branch, int(year)]
        if section:
            sql += " AND section=%s"
            params.append(section)
        sql += " ORDER BY registration_number"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_student(r) for r in fetchall(cur)]

    def names_for(self, student_ids: Iterable[str]) -> Mapping[str, str]:
        ids = list(dict.fromkeys(student_ids))
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT registration_number, name FROM students WHERE registration_number IN ({in_clause(ids)})",
                tuple(ids),
            )
            return {r["registration_number"]: r["name"] for r in fetchall(cur)}

    def upsert_many(self, students: Sequence[Student]) -> int:
        if not students:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO students(registration_number, name, email, branch, year, section, entry_type)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), email=VALUES(email), branch=VALUES(branch),
                    year=VALUES(year), section=VALUES(section), entry_type=VALUES(entry_type)
                """,
                [
                    (
                        s.student_id,
                        s.name,
                        s.email,
                        s.branch,
                        s.year,
                        s.section,
                        s.entry_type.value if s.entry_type else None,
                    )
                    for s in students
                ],
            )
            return len(students)
