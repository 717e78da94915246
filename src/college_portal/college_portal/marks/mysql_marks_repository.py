from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ExamType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import MarksSheet, ScoreEntry, Subject
from .repository import MarksRepository

_SHEET_COLUMNS = "sheet_id, exam_type, branch, year, section, faculty_id, faculty_name, subjects, marks, updated_at"


def _subjects_from_json(raw) -> list[Subject]:
    return [Subject(id=str(s["id"]), name=str(s["name"])) for s in load_json(raw, [])]


def _subjects_to_json(subjects: Sequence[Subject]) -> str:
    return dump_json([{"id": s.id, "name": s.name} for s in subjects])


def _to_sheet(row: dict) -> MarksSheet:
    raw_marks = load_json(row.get("marks"), {})
    marks = {
        reg_no: {
            subject_id: ScoreEntry(exam=entry.get("exam"), assignment=entry.get("assignment"))
            for subject_id, entry in per_subject.items()
        }
        for reg_no, per_subject in raw_marks.items()
    }
    return MarksSheet(
        sheet_id=row["sheet_id"],
        exam_type=ExamType(row["exam_type"]),
        branch=row["branch"],
        year=int(row["year"]),
        section=row["section"],
        faculty_id=row["faculty_id"],
        faculty_name=row.get("faculty_name"),
        subjects=_subjects_from_json(row.get("subjects")),
        marks=marks,
        updated_at=row.get("updated_at"),
    )


class MySQLMarksRepository(MarksRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_subjects(self, config_id: str) -> Optional[list[Subject]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subjects FROM class_subjects WHERE config_id=%s", (config_id,))
            row = fetchone(cur)
            return _subjects_from_json(row["subjects"]) if row else None

    def save_subjects(self, config_id: str, subjects: Sequence[Subject]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_subjects(config_id, subjects) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE subjects=VALUES(subjects)
                """,
                (config_id, _subjects_to_json(subjects)),
            )

    def get_sheet(self, sheet_id: str) -> Optional[MarksSheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHEET_COLUMNS} FROM marks_sheets WHERE sheet_id=%s", (sheet_id,))
            row = fetchone(cur)
            return _to_sheet(row) if row else None

    def save_sheet(self, sheet: MarksSheet) -> None:
        marks = {
            reg_no: {
                subject_id: {"exam": e.exam, "assignment": e.assignment, "total": e.total}
                for subject_id, e in per_subject.items()
            }
            for reg_no, per_subject in sheet.marks.items()
        }
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO marks_sheets(sheet_id, exam_type, branch, year, section, faculty_id, faculty_name, subjects, marks, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    faculty_id=VALUES(faculty_id), faculty_name=VALUES(faculty_name),
                    subjects=VALUES(subjects), marks=VALUES(marks), updated_at=VALUES(updated_at)
                """,
                (
                    sheet.sheet_id,
                    sheet.exam_type.value,
                    sheet.branch,
                    int(sheet.year),
                    sheet.section,
                    sheet.faculty_id,
                    sheet.faculty_name,
                    _subjects_to_json(sheet.subjects),
                    dump_json(marks),
                    sheet.updated_at,
                ),
            )

    def sheets_for_cohort(self, *, branch: str, year: int) -> Sequence[MarksSheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHEET_COLUMNS} FROM marks_sheets WHERE branch=%s AND year=%s", (branch, int(year)))
            return [_to_sheet(r) for r in fetchall(cur)]
