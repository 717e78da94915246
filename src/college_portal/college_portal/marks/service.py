from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.aggregation import ratio_half_up
from ..common.datetime_utils import now_local
from ..common.validators import optional_score, require_non_empty
from ..core.constants import ASSIGNMENT_MAX_MARKS, EXAM_MAX_MARKS, SUBJECT_MAX_MARKS
from ..core.enums import ExamType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import StaffPrincipal, StudentPrincipal
from .model import DEFAULT_SUBJECTS, MarksSheet, ScoreEntry, Subject, sheet_key, subjects_key
from .repository import MarksRepository

logger = logging.getLogger(__name__)

EDITOR_ROLES = {Role.FACULTY, Role.HOD, Role.ADMIN}


def parse_exam_type(value: str) -> ExamType:
    try:
        return ExamType(value)
    except ValueError:
        raise ValidationError(f"Unknown exam type: {value!r}")


def parse_score_entry(raw: Mapping) -> ScoreEntry:
    return ScoreEntry(
        exam=optional_score(raw.get("exam"), "Exam marks", EXAM_MAX_MARKS),
        assignment=optional_score(raw.get("assignment"), "Assignment marks", ASSIGNMENT_MAX_MARKS),
    )


def grand_total(sheet: MarksSheet, student_id: str) -> tuple[int, bool]:
    """Sum of subject totals over the sheet's current subjects, and whether any marks exist."""
    per_subject = sheet.marks.get(student_id, {})
    total = 0
    has_any = False
    for subject in sheet.subjects:
        entry = per_subject.get(subject.id)
        if entry is None:
            continue
        total += entry.total
        has_any = has_any or entry.has_score
    return total, has_any


def average_percent(sheets: Iterable[MarksSheet], student_id: str) -> int:
    """Marks gained over marks possible, across every entered subject score."""
    gained = 0
    possible = 0
    for sheet in sheets:
        for entry in sheet.marks.get(student_id, {}).values():
            if entry.has_score:
                gained += entry.total
                possible += SUBJECT_MAX_MARKS
    return ratio_half_up(gained * 100, possible)


class MarksService:
    """Use case: subject configuration and internal marks entry."""

    def __init__(self, marks: MarksRepository):
        self._marks = marks

    @staticmethod
    def _require_editor(actor) -> None:
        if not isinstance(actor, StaffPrincipal) or actor.kind not in EDITOR_ROLES:
            raise AuthorizationError("Only faculty can manage marks")

    def subjects_for(self, *, branch: str, year: int, semester: Optional[int] = None) -> list[Subject]:
        stored = self._marks.get_subjects(subjects_key(branch=branch, year=year, semester=semester))
        return list(stored) if stored else list(DEFAULT_SUBJECTS)

    def save_subjects(
        self,
        actor: StaffPrincipal,
        *,
        branch: str,
        year: int,
        subjects: Sequence[Mapping],
        semester: Optional[int] = None,
    ) -> list[Subject]:
        self._require_editor(actor)
        cleaned: list[Subject] = []
        seen: set[str] = set()
        for raw in subjects:
            subject_id = require_non_empty(str(raw.get("id") or ""), "Subject id")
            name = require_non_empty(str(raw.get("name") or ""), "Subject name")
            if subject_id in seen:
                raise ValidationError(f"Duplicate subject id: {subject_id}")
            seen.add(subject_id)
            cleaned.append(Subject(id=subject_id, name=name))

        self._marks.save_subjects(subjects_key(branch=branch, year=year, semester=semester), cleaned)
        return cleaned

    def load_sheet(self, *, exam_type: ExamType, branch: str, year: int, section: str) -> MarksSheet:
        sheet_id = sheet_key(exam_type=exam_type, branch=branch, year=year, section=section)
        sheet = self._marks.get_sheet(sheet_id)
        if sheet:
            return sheet
        return MarksSheet(
            sheet_id=sheet_id,
            exam_type=exam_type,
            branch=branch,
            year=int(year),
            section=section,
            subjects=self.subjects_for(branch=branch, year=year),
        )

    def save_sheet(
        self,
        actor: StaffPrincipal,
        *,
        exam_type: ExamType,
        branch: str,
        year: int,
        section: str,
        marks: Mapping[str, Mapping[str, Mapping]],
        now: Optional[datetime] = None,
    ) -> MarksSheet:
        self._require_editor(actor)
        subjects = self.subjects_for(branch=branch, year=year)
        known = {s.id for s in subjects}

        parsed: dict[str, dict[str, ScoreEntry]] = {}
        for reg_no, per_subject in marks.items():
            row: dict[str, ScoreEntry] = {}
            for subject_id, raw in (per_subject or {}).items():
                if subject_id not in known:
                    raise ValidationError(f"Unknown subject: {subject_id}")
                row[subject_id] = parse_score_entry(raw or {})
            parsed[reg_no] = row

        sheet = MarksSheet(
            sheet_id=sheet_key(exam_type=exam_type, branch=branch, year=year, section=section),
            exam_type=exam_type,
            branch=branch,
            year=int(year),
            section=section,
            faculty_id=actor.employee_id,
            faculty_name=actor.name,
            subjects=subjects,
            marks=parsed,
            updated_at=now or now_local(),
        )
        self._marks.save_sheet(sheet)
        logger.info("Marks sheet %s saved by %s (%d students)", sheet.sheet_id, actor.employee_id, len(parsed))
        return sheet

    def student_average(self, student: StudentPrincipal) -> int:
        if not student.branch or not student.year:
            return 0
        sheets = self._marks.sheets_for_cohort(branch=student.branch, year=student.year)
        return average_percent(sheets, student.registration_number)

    def subject_count(self, student: StudentPrincipal) -> int:
        if not student.branch or not student.year:
            return 0
        stored = self._marks.get_subjects(subjects_key(branch=student.branch, year=student.year))
        return len(stored or [])
