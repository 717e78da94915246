from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_EMAIL_DOMAIN
from ..core.enums import Branch
from ..identifiers.classifier import classify
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_BRANCH = Branch.EEE.value
DEFAULT_IMPORT_SECTION = "A"


@dataclass(frozen=True)
class ImportResult:
    imported: int
    warnings: dict[str, str] = field(default_factory=dict)
    students: list[Student] = field(default_factory=list)


class RosterService:
    """Use case: cohort rosters and bulk student import."""

    def __init__(self, students: StudentRepository, *, email_domain: str = DEFAULT_EMAIL_DOMAIN):
        self._students = students
        self._email_domain = email_domain

    def roster_for(self, *, branch: str, year: int, section: Optional[str] = None) -> list[Student]:
        branch = require_non_empty(branch, "Branch").upper()
        rows = self._students.list_cohort(branch=branch, year=int(year), section=section or None)
        return sorted(rows, key=lambda s: s.student_id)

    def names_for(self, student_ids) -> Mapping[str, str]:
        return self._students.names_for(student_ids)

    def enroll(self, student: Student) -> None:
        self._students.upsert_many([student])

    def build_student(self, reg_no: str, name: str, *, as_of: Optional[date] = None) -> tuple[Student, Optional[str]]:
        """Student row derived from a registration number, plus its classifier warning."""
        info = classify(reg_no, as_of)
        student = Student(
            student_id=info.identifier,
            name=(name or "").strip() or info.identifier,
            branch=info.branch.value if info.branch else DEFAULT_IMPORT_BRANCH,
            year=info.calculated_year or 1,
            section=DEFAULT_IMPORT_SECTION,
            entry_type=info.entry_type,
            email=f"{info.identifier.lower()}@{self._email_domain}",
        )
        return student, info.warning

    def import_students(self, mapping: Mapping[str, str], *, as_of: Optional[date] = None) -> ImportResult:
        """Import a ``{registration number: name}`` mapping.

        Rows whose number does not classify cleanly are still imported with
        default branch/year/section and reported back in ``warnings``.
        """
        students: list[Student] = []
        warnings: dict[str, str] = {}
        for reg_no, name in mapping.items():
            if not (reg_no or "").strip():
                continue
            student, warning = self.build_student(reg_no, name, as_of=as_of)
            students.append(student)
            if warning:
                warnings[student.student_id] = warning

        imported = self._students.upsert_many(students)
        logger.info("Imported %d students (%d with warnings)", imported, len(warnings))
        return ImportResult(imported=imported, warnings=warnings, students=students)
