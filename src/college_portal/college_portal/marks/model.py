from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ExamType


@dataclass(frozen=True)
class Subject:
    id: str
    name: str


DEFAULT_SUBJECTS = (Subject(id="sub_1", name="Subject 1"),)


@dataclass(frozen=True)
class ScoreEntry:
    """Marks of one student in one subject; ``None`` means not entered yet."""

    exam: Optional[int] = None
    assignment: Optional[int] = None

    @property
    def has_score(self) -> bool:
        return self.exam is not None or self.assignment is not None

    @property
    def total(self) -> int:
        return (self.exam or 0) + (self.assignment or 0)


@dataclass(frozen=True)
class MarksSheet:
    """Consolidated marks of a class section for one exam."""

    sheet_id: str
    exam_type: ExamType
    branch: str
    year: int
    section: str
    faculty_id: str = ""
    faculty_name: Optional[str] = None
    subjects: list[Subject] = field(default_factory=list)
    marks: dict[str, dict[str, ScoreEntry]] = field(default_factory=dict)
    updated_at: Optional[datetime] = None


def sheet_key(*, exam_type: ExamType, branch: str, year: int, section: str) -> str:
    return f"{exam_type.value}_{branch}_{int(year)}_{section}".replace(" ", "_")


def subjects_key(*, branch: str, year: int, semester: Optional[int] = None) -> str:
    key = f"{branch}_{int(year)}"
    return f"{key}_{int(semester)}" if semester else key
