from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list_cohort(self, *, branch: str, year: int, section: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

    def names_for(self, student_ids: Iterable[str]) -> Mapping[str, str]:
        """registration number -> name for the ids that exist."""

        raise NotImplementedError

    def upsert_many(self, students: Sequence[Student]) -> int:
        raise NotImplementedError
