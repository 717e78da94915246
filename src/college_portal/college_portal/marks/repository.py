from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import MarksSheet, Subject


class MarksRepository(Protocol):
    def get_subjects(self, config_id: str) -> Optional[list[Subject]]:
        raise NotImplementedError

    def save_subjects(self, config_id: str, subjects: Sequence[Subject]) -> None:
        raise NotImplementedError

    def get_sheet(self, sheet_id: str) -> Optional[MarksSheet]:
        raise NotImplementedError

    def save_sheet(self, sheet: MarksSheet) -> None:
        raise NotImplementedError

    def sheets_for_cohort(self, *, branch: str, year: int) -> Sequence[MarksSheet]:
        raise NotImplementedError
