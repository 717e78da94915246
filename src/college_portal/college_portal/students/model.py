from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EntryType


@dataclass(frozen=True)
class Student:
    """Roster entry, keyed by registration number."""

    student_id: str
    name: str
    branch: Optional[str] = None
    year: Optional[int] = None
    section: Optional[str] = None
    entry_type: Optional[EntryType] = None
    email: Optional[str] = None
