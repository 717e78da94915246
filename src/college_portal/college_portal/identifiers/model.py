from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Branch, EntryType


@dataclass(frozen=True)
class ClassifiedIdentifier:
    """What a registration number says about a student.

    Derived on demand and never stored. ``warning`` is set when the number
    stops matching the expected layout; fields derived before that point
    are kept.
    """

    identifier: str
    branch: Optional[Branch] = None
    department: Optional[str] = None
    admission_year: Optional[int] = None
    entry_type: Optional[EntryType] = None
    calculated_year: Optional[int] = None
    warning: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.branch is not None and self.warning is None
