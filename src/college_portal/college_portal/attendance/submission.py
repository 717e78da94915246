from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..core.enums import MarkStatus
from ..core.exceptions import UnmarkedStudentsError, ValidationError
from .aggregation import normalize_presence
from .model import PresenceValue, SessionStats


@dataclass(frozen=True)
class FinalizedRecords:
    records: dict[str, str]
    stats: SessionStats


def parse_mark_status(value) -> Optional[MarkStatus]:
    if value is None or value == "":
        return None
    if isinstance(value, MarkStatus):
        return value
    if isinstance(value, str):
        try:
            return MarkStatus(value.strip().capitalize())
        except ValueError:
            raise ValidationError(f"Invalid attendance mark: {value!r}")
    return MarkStatus.PRESENT if normalize_presence(value) else MarkStatus.ABSENT


def finalize_records(
    roster_ids: Iterable[str],
    marks: Mapping[str, PresenceValue],
    default_for_unmarked: Optional[MarkStatus] = None,
) -> FinalizedRecords:
    """Give every roster member an explicit mark.

    Raises UnmarkedStudentsError when some students have no mark and no
    default was chosen. Marks for students outside the roster are dropped.
    """
    roster_ids = list(dict.fromkeys(roster_ids))
    parsed = {student_id: parse_mark_status(marks.get(student_id)) for student_id in roster_ids}

    unmarked = [student_id for student_id, status in parsed.items() if status is None]
    if unmarked and default_for_unmarked is None:
        raise UnmarkedStudentsError(unmarked)

    records: dict[str, str] = {}
    present = 0
    for student_id, status in parsed.items():
        status = status or default_for_unmarked
        records[student_id] = status.value
        if status is MarkStatus.PRESENT:
            present += 1

    total = len(records)
    return FinalizedRecords(records=records, stats=SessionStats(present=present, total=total, absent=total - present))
