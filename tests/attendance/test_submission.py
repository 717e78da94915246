from __future__ import annotations

import pytest

from college_portal.attendance.submission import finalize_records, parse_mark_status
from college_portal.core.enums import MarkStatus
from college_portal.core.exceptions import UnmarkedStudentsError, ValidationError

ROSTER = ["S1", "S2", "S3"]


def test_all_marked():
    result = finalize_records(ROSTER, {"S1": "Present", "S2": "Absent", "S3": "present"})
    assert result.records == {"S1": "Present", "S2": "Absent", "S3": "Present"}
    assert (result.stats.present, result.stats.absent, result.stats.total) == (2, 1, 3)


def test_unmarked_without_default_lists_students():
    with pytest.raises(UnmarkedStudentsError) as exc:
        finalize_records(ROSTER, {"S1": "Present"})
    assert exc.value.unmarked == ["S2", "S3"]
    assert str(exc.value) == "2 students do not have a marked status"


@pytest.mark.parametrize("default, present", [(MarkStatus.PRESENT, 3), (MarkStatus.ABSENT, 1)])
def test_default_applies_to_unmarked(default, present):
    result = finalize_records(ROSTER, {"S1": "Present"}, default)
    assert set(result.records) == set(ROSTER)
    assert result.stats.present == present
    assert result.records["S1"] == "Present"


def test_marks_outside_roster_are_dropped():
    result = finalize_records(["S1"], {"S1": True, "X9": "Present"})
    assert result.records == {"S1": "Present"}


def test_parse_mark_status():
    assert parse_mark_status(None) is None
    assert parse_mark_status("") is None
    assert parse_mark_status("absent") is MarkStatus.ABSENT
    assert parse_mark_status(True) is MarkStatus.PRESENT
    assert parse_mark_status(False) is MarkStatus.ABSENT
    with pytest.raises(ValidationError):
        parse_mark_status("late")
