from __future__ import annotations

from college_portal.attendance.filters import SessionFilter
from college_portal.attendance.model import AttendanceSession


def session(date, branch="EEE", year=2, section="A"):
    return AttendanceSession(session_id=f"{date}_{branch}", date=date, branch=branch, year=year, section=section, faculty_id="F")


def test_default_filter_matches_everything_dated():
    assert SessionFilter().matches(session("2024-01-01"))
    assert not SessionFilter().matches(session(""))


def test_date_bounds_are_inclusive():
    flt = SessionFilter(start_date="2024-01-02", end_date="2024-01-04")
    dates = ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"]
    assert [s.date for s in flt.apply(session(d) for d in dates)] == dates[1:4]


def test_open_ended_bounds():
    assert SessionFilter(start_date="2024-01-02").matches(session("2030-12-31"))
    assert SessionFilter(end_date="2024-01-02").matches(session("2001-01-01"))


def test_branch_year_section():
    flt = SessionFilter(branches=frozenset({"EEE", "CSE"}), year=2, section="B")
    assert flt.matches(session("2024-01-01", "CSE", 2, "B"))
    assert not flt.matches(session("2024-01-01", "ECE", 2, "B"))
    assert not flt.matches(session("2024-01-01", "EEE", 3, "B"))
    assert not flt.matches(session("2024-01-01", "EEE", 2, "A"))


def test_wildcards():
    flt = SessionFilter(year=0, section="ALL")
    assert flt.matches(session("2024-01-01", "MECH", 4, "C"))
