"""Attendance statistics computed from session records.

Everything here is a pure function over in-memory data: the services load
rosters and sessions from the repositories and pass them in.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Iterable, Mapping, Optional, Sequence

from ..core.constants import UNKNOWN_BRANCH
from ..students.model import Student
from .model import (
    AttendanceSession,
    BranchSummaryRow,
    DailyTrendPoint,
    DistributionBucket,
    PresenceValue,
    StudentStat,
    SubjectMatrix,
)

# (label, low, high) inclusive, highest first.
DISTRIBUTION_RANGES: tuple[tuple[str, int, int], ...] = (
    ("90-100", 90, 100),
    ("80-89", 80, 89),
    ("70-79", 70, 79),
    ("60-69", 60, 69),
    ("<60", 0, 59),
)

UNKNOWN_SUBJECT = "Unknown"


def normalize_presence(value: PresenceValue) -> bool:
    """Interpret a stored mark as present/absent.

    Older sessions stored booleans or lower-case strings, so boolean
    ``True`` and any casing of ``"present"`` count as present. Everything
    else, a missing mark included, is absent.
    """
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() == "present"
    return False


def ratio_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with .5 rounding up, 0 for an empty denominator."""
    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def percentage(part: int, whole: int) -> int:
    return ratio_half_up(part * 100, whole)


def aggregate(roster: Iterable[Student], sessions: Sequence[AttendanceSession]) -> list[StudentStat]:
    """Per-student present/total/percent over ``sessions``.

    Every session counts toward every student's total: a student without a
    mark in a session was not present in it.
    """
    total = len(sessions)
    students: "OrderedDict[str, Student]" = OrderedDict()
    for s in roster:
        students.setdefault(s.student_id, s)

    present = {student_id: 0 for student_id in students}
    for session in sessions:
        records = session.records or {}
        for student_id in students:
            if normalize_presence(records.get(student_id)):
                present[student_id] += 1

    stats = [
        StudentStat(
            student_id=s.student_id,
            name=s.name,
            branch=s.branch,
            year=s.year,
            section=s.section,
            present=present[s.student_id],
            total=total,
            percent=percentage(present[s.student_id], total),
        )
        for s in students.values()
    ]
    stats.sort(key=lambda st: st.student_id)
    return stats


def roster_from_sessions(sessions: Iterable[AttendanceSession], names: Optional[Mapping[str, str]] = None) -> list[Student]:
    """Students that appear in any session's records.

    Branch/year/section come from the first session a student is seen in;
    names fall back to the registration number.
    """
    names = names or {}
    seen: "OrderedDict[str, Student]" = OrderedDict()
    for session in sessions:
        for student_id in (session.records or {}):
            if student_id in seen:
                continue
            seen[student_id] = Student(
                student_id=student_id,
                name=names.get(student_id) or student_id,
                branch=session.branch,
                year=session.year,
                section=session.section,
            )
    return list(seen.values())


def distribution(stats: Iterable[StudentStat]) -> list[DistributionBucket]:
    counts = [0] * len(DISTRIBUTION_RANGES)
    for st in stats:
        for i, (_, low, _) in enumerate(DISTRIBUTION_RANGES[:-1]):
            if st.percent >= low:
                counts[i] += 1
                break
        else:
            counts[-1] += 1

    return [
        DistributionBucket(label=label, low=low, high=high, count=counts[i])
        for i, (label, low, high) in enumerate(DISTRIBUTION_RANGES)
    ]


def daily_trend(sessions: Iterable[AttendanceSession]) -> list[DailyTrendPoint]:
    """Per-session attendance, using the session's own records as denominator."""
    points: list[DailyTrendPoint] = []
    for session in sessions:
        values = list((session.records or {}).values())
        total = len(values)
        present = sum(1 for v in values if normalize_presence(v))

        if total == 0 and session.stats is not None:
            total = session.stats.total or 0
            present = session.stats.present or 0

        total = max(total, 1)

        points.append(
            DailyTrendPoint(
                date=session.date,
                percent=percentage(present, total),
                present=present,
                total=total,
                topic=session.topic or "No Topic",
                branch=session.branch or "N/A",
                year=session.year,
                section=session.section or "N/A",
            )
        )

    points.sort(key=lambda p: p.date or "")
    return points


def branch_summary(stats: Iterable[StudentStat]) -> list[BranchSummaryRow]:
    """Average attendance per branch, best first; equal averages ordered by branch name."""
    totals: dict[str, list[int]] = {}
    for st in stats:
        bucket = totals.setdefault(st.branch or UNKNOWN_BRANCH, [0, 0])
        bucket[0] += 1
        bucket[1] += st.percent

    rows = [
        BranchSummaryRow(branch=branch, total_students=count, avg_attendance=ratio_half_up(percent_sum, count))
        for branch, (count, percent_sum) in totals.items()
    ]
    rows.sort(key=lambda r: (-r.avg_attendance, r.branch))
    return rows


def overall_percent(stats: Sequence[StudentStat]) -> int:
    return ratio_half_up(sum(st.percent for st in stats), len(stats))


def subject_matrix(
    roster: Iterable[Student],
    sessions: Iterable[AttendanceSession],
    subjects: Iterable[str] = (),
) -> SubjectMatrix:
    """Classes conducted per subject and attended per student per subject.

    Configured subjects show up even with no classes held; subjects that
    only appear in session data are added to the list.
    """
    conducted: dict[str, int] = {name: 0 for name in subjects}
    attended: dict[str, dict[str, int]] = {s.student_id: {} for s in roster}

    for session in sessions:
        subject = session.subject or UNKNOWN_SUBJECT
        conducted[subject] = conducted.get(subject, 0) + 1
        for student_id, value in (session.records or {}).items():
            row = attended.get(student_id)
            if row is None:
                continue
            row.setdefault(subject, 0)
            if normalize_presence(value):
                row[subject] += 1

    return SubjectMatrix(subjects=sorted(conducted), conducted=conducted, attended=attended)
