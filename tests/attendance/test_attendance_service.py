from __future__ import annotations

from datetime import timedelta

import pytest

from college_portal.core.enums import MarkStatus, Role
from college_portal.core.exceptions import (
    AuthorizationError,
    EditWindowClosedError,
    NotFoundError,
    UnmarkedStudentsError,
    ValidationError,
)
from college_portal.users.model import StaffPrincipal

ALL_MARKED = {"23HP1A0201": "Present", "23HP1A0202": "Absent", "23HP1A0203": "Present"}


def submit(container, actor, now, **overrides):
    kwargs = dict(date="2025-03-10", branch="eee", year=2, section="a", marks=ALL_MARKED, topic=" Ohm's law ", now=now)
    kwargs.update(overrides)
    return container.attendance_service.submit(actor, **kwargs)


def test_submit_stores_session_and_logs(container, repos, faculty, fixed_now):
    session = submit(container, faculty, fixed_now)

    assert session.session_id == "2025-03-10_EEE_2_A"
    assert session.records == ALL_MARKED
    assert (session.stats.present, session.stats.absent, session.stats.total) == (2, 1, 3)
    assert session.topic == "Ohm's law"
    assert session.created_at == fixed_now
    assert repos["attendance_repo"].get(session.session_id) == session
    assert repos["activity_repo"].entries[0]["message"] == "EEE 2nd Year Taken by Faculty Demo"


def test_submit_with_unmarked_students_needs_a_default(container, faculty, fixed_now):
    marks = {"23HP1A0201": "Present"}
    with pytest.raises(UnmarkedStudentsError) as exc:
        submit(container, faculty, fixed_now, marks=marks)
    assert exc.value.unmarked == ["23HP1A0202", "23HP1A0203"]

    session = submit(container, faculty, fixed_now, marks=marks, default_for_unmarked=MarkStatus.ABSENT)
    assert session.stats.present == 1


def test_submit_twice_for_same_class_is_rejected(container, faculty, fixed_now):
    submit(container, faculty, fixed_now)
    with pytest.raises(ValidationError):
        submit(container, faculty, fixed_now)


def test_submit_for_empty_cohort_is_rejected(container, faculty, fixed_now):
    with pytest.raises(ValidationError):
        submit(container, faculty, fixed_now, branch="CSE")


def test_students_cannot_mark_attendance(container, student, fixed_now):
    with pytest.raises(AuthorizationError):
        submit(container, student, fixed_now)


def test_edit_inside_window(container, faculty, fixed_now):
    session = submit(container, faculty, fixed_now)
    later = fixed_now + timedelta(minutes=120)

    updated = container.attendance_service.update(
        faculty,
        session.session_id,
        marks={"23HP1A0201": "Absent"},
        default_for_unmarked=MarkStatus.ABSENT,
        now=later,
    )

    assert updated.stats.present == 0
    assert updated.last_modified == later
    assert updated.created_at == fixed_now
    assert updated.topic == "Ohm's law"


def test_edit_after_window_is_rejected(container, faculty, fixed_now):
    session = submit(container, faculty, fixed_now)
    with pytest.raises(EditWindowClosedError):
        container.attendance_service.load_for_edit(faculty, session.session_id, now=fixed_now + timedelta(minutes=121))


def test_only_submitter_may_edit(container, faculty, fixed_now):
    session = submit(container, faculty, fixed_now)
    other = StaffPrincipal(user_id=3, employee_id="FAC002", name="Other", kind=Role.FACULTY)
    with pytest.raises(AuthorizationError):
        container.attendance_service.load_for_edit(other, session.session_id, now=fixed_now)


def test_edit_unknown_session(container, faculty, fixed_now):
    with pytest.raises(NotFoundError):
        container.attendance_service.load_for_edit(faculty, "nope", now=fixed_now)


def test_recent_submissions_flag_editable(container, faculty, fixed_now):
    submit(container, faculty, fixed_now - timedelta(hours=3), date="2025-03-09")
    submit(container, faculty, fixed_now - timedelta(minutes=30))

    recent = container.attendance_service.recent_submissions(faculty, now=fixed_now)

    assert [r.session.date for r in recent] == ["2025-03-10", "2025-03-09"]
    assert [r.editable for r in recent] == [True, False]
    assert [r.time_ago for r in recent] == ["30m ago", "3h ago"]
