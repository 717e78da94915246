from __future__ import annotations

from datetime import datetime

from college_portal.attendance.filters import SessionFilter
from college_portal.attendance.model import AttendanceSession
from college_portal.students.model import Student


def add_session(repos, date, records, *, branch="EEE", year=2, section="A", subject=None, created_at=None):
    session = AttendanceSession(
        session_id=f"{date}_{branch}_{year}_{section}",
        date=date,
        branch=branch,
        year=year,
        section=section,
        faculty_id="FAC001",
        records=records,
        subject=subject,
        created_at=created_at,
    )
    repos["attendance_repo"].save(session)
    return session


def test_institution_dashboard(container, repos):
    add_session(repos, "2024-01-01", {"23HP1A0201": True, "23HP1A0202": "absent"})
    add_session(repos, "2024-01-02", {"23HP1A0201": "present", "23HP1A0202": False})
    add_session(repos, "2024-01-02", {"23HP1A0501": "Present"}, branch="CSE")

    data = container.analytics_service.institution_dashboard(SessionFilter(branches=frozenset({"EEE"})))

    assert data.sessions == 2
    assert [(s.student_id, s.name, s.percent) for s in data.stats] == [
        ("23HP1A0201", "Asha", 100),
        ("23HP1A0202", "Bala", 0),
    ]
    assert data.overall_percent == 50
    assert [b.count for b in data.distribution] == [1, 0, 0, 0, 1]
    assert [p.date for p in data.trend] == ["2024-01-01", "2024-01-02"]
    assert [(r.branch, r.total_students, r.avg_attendance) for r in data.branches] == [("EEE", 2, 50)]


def test_dashboard_respects_date_range(container, repos):
    add_session(repos, "2024-01-01", {"23HP1A0201": "Present"})
    add_session(repos, "2024-02-01", {"23HP1A0201": "Absent"})

    data = container.analytics_service.institution_dashboard(SessionFilter(start_date="2024-01-15"))

    assert data.sessions == 1
    assert data.stats[0].percent == 0


def test_subject_report_includes_unmarked_roster_members(container, repos):
    add_session(repos, "2024-01-01", {"23HP1A0201": "Present"}, subject="Circuits")

    report = container.analytics_service.subject_report(branch="eee", year=2, section="a", subjects=["Circuits"])

    assert [s.student_id for s in report.students] == ["23HP1A0201", "23HP1A0202", "23HP1A0203"]
    assert report.matrix.conducted == {"Circuits": 1}
    assert report.matrix.attended["23HP1A0201"] == {"Circuits": 1}
    assert report.matrix.attended["23HP1A0203"] == {}


def test_subject_report_all_sections_uses_whole_cohort(container, repos):
    repos["students_repo"].upsert_many(
        [Student(student_id="23HP1A0204", name="Deepa", branch="EEE", year=2, section="B")]
    )
    add_session(repos, "2024-01-01", {"23HP1A0201": "Present"}, subject="Circuits")
    add_session(repos, "2024-01-01", {"23HP1A0204": "Present"}, section="B", subject="Circuits")

    report = container.analytics_service.subject_report(branch="EEE", year=2, section="all", subjects=["Circuits"])

    assert "23HP1A0204" in [s.student_id for s in report.students]
    assert report.matrix.conducted == {"Circuits": 2}


def test_student_attendance_counts_only_marked_sessions(container, repos, student):
    add_session(repos, "2024-01-01", {"23HP1A0201": "Present"}, created_at=datetime(2024, 1, 1, 9))
    add_session(repos, "2024-01-02", {"23HP1A0201": "Absent"}, created_at=datetime(2024, 1, 2, 9))
    add_session(repos, "2024-01-03", {"23HP1A0202": "Present"}, created_at=datetime(2024, 1, 3, 9))

    result = container.analytics_service.student_attendance(student)

    assert (result.present, result.classes, result.percent) == (1, 2, 50)
    assert [(r["date"], r["status"]) for r in result.recent] == [("2024-01-02", "Absent"), ("2024-01-01", "Present")]
