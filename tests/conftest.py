from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from college_portal.attendance.model import AttendanceSession
from college_portal.container import wire_services
from college_portal.core.enums import Role
from college_portal.marks.model import MarksSheet
from college_portal.students.model import Student
from college_portal.users.model import StaffPrincipal, StudentPrincipal, User


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def create_user(self, *, username, full_name, password_hash, role, **fields) -> int:
        user_id = max(self._by_id, default=0) + 1
        self._by_id[user_id] = User(
            user_id=user_id,
            username=username,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            **fields,
        )
        return user_id

    def list_users(self, *, role=None, pending_only=False):
        rows = [
            u
            for u in self._by_id.values()
            if (role is None or u.role == role) and (not pending_only or not u.is_approved)
        ]
        return sorted(rows, key=lambda u: u.username)

    def set_approved(self, user_id: int, approved: bool) -> bool:
        if user_id not in self._by_id:
            return False
        self._by_id[user_id] = replace(self._by_id[user_id], is_approved=approved)
        return True

    def update_password(self, user_id: int, password_hash: str) -> bool:
        if user_id not in self._by_id:
            return False
        self._by_id[user_id] = replace(self._by_id[user_id], password_hash=password_hash)
        return True


class InMemoryStudents:
    def __init__(self, students=()):
        self._by_id: dict[str, Student] = {s.student_id: s for s in students}

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)

    def list_cohort(self, *, branch: str, year: int, section: Optional[str] = None):
        return [
            s
            for s in self._by_id.values()
            if s.branch == branch and s.year == year and (section is None or s.section == section)
        ]

    def names_for(self, student_ids):
        return {sid: self._by_id[sid].name for sid in student_ids if sid in self._by_id}

    def upsert_many(self, students) -> int:
        for s in students:
            self._by_id[s.student_id] = s
        return len(students)


class InMemoryAttendance:
    def __init__(self, sessions=()):
        self.sessions: dict[str, AttendanceSession] = {s.session_id: s for s in sessions}

    def get(self, session_id: str) -> Optional[AttendanceSession]:
        return self.sessions.get(session_id)

    def save(self, session: AttendanceSession) -> None:
        self.sessions[session.session_id] = session

    def list_sessions(self, *, start_date=None, end_date=None, branches=None):
        rows = list(self.sessions.values())
        if branches:
            rows = [s for s in rows if s.branch in set(branches)]
        return rows

    def list_for_cohort(self, *, branch: str, year: int, section: Optional[str] = None):
        return [
            s
            for s in self.sessions.values()
            if s.branch == branch and s.year == year and (section is None or s.section == section)
        ]

    def recent_for_faculty(self, faculty_id: str, limit: int):
        rows = [s for s in self.sessions.values() if s.faculty_id == faculty_id]
        rows.sort(key=lambda s: s.created_at or datetime.min, reverse=True)
        return rows[:limit]


class InMemoryActivityLog:
    def __init__(self):
        self.entries: list[dict] = []

    def add(self, *, message, log_type, branch=None, year=None, faculty_name=None) -> None:
        self.entries.append({"message": message, "type": log_type, "branch": branch, "year": year})


class InMemoryMarks:
    def __init__(self):
        self.subjects: dict[str, list] = {}
        self.sheets: dict[str, MarksSheet] = {}

    def get_subjects(self, config_id: str):
        return self.subjects.get(config_id)

    def save_subjects(self, config_id: str, subjects) -> None:
        self.subjects[config_id] = list(subjects)

    def get_sheet(self, sheet_id: str):
        return self.sheets.get(sheet_id)

    def save_sheet(self, sheet: MarksSheet) -> None:
        self.sheets[sheet.sheet_id] = sheet

    def sheets_for_cohort(self, *, branch: str, year: int):
        return [s for s in self.sheets.values() if s.branch == branch and s.year == year]


class InMemoryAnnouncements:
    def __init__(self, items=()):
        self.items = list(items)

    def list_active(self, now: datetime):
        rows = [a for a in self.items if a.is_active and (a.expires_at is None or a.expires_at > now)]
        rows.sort(key=lambda a: a.created_at, reverse=True)
        return rows

    def create(self, **fields) -> int:
        from college_portal.announcements.model import Announcement

        announcement_id = len(self.items) + 1
        self.items.append(Announcement(announcement_id=announcement_id, **fields))
        return announcement_id


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 10, 0, 0)


@pytest.fixture
def faculty() -> StaffPrincipal:
    return StaffPrincipal(user_id=2, employee_id="FAC001", name="Faculty Demo", kind=Role.FACULTY, department="EEE")


@pytest.fixture
def admin() -> StaffPrincipal:
    return StaffPrincipal(user_id=1, employee_id="ADMIN001", name="Admin Demo", kind=Role.ADMIN)


@pytest.fixture
def student() -> StudentPrincipal:
    return StudentPrincipal(user_id=10, registration_number="23HP1A0201", name="Asha", branch="EEE", year=2, section="A")


@pytest.fixture
def eee_roster() -> list[Student]:
    return [
        Student(student_id="23HP1A0201", name="Asha", branch="EEE", year=2, section="A"),
        Student(student_id="23HP1A0202", name="Bala", branch="EEE", year=2, section="A"),
        Student(student_id="23HP1A0203", name="Chitra", branch="EEE", year=2, section="A"),
    ]


@pytest.fixture
def repos(eee_roster):
    return {
        "users_repo": InMemoryUsers(),
        "students_repo": InMemoryStudents(eee_roster),
        "attendance_repo": InMemoryAttendance(),
        "activity_repo": InMemoryActivityLog(),
        "marks_repo": InMemoryMarks(),
        "announcements_repo": InMemoryAnnouncements(),
    }


@pytest.fixture
def container(repos):
    return wire_services(**repos)
