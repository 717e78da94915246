from __future__ import annotations

from dataclasses import dataclass

from .analytics.service import AnalyticsService
from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.repository import AnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.mysql_attendance_repository import MySQLActivityLogRepository, MySQLAttendanceRepository
from .attendance.repository import ActivityLogRepository, AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_EDIT_WINDOW_MINUTES, DEFAULT_EMAIL_DOMAIN
from .database.connection import DBConfig, DatabaseConnection
from .marks.mysql_marks_repository import MySQLMarksRepository
from .marks.repository import MarksRepository
from .marks.service import MarksService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import RosterService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    activity_repo: ActivityLogRepository
    marks_repo: MarksRepository
    announcements_repo: AnnouncementRepository

    auth_service: AuthService
    user_service: UserService
    roster_service: RosterService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService
    marks_service: MarksService
    announcement_service: AnnouncementService


def wire_services(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    activity_repo: ActivityLogRepository,
    marks_repo: MarksRepository,
    announcements_repo: AnnouncementRepository,
    edit_window_minutes: int = DEFAULT_EDIT_WINDOW_MINUTES,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
) -> Container:
    """Build services over any repository implementations (MySQL or in-memory)."""
    roster_service = RosterService(students_repo, email_domain=email_domain)
    return Container(
        users_repo=users_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        activity_repo=activity_repo,
        marks_repo=marks_repo,
        announcements_repo=announcements_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, roster_service),
        roster_service=roster_service,
        attendance_service=AttendanceService(
            attendance_repo,
            roster_service,
            activity_repo,
            edit_window_minutes=edit_window_minutes,
        ),
        analytics_service=AnalyticsService(attendance_repo, roster_service),
        marks_service=MarksService(marks_repo),
        announcement_service=AnnouncementService(announcements_repo),
    )


def build_container(
    *,
    db_config: dict,
    edit_window_minutes: int = DEFAULT_EDIT_WINDOW_MINUTES,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return wire_services(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        activity_repo=MySQLActivityLogRepository(conn),
        marks_repo=MySQLMarksRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        edit_window_minutes=edit_window_minutes,
        email_domain=email_domain,
    )
