from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Branch, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..students.model import Student
from ..students.service import RosterService
from .model import Principal, User, principal_from_user
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> Principal:
        username = require_non_empty(username, "Username").upper()
        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        if not user.is_approved:
            raise AuthenticationError("Your account is waiting for admin approval")

        return principal_from_user(user)


class UserService:
    """Use case: self registration and account management (admin)."""

    def __init__(self, users: UserRepository, roster: RosterService):
        self._users = users
        self._roster = roster

    def register_student(
        self,
        *,
        registration_number: str,
        name: str,
        password: Optional[str] = None,
        email: Optional[str] = None,
        section: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> int:
        """Create an approved student account and its roster entry.

        Branch and year come from the registration number, which also
        serves as the password when none is given.
        """
        require_non_empty(registration_number, "Registration number")
        name = require_non_empty(name, "Name")
        student, warning = self._roster.build_student(registration_number, name, as_of=as_of)
        if warning:
            raise ValidationError(warning)
        if self._users.get_by_username(student.student_id):
            raise ValidationError("Student with this Registration Number already exists")

        password = password or student.student_id
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if section and section.strip():
            student = replace(student, section=section.strip().upper())
        if email and email.strip():
            student = replace(student, email=email.strip().lower())

        self._roster.enroll(student)
        user_id = self._create_student_account(student, password)
        logger.info("Registered student %s", student.student_id)
        return user_id

    def register_faculty(
        self,
        *,
        employee_id: str,
        name: str,
        password: str,
        department: str,
        email: Optional[str] = None,
    ) -> int:
        """Create a faculty account that stays locked until an admin approves it."""
        employee_id = require_non_empty(employee_id, "Employee ID").upper()
        name = require_non_empty(name, "Name")
        department = require_non_empty(department, "Department").upper()
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if department not in {b.value for b in Branch}:
            raise ValidationError(f"Unknown department: {department}")
        if self._users.get_by_username(employee_id):
            raise ValidationError("Employee ID already exists")

        user_id = self._users.create_user(
            username=employee_id,
            full_name=name,
            password_hash=generate_password_hash(password),
            role=Role.FACULTY,
            email=(email or "").strip().lower() or None,
            department=department,
            is_approved=False,
        )
        logger.info("Faculty %s registered, pending approval", employee_id)
        return user_id

    def ensure_student_accounts(self, students: Iterable[Student]) -> int:
        """Give imported students a login (password = registration number) unless they have one."""
        created = 0
        for student in students:
            if self._users.get_by_username(student.student_id):
                continue
            self._create_student_account(student, student.student_id)
            created += 1
        if created:
            logger.info("Created %d student accounts", created)
        return created

    def list_users(
        self,
        *,
        current_role: Role,
        role: Optional[Role] = None,
        pending_only: bool = False,
    ) -> Sequence[User]:
        self._require_admin(current_role)
        return self._users.list_users(role=role, pending_only=pending_only)

    def approve(self, *, current_role: Role, user_id: int) -> User:
        self._require_admin(current_role)
        user = self._get(user_id)
        if not user.is_approved:
            self._users.set_approved(user_id, True)
            logger.info("Approved account %s", user.username)
        return replace(user, is_approved=True)

    def reset_password(self, *, current_role: Role, user_id: int, new_password: str) -> None:
        self._require_admin(current_role)
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)
        user = self._get(user_id)
        self._users.update_password(user_id, generate_password_hash(new_password))
        logger.info("Password reset for %s", user.username)

    def _create_student_account(self, student: Student, password: str) -> int:
        return self._users.create_user(
            username=student.student_id,
            full_name=student.name,
            password_hash=generate_password_hash(password),
            role=Role.STUDENT,
            email=student.email,
            department=student.branch,
            branch=student.branch,
            section=student.section,
            year=student.year,
        )

    def _get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only an admin can manage accounts")
