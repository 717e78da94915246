from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from college_portal.core.enums import Role
from college_portal.core.exceptions import AuthenticationError
from college_portal.users.model import (
    StaffPrincipal,
    StudentPrincipal,
    User,
    principal_from_dict,
    principal_to_dict,
)
from college_portal.users.service import AuthService

from conftest import InMemoryUsers


def make_user(user_id, username, role, password="secret", **extra):
    return User(
        user_id=user_id,
        username=username,
        full_name=username.title(),
        password_hash=generate_password_hash(password),
        role=role,
        **extra,
    )


def test_student_login_gives_student_principal():
    user = make_user(1, "23HP1A0201", Role.STUDENT, branch="EEE", year=2, section="A")
    auth = AuthService(InMemoryUsers([user]))

    principal = auth.authenticate("23hp1a0201", "secret")

    assert isinstance(principal, StudentPrincipal)
    assert principal.kind is Role.STUDENT
    assert (principal.registration_number, principal.branch, principal.year) == ("23HP1A0201", "EEE", 2)


def test_staff_login_gives_staff_principal():
    user = make_user(2, "HOD001", Role.HOD, department="EEE")
    principal = AuthService(InMemoryUsers([user])).authenticate("HOD001", "secret")
    assert isinstance(principal, StaffPrincipal)
    assert principal.kind is Role.HOD


@pytest.mark.parametrize("username, password", [("FAC001", "wrong"), ("NOBODY", "secret")])
def test_bad_credentials(username, password):
    auth = AuthService(InMemoryUsers([make_user(1, "FAC001", Role.FACULTY)]))
    with pytest.raises(AuthenticationError):
        auth.authenticate(username, password)


def test_placeholder_hash_never_matches():
    user = User(user_id=1, username="FAC001", full_name="F", password_hash="CHANGE_ME", role=Role.FACULTY)
    with pytest.raises(AuthenticationError):
        AuthService(InMemoryUsers([user])).authenticate("FAC001", "CHANGE_ME")


def test_unapproved_and_inactive_accounts():
    pending = make_user(1, "FAC001", Role.FACULTY, is_approved=False)
    inactive = make_user(2, "FAC002", Role.FACULTY, is_active=False)
    auth = AuthService(InMemoryUsers([pending, inactive]))

    with pytest.raises(AuthenticationError, match="approval"):
        auth.authenticate("FAC001", "secret")
    with pytest.raises(AuthenticationError, match="Invalid"):
        auth.authenticate("FAC002", "secret")


def test_principal_session_round_trip():
    principal = StaffPrincipal(user_id=2, employee_id="FAC001", name="F", kind=Role.FACULTY, department="EEE")
    data = principal_to_dict(principal)
    assert data["kind"] == "faculty"
    assert principal_from_dict(data) == principal
