from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Union

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Stored account.

    ``username`` is the employee id for staff and the registration number
    for students.
    """

    user_id: int
    username: str
    full_name: str
    password_hash: str
    role: Role
    email: Optional[str] = None
    department: Optional[str] = None
    branch: Optional[str] = None
    section: Optional[str] = None
    year: Optional[int] = None
    is_approved: bool = True
    is_active: bool = True


@dataclass(frozen=True)
class StudentPrincipal:
    user_id: int
    registration_number: str
    name: str
    branch: Optional[str] = None
    year: Optional[int] = None
    section: Optional[str] = None
    kind: Role = Role.STUDENT


@dataclass(frozen=True)
class StaffPrincipal:
    """Admin, HOD or faculty member; ``kind`` tells which."""

    user_id: int
    employee_id: str
    name: str
    kind: Role
    department: Optional[str] = None


Principal = Union[StudentPrincipal, StaffPrincipal]


def principal_from_user(user: User) -> Principal:
    """Decide the principal variant once, from the stored role."""
    if user.role == Role.STUDENT:
        return StudentPrincipal(
            user_id=user.user_id,
            registration_number=user.username,
            name=user.full_name,
            branch=user.branch,
            year=user.year,
            section=user.section,
        )
    return StaffPrincipal(
        user_id=user.user_id,
        employee_id=user.username,
        name=user.full_name,
        kind=user.role,
        department=user.department,
    )


def principal_to_dict(principal: Principal) -> dict:
    data = asdict(principal)
    data["kind"] = principal.kind.value
    return data


def principal_from_dict(data: dict) -> Principal:
    """Rebuild a principal stored by principal_to_dict (e.g. in the Flask session)."""
    data = dict(data)
    kind = Role(data.pop("kind"))
    if kind == Role.STUDENT:
        return StudentPrincipal(**data)
    return StaffPrincipal(kind=kind, **data)
