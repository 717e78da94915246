from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, username, full_name, email, password_hash, role,
    department, branch, section, year, is_approved, is_active
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        full_name=row["full_name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        email=row.get("email"),
        department=row.get("department"),
        branch=row.get("branch"),
        section=row.get("section"),
        year=int(row["year"]) if row.get("year") is not None else None,
        is_approved=bool(row.get("is_approved", True)),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: Role,
        email: Optional[str] = None,
        department: Optional[str] = None,
        branch: Optional[str] = None,
        section: Optional[str] = None,
        year: Optional[int] = None,
        is_approved: bool = True,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, full_name, email, password_hash, role,
                                  department, branch, section, year, is_approved, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    username,
                    full_name,
                    email,
                    password_hash,
                    role.value,
                    department,
                    branch,
                    section,
                    year,
                    1 if is_approved else 0,
                ),
            )
            return int(cur.lastrowid)

    def list_users(self, *, role: Optional[Role] = None, pending_only: bool = False) -> Sequence[User]:
        where = ["1=1"]
        params: list = []
        if role is not None:
            where.append("role=%s")
            params.append(role.value)
        if pending_only:
            where.append("is_approved=0")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {' AND '.join(where)} ORDER BY username",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def set_approved(self, user_id: int, approved: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_approved=%s WHERE user_id=%s", (1 if approved else 0, user_id))
            return cur.rowcount > 0

    def update_password(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            return cur.rowcount > 0
