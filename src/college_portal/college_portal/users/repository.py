from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None, pending_only: bool = False) -> Sequence[User]:
        """Accounts ordered by username; ``pending_only`` keeps those awaiting approval."""
        raise NotImplementedError

    def set_approved(self, user_id: int, approved: bool) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError
