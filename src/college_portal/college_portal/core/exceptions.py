from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""


class EditWindowClosedError(ValidationError):
    """Raised when a locked attendance session is about to be modified."""


class UnmarkedStudentsError(ValidationError):
    """Raised when a submission leaves roster members without a mark.

    The caller must pick a default (Present or Absent) for ``unmarked``
    before the session can be committed.
    """

    def __init__(self, unmarked: Sequence[str]):
        self.unmarked = list(unmarked)
        super().__init__(f"{len(self.unmarked)} students do not have a marked status")
