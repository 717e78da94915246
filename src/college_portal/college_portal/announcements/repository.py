from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AnnouncementAudience, AnnouncementTier
from .model import Announcement


class AnnouncementRepository(Protocol):
    def list_active(self, now: datetime) -> Sequence[Announcement]:
        """Active, unexpired announcements, newest first."""

        raise NotImplementedError

    def create(
        self,
        *,
        tier: AnnouncementTier,
        title: str,
        content: str,
        created_by: str,
        created_by_name: Optional[str],
        department: Optional[str],
        audience: AnnouncementAudience,
        created_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError
