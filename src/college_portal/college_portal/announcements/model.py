from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AnnouncementAudience, AnnouncementTier


@dataclass(frozen=True)
class Announcement:
    announcement_id: int
    tier: AnnouncementTier
    title: str
    content: str
    created_by: str
    created_at: datetime
    created_by_name: Optional[str] = None
    department: Optional[str] = None
    audience: AnnouncementAudience = AnnouncementAudience.ALL
    is_active: bool = True
    expires_at: Optional[datetime] = None
