from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AnnouncementAudience, AnnouncementTier
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Announcement
from .repository import AnnouncementRepository


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, now: datetime) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT announcement_id, tier, title, content, created_by, created_by_name,
                       department, audience, is_active, created_at, expires_at
                FROM announcements
                WHERE is_active=1 AND (expires_at IS NULL OR expires_at > %s)
                ORDER BY created_at DESC
                """,
                (now,),
            )
            return [
                Announcement(
                    announcement_id=int(r["announcement_id"]),
                    tier=AnnouncementTier(r["tier"]),
                    title=r["title"],
                    content=r["content"],
                    created_by=r["created_by"],
                    created_by_name=r.get("created_by_name"),
                    created_at=r["created_at"],
                    department=r.get("department"),
                    audience=AnnouncementAudience(r.get("audience") or AnnouncementAudience.ALL.value),
                    is_active=bool(r.get("is_active", True)),
                    expires_at=r.get("expires_at"),
                )
                for r in fetchall(cur)
            ]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements(tier, title, content, created_by, created_by_name, department, audience, is_active, created_at, expires_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,1,%s,%s)
                """,
                (tier.value, title, content, created_by, created_by_name, department, audience.value, created_at, expires_at),
            )
            return int(cur.lastrowid)
