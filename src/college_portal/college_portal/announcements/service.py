from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ANNOUNCEMENT_LIMIT
from ..core.enums import AnnouncementAudience, AnnouncementTier, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import Principal, StaffPrincipal, StudentPrincipal
from .model import Announcement
from .repository import AnnouncementRepository

logger = logging.getLogger(__name__)

PUBLISHER_ROLES = {Role.ADMIN, Role.HOD, Role.FACULTY}


def _viewer_departments(viewer: Principal) -> set[str]:
    if isinstance(viewer, StudentPrincipal):
        return {viewer.branch} if viewer.branch else set()
    return {viewer.department} if viewer.department else set()


def is_visible(announcement: Announcement, viewer: Principal, now: datetime) -> bool:
    if not announcement.is_active:
        return False
    if announcement.expires_at is not None and announcement.expires_at <= now:
        return False
    if viewer.kind == Role.ADMIN:
        return True
    if announcement.audience == AnnouncementAudience.ALL:
        return True
    if announcement.audience.value != viewer.kind.value:
        return False
    if announcement.tier == AnnouncementTier.DEPARTMENTAL:
        return announcement.department in _viewer_departments(viewer)
    return True


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository):
        self._announcements = announcements

    def visible_to(self, viewer: Principal, *, now: Optional[datetime] = None, limit: int = DEFAULT_ANNOUNCEMENT_LIMIT) -> list[Announcement]:
        now = now or now_local()
        rows = self._announcements.list_active(now)
        return [a for a in rows if is_visible(a, viewer, now)][:limit]

    def publish(
        self,
        actor: Principal,
        *,
        title: str,
        content: str,
        tier: str = AnnouncementTier.GENERAL.value,
        audience: str = AnnouncementAudience.ALL.value,
        department: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> int:
        if not isinstance(actor, StaffPrincipal) or actor.kind not in PUBLISHER_ROLES:
            raise AuthorizationError("You are not allowed to publish announcements")

        title = require_non_empty(title, "Title")
        content = require_non_empty(content, "Content")
        try:
            tier_v = AnnouncementTier(tier)
            audience_v = AnnouncementAudience(audience)
        except ValueError:
            raise ValidationError("Invalid announcement tier or audience")

        if actor.kind != Role.ADMIN:
            # Staff below admin only reach their own department.
            tier_v = AnnouncementTier.DEPARTMENTAL
            department = actor.department
        if tier_v == AnnouncementTier.DEPARTMENTAL and not department:
            raise ValidationError("Departmental announcements need a department")

        now = now or now_local()
        if expires_at is not None and expires_at <= now:
            raise ValidationError("Expiry must be in the future")

        announcement_id = self._announcements.create(
            tier=tier_v,
            title=title,
            content=content,
            created_by=actor.employee_id,
            created_by_name=actor.name,
            department=department,
            audience=audience_v,
            created_at=now,
            expires_at=expires_at,
        )
        logger.info("Announcement %s published by %s (%s/%s)", announcement_id, actor.employee_id, tier_v.value, audience_v.value)
        return announcement_id
