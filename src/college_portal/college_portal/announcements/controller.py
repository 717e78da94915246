from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify

from ..common.web import current_principal, internal_error, json_error, login_required, request_data
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import Announcement


def announcement_to_dict(a: Announcement) -> dict:
    return {
        "id": a.announcement_id,
        "tier": a.tier.value,
        "title": a.title,
        "content": a.content,
        "created_by": a.created_by,
        "created_by_name": a.created_by_name,
        "department": a.department,
        "audience": a.audience.value,
        "created_at": a.created_at.isoformat() if a.created_at else None,
        "expires_at": a.expires_at.isoformat() if a.expires_at else None,
    }


def _parse_expiry(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid expiry: {value!r}")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/announcements", methods=["GET"], endpoint="announcements")
    @login_required
    def announcements():
        items = container.announcement_service.visible_to(current_principal())
        return jsonify([announcement_to_dict(a) for a in items])

    @app.route("/api/announcements", methods=["POST"], endpoint="publish_announcement")
    @login_required
    def publish_announcement():
        data = request_data()
        try:
            announcement_id = container.announcement_service.publish(
                current_principal(),
                title=data.get("title", ""),
                content=data.get("content", ""),
                tier=data.get("tier") or "general",
                audience=data.get("audience") or "all",
                department=data.get("department"),
                expires_at=_parse_expiry(data.get("expires_at")),
            )
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("publishing the announcement")
        return jsonify({"success": True, "id": announcement_id}), 201
