from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_principal, internal_error, json_error, request_data, roles_required
from ..common.validators import require_int_in_range
from ..core.constants import MAX_STUDY_YEAR, MIN_STUDY_YEAR
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    EditWindowClosedError,
    NotFoundError,
    UnmarkedStudentsError,
    ValidationError,
)
from ..container import Container
from .model import AttendanceSession
from .submission import parse_mark_status


def session_to_dict(s: AttendanceSession) -> dict:
    return {
        "session_id": s.session_id,
        "date": s.date,
        "branch": s.branch,
        "year": s.year,
        "section": s.section,
        "faculty_id": s.faculty_id,
        "faculty_name": s.faculty_name,
        "topic": s.topic,
        "subject": s.subject,
        "records": s.records,
        "stats": (
            {"present": s.stats.present, "absent": s.stats.absent, "total": s.stats.total} if s.stats else None
        ),
        "created_at": s.created_at.isoformat() if s.created_at else None,
        "last_modified": s.last_modified.isoformat() if s.last_modified else None,
    }


def register(app: Flask, container: Container) -> None:
    faculty_required = roles_required(Role.FACULTY, Role.HOD)

    @app.route("/api/faculty/roster", endpoint="faculty_roster")
    @faculty_required
    def faculty_roster():
        try:
            students = container.roster_service.roster_for(
                branch=request.args.get("branch", ""),
                year=request.args.get("year", 0, type=int),
                section=request.args.get("section") or None,
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        return jsonify(
            [
                {"student_id": s.student_id, "name": s.name, "branch": s.branch, "year": s.year, "section": s.section}
                for s in students
            ]
        )

    @app.route("/api/faculty/attendance", methods=["POST"], endpoint="faculty_submit_attendance")
    @faculty_required
    def faculty_submit_attendance():
        data = request_data()
        try:
            session = container.attendance_service.submit(
                current_principal(),
                date=data.get("date", ""),
                branch=data.get("branch", ""),
                year=require_int_in_range(data.get("year"), "Year", MIN_STUDY_YEAR, MAX_STUDY_YEAR),
                section=data.get("section", ""),
                marks=data.get("marks") or {},
                default_for_unmarked=parse_mark_status(data.get("default_for_unmarked")),
                topic=data.get("topic"),
                subject=data.get("subject"),
            )
        except UnmarkedStudentsError as e:
            return json_error(str(e), 409, unmarked=e.unmarked)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("submitting attendance")
        return jsonify({"success": True, "session": session_to_dict(session)}), 201

    @app.route("/api/faculty/attendance/recent", endpoint="faculty_recent_attendance")
    @faculty_required
    def faculty_recent_attendance():
        items = container.attendance_service.recent_submissions(current_principal())
        return jsonify(
            [
                {
                    "session": session_to_dict(item.session),
                    "editable": item.editable,
                    "time_ago": item.time_ago,
                }
                for item in items
            ]
        )

    @app.route("/api/faculty/attendance/<session_id>", methods=["GET"], endpoint="faculty_load_attendance")
    @faculty_required
    def faculty_load_attendance(session_id: str):
        try:
            session = container.attendance_service.load_for_edit(current_principal(), session_id)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except (EditWindowClosedError, AuthorizationError) as e:
            return json_error(str(e), 403)
        return jsonify(session_to_dict(session))

    @app.route("/api/faculty/attendance/<session_id>", methods=["PUT"], endpoint="faculty_update_attendance")
    @faculty_required
    def faculty_update_attendance(session_id: str):
        data = request_data()
        try:
            session = container.attendance_service.update(
                current_principal(),
                session_id,
                marks=data.get("marks") or {},
                default_for_unmarked=parse_mark_status(data.get("default_for_unmarked")),
                topic=data.get("topic"),
            )
        except NotFoundError as e:
            return json_error(str(e), 404)
        except UnmarkedStudentsError as e:
            return json_error(str(e), 409, unmarked=e.unmarked)
        except (EditWindowClosedError, AuthorizationError) as e:
            return json_error(str(e), 403)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("updating attendance")
        return jsonify({"success": True, "session": session_to_dict(session)})
