from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.web import current_principal, internal_error, json_error, request_data, roles_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import MarksSheet
from .service import parse_exam_type


def sheet_to_dict(sheet: MarksSheet) -> dict:
    return {
        "sheet_id": sheet.sheet_id,
        "exam_type": sheet.exam_type.value,
        "branch": sheet.branch,
        "year": sheet.year,
        "section": sheet.section,
        "faculty_id": sheet.faculty_id,
        "faculty_name": sheet.faculty_name,
        "subjects": [asdict(s) for s in sheet.subjects],
        "marks": {
            reg_no: {sid: {"exam": e.exam, "assignment": e.assignment, "total": e.total} for sid, e in row.items()}
            for reg_no, row in sheet.marks.items()
        },
        "updated_at": sheet.updated_at.isoformat() if sheet.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    editor_required = roles_required(Role.FACULTY, Role.HOD, Role.ADMIN)

    @app.route("/api/faculty/subjects", methods=["GET"], endpoint="faculty_subjects")
    @editor_required
    def faculty_subjects():
        subjects = container.marks_service.subjects_for(
            branch=request.args.get("branch", "").upper(),
            year=request.args.get("year", 0, type=int),
            semester=request.args.get("semester", None, type=int),
        )
        return jsonify([asdict(s) for s in subjects])

    @app.route("/api/faculty/subjects", methods=["PUT"], endpoint="faculty_save_subjects")
    @editor_required
    def faculty_save_subjects():
        data = request_data()
        try:
            subjects = container.marks_service.save_subjects(
                current_principal(),
                branch=str(data.get("branch", "")).upper(),
                year=int(data.get("year") or 0),
                subjects=data.get("subjects") or [],
                semester=data.get("semester"),
            )
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except (ValidationError, ValueError) as e:
            return json_error(str(e), 400)
        return jsonify({"success": True, "subjects": [asdict(s) for s in subjects]})

    @app.route("/api/faculty/marks", methods=["GET"], endpoint="faculty_marks")
    @editor_required
    def faculty_marks():
        try:
            sheet = container.marks_service.load_sheet(
                exam_type=parse_exam_type(request.args.get("exam_type", "")),
                branch=request.args.get("branch", "").upper(),
                year=request.args.get("year", 0, type=int),
                section=request.args.get("section", "").upper(),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        return jsonify(sheet_to_dict(sheet))

    @app.route("/api/faculty/marks", methods=["PUT"], endpoint="faculty_save_marks")
    @editor_required
    def faculty_save_marks():
        data = request_data()
        try:
            sheet = container.marks_service.save_sheet(
                current_principal(),
                exam_type=parse_exam_type(data.get("exam_type", "")),
                branch=str(data.get("branch", "")).upper(),
                year=int(data.get("year") or 0),
                section=str(data.get("section", "")).upper(),
                marks=data.get("marks") or {},
            )
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except (ValidationError, ValueError) as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("saving marks")
        return jsonify({"success": True, "sheet": sheet_to_dict(sheet)})
