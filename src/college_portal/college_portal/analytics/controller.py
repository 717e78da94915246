from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..attendance.filters import SessionFilter
from ..common.datetime_utils import format_display_date, now_local, parse_optional_date
from ..common.web import current_principal, internal_error, json_error, roles_required
from ..core.constants import ALL_SECTIONS, ALL_YEARS
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .export import XLSX_MIMETYPE, describe_filter, report_filename, report_rows, to_csv_bytes, to_xlsx_bytes


def filter_from_args(args) -> SessionFilter:
    """Build the dashboard scope from query parameters.

    ``branches`` is a comma separated list (or repeated ``branch``);
    missing values mean all.
    """
    start = parse_optional_date(args.get("start"))
    end = parse_optional_date(args.get("end"))
    if start and end and start > end:
        raise ValidationError("Start date must be on or before end date")

    branches = {b.strip().upper() for b in args.getlist("branch") if b.strip()}
    for chunk in (args.get("branches") or "").split(","):
        if chunk.strip():
            branches.add(chunk.strip().upper())

    return SessionFilter(
        start_date=start.strftime("%Y-%m-%d") if start else None,
        end_date=end.strftime("%Y-%m-%d") if end else None,
        branches=frozenset(branches),
        year=args.get("year", ALL_YEARS, type=int),
        section=(args.get("section") or ALL_SECTIONS).upper(),
    )


def register(app: Flask, container: Container) -> None:
    admin_required = roles_required(Role.ADMIN)
    faculty_required = roles_required(Role.FACULTY, Role.HOD)
    student_required = roles_required(Role.STUDENT)

    def _all_branches() -> list[str]:
        return list(app.config.get("BRANCHES") or [])

    def _export_header(flt: SessionFilter) -> list[str]:
        branches, year, section = describe_filter(flt, _all_branches())
        start = format_display_date(flt.start_date or "") or "Beginning"
        end = format_display_date(flt.end_date or "") or "Today"
        return [f"Branches: {branches}", f"Year: {year}", f"Section: {section}", f"Period: {start} to {end}"]

    @app.route("/api/admin/analytics", endpoint="admin_analytics")
    @admin_required
    def admin_analytics():
        try:
            flt = filter_from_args(request.args)
            data = container.analytics_service.institution_dashboard(flt)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("building the analytics dashboard")
        return jsonify(
            {
                "total_sessions": data.sessions,
                "overall_percent": data.overall_percent,
                "students": [asdict(s) for s in data.stats],
                "distribution": [asdict(b) for b in data.distribution],
                "trend": [asdict(p) for p in data.trend],
                "branches": [asdict(r) for r in data.branches],
            }
        )

    def _export(extension: str):
        try:
            flt = filter_from_args(request.args)
            data = container.analytics_service.institution_dashboard(flt)
            rows = report_rows(data.stats)
            filename = report_filename(flt, _all_branches(), extension)
            if extension == "csv":
                body, mimetype = to_csv_bytes(rows), "text/csv"
            else:
                body = to_xlsx_bytes(rows, header_lines=_export_header(flt), generated_at=now_local())
                mimetype = XLSX_MIMETYPE
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("exporting the attendance report")
        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/analytics/export.csv", endpoint="admin_analytics_csv")
    @admin_required
    def admin_analytics_csv():
        return _export("csv")

    @app.route("/api/admin/analytics/export.xlsx", endpoint="admin_analytics_xlsx")
    @admin_required
    def admin_analytics_xlsx():
        return _export("xlsx")

    @app.route("/api/faculty/reports/subjects", endpoint="faculty_subject_report")
    @faculty_required
    def faculty_subject_report():
        args = request.args
        try:
            start = parse_optional_date(args.get("start"))
            end = parse_optional_date(args.get("end"))
            branch = args.get("branch", "")
            year = args.get("year", 0, type=int)
            subjects = container.marks_service.subjects_for(branch=branch.upper(), year=year)
            report = container.analytics_service.subject_report(
                branch=branch,
                year=year,
                section=args.get("section", ""),
                start_date=start.strftime("%Y-%m-%d") if start else None,
                end_date=end.strftime("%Y-%m-%d") if end else None,
                subjects=[s.name for s in subjects],
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("building the subject report")
        return jsonify(
            {
                "students": [{"student_id": s.student_id, "name": s.name} for s in report.students],
                "subjects": report.matrix.subjects,
                "conducted": report.matrix.conducted,
                "attended": report.matrix.attended,
            }
        )

    @app.route("/api/student/dashboard", endpoint="student_dashboard")
    @student_required
    def student_dashboard():
        student = current_principal()
        try:
            attendance = container.analytics_service.student_attendance(student)
            marks_average = container.marks_service.student_average(student)
            subject_count = container.marks_service.subject_count(student)
        except Exception:
            return internal_error("loading the student dashboard")
        return jsonify(
            {
                "name": student.name,
                "registration_number": student.registration_number,
                "branch": student.branch,
                "year": student.year,
                "section": student.section,
                "attendance": {
                    "present": attendance.present,
                    "classes": attendance.classes,
                    "percent": attendance.percent,
                },
                "recent": attendance.recent,
                "marks_average": marks_average,
                "subjects": subject_count,
            }
        )
