from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import internal_error, json_error, request_data, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/students/import", methods=["POST"], endpoint="admin_import_students")
    @roles_required(Role.ADMIN)
    def admin_import_students():
        data = request_data()
        mapping = data.get("students", data)
        if not isinstance(mapping, dict) or not mapping:
            return json_error("Expected a {registration number: name} mapping", 400)
        try:
            result = container.roster_service.import_students({str(k): str(v) for k, v in mapping.items()})
            accounts = container.user_service.ensure_student_accounts(result.students)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("importing students")
        return jsonify(
            {"success": True, "imported": result.imported, "accounts_created": accounts, "warnings": result.warnings}
        )
