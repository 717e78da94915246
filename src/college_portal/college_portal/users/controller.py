from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import (
    SESSION_KEY,
    current_principal,
    internal_error,
    json_error,
    login_required,
    request_data,
    roles_required,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..identifiers.classifier import classify
from .model import User, principal_to_dict
from ..container import Container

logger = logging.getLogger(__name__)


def _user_summary(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role.value,
        "email": user.email,
        "department": user.department,
        "branch": user.branch,
        "year": user.year,
        "section": user.section,
        "is_approved": user.is_approved,
        "is_active": user.is_active,
    }


def register(app: Flask, container: Container) -> None:
    admin_required = roles_required(Role.ADMIN)

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        try:
            principal = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except (AuthenticationError, ValidationError) as e:
            return json_error(str(e), 401)
        except Exception:
            return internal_error("logging in")

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session[SESSION_KEY] = principal_to_dict(principal)
        logger.info("Login %s as %s", principal.user_id, principal.kind.value)
        return jsonify({"success": True, "user": principal_to_dict(principal)})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", endpoint="api_me")
    @login_required
    def api_me():
        return jsonify(principal_to_dict(current_principal()))

    @app.route("/api/identifiers/<reg_no>", endpoint="api_classify_identifier")
    @login_required
    def api_classify_identifier(reg_no: str):
        info = classify(reg_no)
        return jsonify(
            {
                "identifier": info.identifier,
                "branch": info.branch.value if info.branch else None,
                "department": info.department,
                "admission_year": info.admission_year,
                "entry_type": info.entry_type.value if info.entry_type else None,
                "calculated_year": info.calculated_year,
                "warning": info.warning,
                "valid": info.is_valid,
            }
        )

    @app.route("/register/student", methods=["POST"], endpoint="register_student")
    def register_student():
        data = request_data()
        try:
            user_id = container.user_service.register_student(
                registration_number=data.get("registration_number", ""),
                name=data.get("name", ""),
                password=data.get("password") or None,
                email=data.get("email"),
                section=data.get("section"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("registering the student")
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/register/faculty", methods=["POST"], endpoint="register_faculty")
    def register_faculty():
        data = request_data()
        if data.get("confirm_password") is not None and data.get("confirm_password") != data.get("password"):
            return json_error("Passwords do not match", 400)
        try:
            user_id = container.user_service.register_faculty(
                employee_id=data.get("employee_id", ""),
                name=data.get("name", ""),
                password=data.get("password", ""),
                department=data.get("department", ""),
                email=data.get("email"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("registering the faculty member")
        return jsonify({"success": True, "user_id": user_id, "pending_approval": True}), 201

    @app.route("/api/admin/users", endpoint="admin_list_users")
    @admin_required
    def admin_list_users():
        try:
            role = Role(request.args["role"]) if request.args.get("role") else None
        except ValueError:
            return json_error("Unknown role", 400)
        try:
            users = container.user_service.list_users(
                current_role=current_principal().kind,
                role=role,
                pending_only=request.args.get("pending") in ("1", "true"),
            )
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            return internal_error("listing accounts")
        return jsonify([_user_summary(u) for u in users])

    @app.route("/api/admin/users/<int:user_id>/approve", methods=["POST"], endpoint="admin_approve_user")
    @admin_required
    def admin_approve_user(user_id: int):
        try:
            user = container.user_service.approve(current_role=current_principal().kind, user_id=user_id)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            return internal_error("approving the account")
        return jsonify({"success": True, "user": _user_summary(user)})

    @app.route("/api/admin/users/<int:user_id>/password", methods=["PUT"], endpoint="admin_reset_password")
    @admin_required
    def admin_reset_password(user_id: int):
        data = request_data()
        try:
            container.user_service.reset_password(
                current_role=current_principal().kind,
                user_id=user_id,
                new_password=data.get("password", ""),
            )
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            return internal_error("resetting the password")
        return jsonify({"success": True})
