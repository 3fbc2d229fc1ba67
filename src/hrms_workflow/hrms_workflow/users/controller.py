from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.http import domain_error_response, error_response, login_required
from ..core.exceptions import AuthenticationError
from ..container import Container
from .model import Employee

logger = logging.getLogger(__name__)


def _to_dict(e: Employee) -> dict:
    return {
        "employee_id": e.employee_id,
        "name": e.name,
        "role": e.role.value,
        "department_id": e.department_id,
        "designation": e.designation,
    }


def register(app: Flask, container: Container) -> None:
    """Session endpoints.

    Credentials are checked upstream; this only binds a known, active
    employee id to the Flask session.
    """

    @app.route("/api/session", methods=["POST"], endpoint="open_session")
    def open_session():
        body = request.get_json(silent=True) or {}
        try:
            employee = container.identity_service.resolve(body.get("employee_id"))
        except AuthenticationError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Opening session failed")
            return error_response("InternalError", "System error while signing in", 500)

        session["user_id"] = employee.employee_id
        session["name"] = employee.name
        session["role"] = employee.role.value
        session["dept_id"] = employee.department_id
        return jsonify(_to_dict(employee))

    @app.route("/api/session", methods=["GET"], endpoint="current_session")
    @login_required
    def current_session():
        try:
            return jsonify(_to_dict(container.identity_service.resolve(session["user_id"])))
        except AuthenticationError as e:
            session.clear()
            return domain_error_response(e)

    @app.route("/api/session", methods=["DELETE"], endpoint="close_session")
    def close_session():
        session.clear()
        return jsonify({"ok": True})
