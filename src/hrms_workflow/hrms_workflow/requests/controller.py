from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import optional_date
from ..common.http import domain_error_response, error_response, login_required
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import StageState
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import RequestFilter
from .serializers import page_to_dict, request_to_dict

logger = logging.getLogger(__name__)

_TYPES = "any(leave, od, ot, punch_missed)"


def _int_arg(name: str, default: Optional[int]) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _filter_from_args(default_limit: int) -> RequestFilter:
    status = (request.args.get("status") or "").strip()
    try:
        status_value = StageState(status) if status else None
    except ValueError:
        raise ValidationError(f"Unknown status: {status}")
    return RequestFilter(
        employee_id=(request.args.get("employee_id") or "").strip() or None,
        department_id=_int_arg("department_id", None),
        status=status_value,
        from_date=optional_date(request.args.get("from_date"), "from_date"),
        to_date=optional_date(request.args.get("to_date"), "to_date"),
        page=_int_arg("page", 1),
        limit=_int_arg("limit", default_limit),
    )


def register(app: Flask, container: Container) -> None:
    default_limit = int(app.config.get("DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE))

    @app.route(f"/api/<{_TYPES}:request_type>", methods=["POST"], endpoint="submit_request")
    @login_required
    def submit_request(request_type: str):
        try:
            created = container.request_service.submit_request(
                request_type, request.get_json(silent=True) or {}, session["user_id"]
            )
            return jsonify(request_to_dict(created)), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Submitting %s request failed", request_type)
            return error_response("InternalError", "System error while submitting the request", 500)

    @app.route(f"/api/<{_TYPES}:request_type>", methods=["GET"], endpoint="list_requests")
    @login_required
    def list_requests(request_type: str):
        try:
            page = container.request_service.list_requests(
                session["user_id"], request_type, _filter_from_args(default_limit)
            )
            return jsonify(page_to_dict(page))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Listing %s requests failed", request_type)
            return error_response("InternalError", "System error while listing requests", 500)

    @app.route(f"/api/<{_TYPES}:request_type>/<int:request_id>", methods=["GET"], endpoint="get_request")
    @login_required
    def get_request(request_type: str, request_id: int):
        try:
            found = container.request_service.get_request(request_id, session["user_id"])
            if found.request_type.value != request_type:
                return error_response("NotFound", f"Request {request_id} not found", 404)
            actor = container.identity_service.resolve(session["user_id"])
            actions = container.request_service.available_actions(found, actor)
            trail = container.audit_service.trail(found.request_id)
            return jsonify(request_to_dict(found, actions=actions, audit=trail))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Loading request %s failed", request_id)
            return error_response("InternalError", "System error while loading the request", 500)

    @app.route(
        f"/api/<{_TYPES}:request_type>/<int:request_id>/decision",
        methods=["PUT"],
        endpoint="decide_request",
    )
    @login_required
    def decide_request(request_type: str, request_id: int):
        body = request.get_json(silent=True) or {}
        try:
            found = container.request_service.get_request(request_id, session["user_id"])
            if found.request_type.value != request_type:
                return error_response("NotFound", f"Request {request_id} not found", 404)
            updated = container.request_service.decide(
                request_id,
                session["user_id"],
                body.get("decision"),
                body.get("remarks"),
            )
            return jsonify(request_to_dict(updated))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Deciding request %s failed", request_id)
            return error_response("InternalError", "System error while recording the decision", 500)
