from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.http import domain_error_response, error_response, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .model import Notification

logger = logging.getLogger(__name__)


def _to_dict(n: Notification) -> dict:
    return {
        "notification_id": n.notification_id,
        "message": n.message,
        "request_id": n.request_id,
        "is_read": n.is_read,
        "created_at": n.created_at.isoformat(timespec="seconds") if n.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        unread_only = request.args.get("unread") in {"1", "true", "yes"}
        try:
            items = container.notification_service.list_for(session["user_id"], unread_only=unread_only)
            return jsonify({"items": [_to_dict(n) for n in items]})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Listing notifications failed")
            return error_response("InternalError", "System error while loading notifications", 500)

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: int):
        try:
            container.notification_service.mark_read(notification_id, session["user_id"])
            return jsonify({"notification_id": notification_id, "is_read": True})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Marking notification %s read failed", notification_id)
            return error_response("InternalError", "System error while updating the notification", 500)
