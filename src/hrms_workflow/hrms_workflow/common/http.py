"""Helpers shared by the JSON controllers."""

from __future__ import annotations

from functools import wraps
from typing import Dict, Type

from flask import jsonify, session

from ..core.exceptions import (
    AlreadyTerminal,
    AuthenticationError,
    AuthorizationError,
    ConcurrentModification,
    DomainError,
    NotFoundError,
    ValidationError,
)

# Checked in order; subclasses before their bases.
_STATUS_CODES: Dict[Type[DomainError], int] = {
    AuthenticationError: 401,
    AuthorizationError: 403,
    AlreadyTerminal: 409,
    ConcurrentModification: 409,
    NotFoundError: 404,
    ValidationError: 400,
}


def status_for(ex: DomainError) -> int:
    for exc_type, status in _STATUS_CODES.items():
        if isinstance(ex, exc_type):
            return status
    return 400


def error_response(kind: str, message: str, status: int):
    return jsonify({"error": kind, "message": message}), status


def domain_error_response(ex: DomainError):
    return error_response(ex.kind, str(ex), status_for(ex))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(AuthenticationError.kind, "Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper
