from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ...common.datetime_utils import require_date
from ...common.validators import optional_text, require_non_empty
from ...core.exceptions import ValidationError
from ...users.model import Employee
from .base import RequestValidator, ValidatedPayload


class ODValidator(RequestValidator):
    """On-duty trips: out and back dates, purpose, place visited."""

    def validate(self, payload: Mapping[str, Any], *, requester: Employee, today: date) -> ValidatedPayload:
        date_out = require_date(payload.get("date_out"), "Date out")
        date_in = require_date(payload.get("date_in"), "Date in")
        if date_out < today:
            raise ValidationError("Date out cannot be in the past")
        if date_in < date_out:
            raise ValidationError("Date in cannot be before date out")

        data = {
            "date_out": date_out.isoformat(),
            "date_in": date_in.isoformat(),
            "time_out": require_non_empty(payload.get("time_out"), "Time out"),
            "time_in": optional_text(payload.get("time_in")),
            "purpose": require_non_empty(payload.get("purpose"), "Purpose"),
            "place_unit_visit": require_non_empty(payload.get("place_unit_visit"), "Place/unit visited"),
        }
        return ValidatedPayload(payload=data, start_date=date_out, end_date=date_in)
