from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ...common.datetime_utils import require_date
from ...common.validators import require_choice, require_non_empty, require_number_between
from ...core.constants import (
    FULL_DAY_COMPENSATORY_HOURS,
    HALF_DAY_COMPENSATORY_HOURS,
    MAX_OT_HOURS,
    MIN_COMPENSATORY_OT_HOURS,
    MIN_OT_HOURS,
)
from ...core.exceptions import ValidationError
from ...users.model import Employee
from .base import RequestValidator, ValidatedPayload

OT_CLAIM_TYPES = ("compensatory", "overtime")


def compensatory_hours_for(hours: float) -> int:
    """Compensatory credit for an OT claim: a full day from 8 hours, else half."""
    if hours >= FULL_DAY_COMPENSATORY_HOURS:
        return FULL_DAY_COMPENSATORY_HOURS
    return HALF_DAY_COMPENSATORY_HOURS


class OTValidator(RequestValidator):
    def validate(self, payload: Mapping[str, Any], *, requester: Employee, today: date) -> ValidatedPayload:
        ot_date = require_date(payload.get("date"), "Date")
        hours = require_number_between(payload.get("hours"), "Hours", MIN_OT_HOURS, MAX_OT_HOURS)
        data = {
            "date": ot_date.isoformat(),
            "hours": hours,
            "project_name": require_non_empty(payload.get("project_name"), "Project name"),
            "description": require_non_empty(payload.get("description"), "Description"),
            "claim_type": require_choice(payload.get("claim_type"), "Claim type", OT_CLAIM_TYPES),
        }
        if data["claim_type"] == "compensatory":
            if hours < MIN_COMPENSATORY_OT_HOURS:
                raise ValidationError(f"Compensatory leave requires at least {MIN_COMPENSATORY_OT_HOURS} hours")
            data["compensatory_hours"] = compensatory_hours_for(hours)
        return ValidatedPayload(payload=data, start_date=ot_date, end_date=ot_date)
