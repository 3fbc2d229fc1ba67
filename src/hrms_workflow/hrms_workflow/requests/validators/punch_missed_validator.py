from __future__ import annotations

import re
from datetime import date
from typing import Any, Mapping

from ...common.datetime_utils import require_date
from ...common.validators import optional_text, require_choice
from ...core.exceptions import ValidationError
from ...users.model import Employee
from .base import RequestValidator, ValidatedPayload

PUNCH_DIRECTIONS = ("Time IN", "Time OUT")
_CLOCK_TIME = re.compile(r"^(0?[1-9]|1[0-2]):[0-5][0-9] (AM|PM)$", re.IGNORECASE)


class PunchMissedValidator(RequestValidator):
    """A forgotten punch: which day, in or out, and the time claimed.

    One submission per calendar month; the service stamps the requester on
    every accepted submission.
    """

    def validate(self, payload: Mapping[str, Any], *, requester: Employee, today: date) -> ValidatedPayload:
        last = requester.last_punch_missed_submission
        if last is not None and (last.year, last.month) == (today.year, today.month):
            raise ValidationError("Submission limit reached for this month")

        missed = require_date(payload.get("punch_missed_date"), "Punch missed date")
        if missed > today:
            raise ValidationError("Punch missed date cannot be in the future")

        your_input = str(payload.get("your_input") or "").strip()
        if not _CLOCK_TIME.match(your_input):
            raise ValidationError("Invalid time format for your input (expected hh:mm AM/PM)")

        data = {
            "punch_missed_date": missed.isoformat(),
            "when": require_choice(payload.get("when"), "When", PUNCH_DIRECTIONS),
            "your_input": your_input.upper(),
            "reason": optional_text(payload.get("reason")),
        }
        return ValidatedPayload(payload=data, start_date=missed, end_date=missed)
