from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Mapping

from ...common.datetime_utils import inclusive_days, optional_date, require_date, years_between
from ...common.validators import optional_text, require_choice, require_non_empty
from ...core.constants import (
    MATERNITY_LEAVE_DAYS,
    MAX_CONSECUTIVE_PAID_LEAVE_DAYS,
    MAX_PARENTAL_CLAIMS,
    MEDICAL_LEAVE_DAYS,
    MEDICAL_LEAVE_LOOKBACK_DAYS,
    PATERNITY_LEAVE_DAYS,
)
from ...core.enums import Gender, LeaveType
from ...core.exceptions import ValidationError
from ...users.model import Employee
from .base import RequestValidator, ValidatedPayload


class LeaveValidator(RequestValidator):
    """Leave rules per leave type (medical window, maternity length, ...)."""

    def validate(self, payload: Mapping[str, Any], *, requester: Employee, today: date) -> ValidatedPayload:
        leave_type = LeaveType(
            require_choice(payload.get("leave_type"), "Leave type", [t.value for t in LeaveType])
        )
        start = require_date(payload.get("from_date"), "From date")
        end = optional_date(payload.get("to_date"), "To date") or start
        if end < start:
            raise ValidationError("Leave start date cannot be after end date")

        data: Dict[str, Any] = {
            "leave_type": leave_type.value,
            "from_date": start.isoformat(),
            "to_date": end.isoformat(),
            "reason": require_non_empty(payload.get("reason"), "Reason"),
            "charge_given_to": optional_text(payload.get("charge_given_to")),
            "emergency_contact": optional_text(payload.get("emergency_contact")),
        }
        days = inclusive_days(start, end)

        if leave_type == LeaveType.MEDICAL:
            self._check_medical(payload, requester, today, start, days, data)
        elif leave_type == LeaveType.EMERGENCY:
            if not requester.emergency_leave_permitted:
                raise ValidationError("Emergency leave requires permission from your HOD")
            if start != today or end != today:
                raise ValidationError("Emergency leave must be for the current date only")
        else:
            if start <= today:
                raise ValidationError("From date must be after today for this leave type")
            if leave_type == LeaveType.CASUAL:
                if days > MAX_CONSECUTIVE_PAID_LEAVE_DAYS:
                    raise ValidationError(
                        f"Cannot take more than {MAX_CONSECUTIVE_PAID_LEAVE_DAYS} consecutive paid leave days"
                    )
                if requester.paid_leaves < days:
                    raise ValidationError("Insufficient Casual leave balance")
            elif leave_type == LeaveType.MATERNITY:
                self._check_parental(
                    payload,
                    requester,
                    data,
                    days=days,
                    today=today,
                    gender=Gender.FEMALE,
                    required_days=MATERNITY_LEAVE_DAYS,
                    claims=requester.maternity_claims,
                    min_service_years=1,
                    label="Maternity",
                )
            elif leave_type == LeaveType.PATERNITY:
                self._check_parental(
                    payload,
                    requester,
                    data,
                    days=days,
                    today=today,
                    gender=Gender.MALE,
                    required_days=PATERNITY_LEAVE_DAYS,
                    claims=requester.paternity_claims,
                    min_service_years=0,
                    label="Paternity",
                )
            elif leave_type == LeaveType.COMPENSATORY:
                self._check_compensatory(payload, requester, data)
            elif leave_type == LeaveType.RESTRICTED_HOLIDAYS:
                if days != 1:
                    raise ValidationError("Restricted Holiday must be 1 day")
                if requester.restricted_holidays < 1:
                    raise ValidationError("Restricted Holiday already used for this year")
                data["restricted_holiday"] = require_non_empty(payload.get("restricted_holiday"), "Restricted holiday")

        return ValidatedPayload(payload=data, start_date=start, end_date=end)

    @staticmethod
    def _check_medical(payload, requester: Employee, today: date, start: date, days: int, data: Dict[str, Any]) -> None:
        if not payload.get("to_date"):
            raise ValidationError("To date is required for Medical leave")
        if start < today - timedelta(days=MEDICAL_LEAVE_LOOKBACK_DAYS) or start > today:
            raise ValidationError(
                f"Medical leave from date must be within today and {MEDICAL_LEAVE_LOOKBACK_DAYS} days prior"
            )
        if not requester.is_confirmed:
            raise ValidationError("Medical leave is only for confirmed employees")
        if days not in MEDICAL_LEAVE_DAYS:
            raise ValidationError("Medical leave must be either 3 or 4 days")
        data["medical_certificate_id"] = require_non_empty(
            payload.get("medical_certificate_id"), "Medical certificate"
        )

    @staticmethod
    def _check_parental(
        payload,
        requester: Employee,
        data: Dict[str, Any],
        *,
        days: int,
        today: date,
        gender: Gender,
        required_days: int,
        claims: int,
        min_service_years: int,
        label: str,
    ) -> None:
        if not requester.is_confirmed or requester.gender != gender:
            raise ValidationError(f"{label} leave is only for confirmed {gender.value.lower()} employees")
        if min_service_years:
            joined = requester.date_of_joining
            if joined is None or years_between(joined, today) < min_service_years:
                raise ValidationError("Must have completed one year of service")
        if days != required_days:
            raise ValidationError(f"{label} leave must be {required_days} days")
        if claims >= MAX_PARENTAL_CLAIMS:
            raise ValidationError(f"{label} leave can only be availed twice during service")
        data["supporting_documents_id"] = require_non_empty(
            payload.get("supporting_documents_id"), "Supporting documents"
        )

    @staticmethod
    def _check_compensatory(payload, requester: Employee, data: Dict[str, Any]) -> None:
        entry_id = require_non_empty(payload.get("compensatory_entry_id"), "Compensatory entry")
        data["project_details"] = require_non_empty(payload.get("project_details"), "Project details")
        entry = next((e for e in requester.compensatory_entries if e.entry_id == entry_id), None)
        if entry is None or not entry.is_available:
            raise ValidationError("Selected compensatory entry is not available")
        data["compensatory_entry_id"] = entry_id
        data["compensatory_hours"] = entry.hours
