"""Leave balance bookkeeping.

Pure functions: each takes the requester as stored and returns the updated
Employee, or None when the request does not touch any balance. The caller
persists the result in the same transaction as the request write.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import inclusive_days
from ..core.enums import LeaveType, RequestType
from ..core.exceptions import ValidationError
from ..requests.model import ApprovalRequest
from .model import CompensatoryEntry, Employee


def _request_days(request: ApprovalRequest) -> int:
    if request.start_date is None:
        return 0
    return inclusive_days(request.start_date, request.end_date or request.start_date)


def on_submitted(employee: Employee, request_type: RequestType, today: date) -> Optional[Employee]:
    """Punch Missed submissions are stamped for the once-a-month limit."""
    if RequestType(request_type) == RequestType.PUNCH_MISSED:
        return replace(employee, last_punch_missed_submission=today)
    return None


def on_completed(employee: Employee, request: ApprovalRequest) -> Optional[Employee]:
    if request.request_type == RequestType.LEAVE:
        return _leave_completed(employee, request)
    if request.request_type == RequestType.OT:
        return _ot_completed(employee, request)
    return None


def _leave_completed(employee: Employee, request: ApprovalRequest) -> Optional[Employee]:
    leave_type = LeaveType(request.payload.get("leave_type"))
    days = _request_days(request)

    if leave_type == LeaveType.CASUAL:
        return replace(employee, paid_leaves=max(0, employee.paid_leaves - days))
    if leave_type == LeaveType.EMERGENCY:
        # Paid when the balance covers it, unpaid otherwise.
        if employee.paid_leaves >= days:
            return replace(employee, paid_leaves=employee.paid_leaves - days)
        return replace(employee, unpaid_leaves_taken=employee.unpaid_leaves_taken + days)
    if leave_type == LeaveType.LEAVE_WITHOUT_PAY:
        return replace(employee, unpaid_leaves_taken=employee.unpaid_leaves_taken + days)
    if leave_type == LeaveType.MATERNITY:
        return replace(employee, maternity_claims=employee.maternity_claims + 1)
    if leave_type == LeaveType.PATERNITY:
        return replace(employee, paternity_claims=employee.paternity_claims + 1)
    if leave_type == LeaveType.RESTRICTED_HOLIDAYS:
        return replace(employee, restricted_holidays=max(0, employee.restricted_holidays - 1))
    if leave_type == LeaveType.COMPENSATORY:
        return _use_compensatory_entry(employee, str(request.payload.get("compensatory_entry_id")))
    return None


def _use_compensatory_entry(employee: Employee, entry_id: str) -> Employee:
    entries = list(employee.compensatory_entries)
    for i, entry in enumerate(entries):
        if entry.entry_id == entry_id:
            if not entry.is_available:
                raise ValidationError(f"Compensatory entry {entry_id} is already used")
            entries[i] = replace(entry, status="Used")
            return replace(employee, compensatory_entries=tuple(entries))
    raise ValidationError(f"Compensatory entry {entry_id} not found")


def _ot_completed(employee: Employee, request: ApprovalRequest) -> Optional[Employee]:
    hours = float(request.payload.get("compensatory_hours") or 0)
    if request.payload.get("claim_type") != "compensatory" or hours <= 0:
        return None
    entry = CompensatoryEntry(
        entry_id=f"OT-{request.request_id}",
        work_date=request.start_date,
        hours=hours,
    )
    return replace(employee, compensatory_entries=tuple(employee.compensatory_entries) + (entry,))
