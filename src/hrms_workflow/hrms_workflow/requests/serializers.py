from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from ..audit.model import AuditEntry
from ..core.enums import Decision
from ..workflow.gate import active_stage, outcome
from ..workflow.sequence import sequence_for
from .model import ApprovalRequest, Page


def _iso(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return value.isoformat()


def audit_entry_to_dict(e: AuditEntry) -> Dict[str, Any]:
    return {
        "actor_id": e.actor_id,
        "action": e.action,
        "details": e.details,
        "created_at": _iso(e.created_at),
    }


def request_to_dict(
    r: ApprovalRequest,
    *,
    actions: Optional[Iterable[Decision]] = None,
    audit: Optional[Sequence[AuditEntry]] = None,
) -> Dict[str, Any]:
    stage = active_stage(r)
    data: Dict[str, Any] = {
        "request_id": r.request_id,
        "request_type": r.request_type.value,
        "requester_id": r.requester_id,
        "requester_name": r.requester_name,
        "department_id": r.department_id,
        "stages": [s.value for s in sequence_for(r.request_type)],
        "stage_status": {s.value: r.status_of(s).value for s in sequence_for(r.request_type)},
        "outcome": outcome(r).value,
        "active_stage": stage.value if stage else None,
        "remarks": r.remarks,
        "start_date": _iso(r.start_date),
        "end_date": _iso(r.end_date),
        "payload": dict(r.payload),
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }
    if actions is not None:
        data["actions"] = [a.value for a in actions]
    if audit is not None:
        data["audit"] = [audit_entry_to_dict(e) for e in audit]
    return data


def page_to_dict(page: Page) -> Dict[str, Any]:
    return {
        "items": [request_to_dict(r) for r in page.items],
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
    }
