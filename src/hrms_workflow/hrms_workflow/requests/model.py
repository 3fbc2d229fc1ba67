from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.enums import RequestType, StageName, StageState


@dataclass(frozen=True)
class ApprovalRequest:
    """A Leave, OD, OT or Punch Missed request and its sign-off state.

    `payload` holds the type-specific fields (dates, hours, reason, ...) and is
    never interpreted by the approval engine.
    """

    request_id: int
    request_type: RequestType
    requester_id: str
    stage_status: Mapping[StageName, StageState]
    payload: Dict[str, Any] = field(default_factory=dict)
    requester_name: str = ""
    department_id: Optional[int] = None
    remarks: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def status_of(self, stage: StageName) -> StageState:
        return self.stage_status.get(stage, StageState.PENDING)


@dataclass(frozen=True)
class NewRequest:
    """What the service hands to the store on submission."""

    request_type: RequestType
    requester_id: str
    requester_name: str
    department_id: Optional[int]
    stage_status: Mapping[StageName, StageState]
    payload: Dict[str, Any]
    start_date: Optional[date]
    end_date: Optional[date]


@dataclass(frozen=True)
class RequestFilter:
    employee_id: Optional[str] = None
    department_id: Optional[int] = None
    status: Optional[StageState] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    page: int = 1
    limit: int = 10


@dataclass(frozen=True)
class Page:
    items: Sequence[ApprovalRequest]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
