from __future__ import annotations

from typing import Mapping, Optional, Protocol

from ..core.enums import RequestType, StageName, StageState
from ..users.model import Employee
from .model import ApprovalRequest, NewRequest, Page, RequestFilter


class RequestRepository(Protocol):
    """Request Store: persists requests and their stage states."""

    def create(self, new: NewRequest, *, requester_balances: Optional[Employee] = None) -> int:
        """Insert the request; `requester_balances`, when given, is stored in the same transaction."""

        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[ApprovalRequest]:
        raise NotImplementedError

    def list(self, *, request_type: RequestType, filters: RequestFilter) -> Page:
        """Newest first, one page at a time. `filters.status` matches any stage."""

        raise NotImplementedError

    def save_decision(
        self,
        *,
        request_id: int,
        stage: StageName,
        expected: StageState,
        stage_status: Mapping[StageName, StageState],
        remarks: Optional[str],
        requester_balances: Optional[Employee] = None,
    ) -> bool:
        """Write the new stage states only if `stage` still equals `expected`.

        Returns False when another writer got there first; `requester_balances`
        is then left unwritten as well.
        """

        raise NotImplementedError
