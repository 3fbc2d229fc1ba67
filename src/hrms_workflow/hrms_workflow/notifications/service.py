from __future__ import annotations

import logging
from typing import List, Optional

from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import StageName, StageState
from ..core.exceptions import NotFoundError
from ..requests.model import ApprovalRequest
from ..users.service import IdentityService
from ..workflow.gate import active_stage
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Tell the next approver and the requester what happened.

    Delivery is best effort: a failing store is logged and never bubbles up
    into the workflow that triggered it.
    """

    def __init__(self, notifications: NotificationRepository, identity: IdentityService):
        self._notifications = notifications
        self._identity = identity

    def notify(self, employee_id: Optional[str], message: str, request_id: Optional[int] = None) -> None:
        if not employee_id:
            return
        try:
            self._notifications.create(employee_id=str(employee_id), message=message, request_id=request_id)
        except Exception as ex:
            logger.warning("Notification to %s failed: %s", employee_id, ex)

    def _notify_next_approver(self, request: ApprovalRequest) -> None:
        stage = active_stage(request)
        if stage is None:
            return
        try:
            approver = self._identity.approver_for(stage, department_id=request.department_id)
        except Exception as ex:
            logger.warning("Could not look up %s approver for request %s: %s", stage.value, request.request_id, ex)
            return
        if approver is None:
            logger.warning("No %s approver found for request %s", stage.value, request.request_id)
            return
        self.notify(
            approver.employee_id,
            f"{request.request_type.label} request from {request.requester_name or request.requester_id} "
            f"awaits your approval",
            request.request_id,
        )

    def request_submitted(self, request: ApprovalRequest) -> None:
        self._notify_next_approver(request)
        self.notify(
            request.requester_id,
            f"Your {request.request_type.label} request has been submitted",
            request.request_id,
        )

    def decision_applied(self, request: ApprovalRequest, stage: StageName) -> None:
        state = request.status_of(stage)
        message = f"Your {request.request_type.label} request was {state.value.lower()} by {stage.value.upper()}"
        if state == StageState.REJECTED and request.remarks:
            message += f": {request.remarks}"
        self.notify(request.requester_id, message, request.request_id)
        self._notify_next_approver(request)

    def list_for(self, employee_id: str, *, unread_only: bool = False) -> List[Notification]:
        return self._notifications.list_for_employee(
            employee_id=str(employee_id), unread_only=unread_only, limit=DEFAULT_NOTIFICATION_LIMIT
        )

    def mark_read(self, notification_id: int, employee_id: str) -> None:
        if not self._notifications.mark_read(notification_id=int(notification_id), employee_id=str(employee_id)):
            raise NotFoundError("Notification not found")
