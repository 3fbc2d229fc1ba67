from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, List, Mapping, Optional, Union

from ..audit.service import AuditService
from ..common.datetime_utils import today_local
from ..core.constants import MAX_PAGE_SIZE
from ..core.enums import Decision, RequestOutcome, RequestType, Role, StageState
from ..core.exceptions import ConcurrentModification, NotAuthorized, NotFoundError
from ..notifications.service import NotificationService
from ..users.balances import on_completed, on_submitted
from ..users.model import Employee
from ..users.service import IdentityService
from ..workflow.engine import apply_decision
from ..workflow.gate import can_act, outcome
from ..workflow.sequence import SUBMITTER_ROLES, initial_stage_status, sequence, stage_for_role
from .model import ApprovalRequest, NewRequest, Page, RequestFilter
from .repository import RequestRepository
from .validators.factory import RequestValidatorFactory

logger = logging.getLogger(__name__)


class RequestService:
    """Use cases for Leave / OD / OT / Punch Missed requests.

    Submission validates and stores a request with its initial stage states.
    Decisions go through the workflow engine and are written with a
    conditional update, so two approvers racing on one stage cannot both win.
    """

    def __init__(
        self,
        requests: RequestRepository,
        identity: IdentityService,
        notifications: NotificationService,
        audit: AuditService,
        *,
        validators: Optional[RequestValidatorFactory] = None,
        today: Callable[[], date] = today_local,
    ):
        self._requests = requests
        self._identity = identity
        self._notifications = notifications
        self._audit = audit
        self._validators = validators or RequestValidatorFactory()
        self._today = today

    def submit_request(
        self,
        request_type: Union[RequestType, str],
        payload: Mapping[str, Any],
        requester_id: str,
    ) -> ApprovalRequest:
        request_type = RequestType(request_type)
        requester = self._identity.resolve(requester_id)
        if requester.role not in SUBMITTER_ROLES:
            raise NotAuthorized(f"{requester.role.value} cannot submit {request_type.label} requests")

        today = self._today()
        validated = self._validators.for_type(request_type).validate(payload or {}, requester=requester, today=today)

        request_id = self._requests.create(
            NewRequest(
                request_type=request_type,
                requester_id=requester.employee_id,
                requester_name=requester.name,
                department_id=requester.department_id,
                stage_status=initial_stage_status(request_type, requester.role),
                payload=validated.payload,
                start_date=validated.start_date,
                end_date=validated.end_date,
            ),
            requester_balances=on_submitted(requester, request_type, today),
        )
        created = self._requests.get(request_id=request_id)
        if created is None:
            raise NotFoundError(f"Request {request_id} not found after create")

        logger.info("%s request %s submitted by %s", request_type.label, request_id, requester.employee_id)
        self._audit.record(
            requester.employee_id,
            f"Submitted {request_type.label} Request",
            f"{requester.name} submitted {request_type.label} request {request_id}",
            request_id,
        )
        self._notifications.request_submitted(created)
        return created

    def list_requests(
        self,
        actor_id: str,
        request_type: Union[RequestType, str],
        filters: Optional[RequestFilter] = None,
    ) -> Page:
        actor = self._identity.resolve(actor_id)
        filters = filters or RequestFilter()

        # Scope is forced by role; callers cannot widen it through the filter.
        if actor.role == Role.EMPLOYEE:
            filters = replace(filters, employee_id=actor.employee_id)
        elif actor.role == Role.HOD:
            filters = replace(filters, department_id=actor.department_id)

        limit = min(max(int(filters.limit), 1), MAX_PAGE_SIZE)
        filters = replace(filters, page=max(int(filters.page), 1), limit=limit)
        return self._requests.list(request_type=RequestType(request_type), filters=filters)

    def get_request(self, request_id: int, actor_id: str) -> ApprovalRequest:
        actor = self._identity.resolve(actor_id)
        request = self._load(request_id)
        if not self._can_view(actor, request):
            raise NotAuthorized("You cannot view this request")
        return request

    def decide(
        self,
        request_id: int,
        actor_id: str,
        decision: Union[Decision, str],
        remarks: Optional[str] = None,
    ) -> ApprovalRequest:
        actor = self._identity.resolve(actor_id)
        current = self._load(request_id)

        updated = apply_decision(current, actor.role, decision, remarks)
        if actor.role == Role.HOD and actor.department_id != current.department_id:
            raise NotAuthorized("HOD can only act on requests from their own department")

        balances = self._balances_on_completion(updated)
        stage = stage_for_role(actor.role)
        saved = self._requests.save_decision(
            request_id=current.request_id,
            stage=stage,
            expected=StageState.PENDING,
            stage_status=updated.stage_status,
            remarks=updated.remarks,
            requester_balances=balances,
        )
        if not saved:
            raise ConcurrentModification(f"Request {current.request_id} was updated by someone else")

        state = updated.status_of(stage)
        label = current.request_type.label
        logger.info(
            "%s request %s: %s %s by %s", label, current.request_id, stage.value, state.value, actor.employee_id
        )
        self._audit.record(
            actor.employee_id,
            f"{state.value} {label} Request",
            f"{actor.name} ({actor.role.value}) {state.value.lower()} {label} request {current.request_id}",
            current.request_id,
        )
        self._notifications.decision_applied(updated, stage)
        return updated

    def available_actions(self, request: ApprovalRequest, actor: Employee) -> List[Decision]:
        """Decisions `actor` may submit on `request` right now."""
        stage = stage_for_role(actor.role)
        if stage is None or not can_act(actor.role, request, stage):
            return []
        if actor.role == Role.HOD and actor.department_id != request.department_id:
            return []
        step = sequence(request.request_type).step(stage)
        return sorted(step.decisions, key=lambda d: d.value)

    def _balances_on_completion(self, updated: ApprovalRequest) -> Optional[Employee]:
        if outcome(updated) != RequestOutcome.COMPLETED:
            return None
        requester = self._identity.lookup(updated.requester_id)
        if requester is None:
            logger.warning(
                "Requester %s of request %s not found, balances unchanged", updated.requester_id, updated.request_id
            )
            return None
        balances = on_completed(requester, updated)
        if balances is not None:
            logger.info("Updating balances of %s for completed request %s", requester.employee_id, updated.request_id)
        return balances

    def _load(self, request_id: int) -> ApprovalRequest:
        request = self._requests.get(request_id=int(request_id))
        if request is None:
            raise NotFoundError(f"Request {request_id} not found")
        return request

    @staticmethod
    def _can_view(actor: Employee, request: ApprovalRequest) -> bool:
        if actor.role == Role.EMPLOYEE:
            return request.requester_id == actor.employee_id
        if actor.role == Role.HOD:
            return request.requester_id == actor.employee_id or request.department_id == actor.department_id
        return True
