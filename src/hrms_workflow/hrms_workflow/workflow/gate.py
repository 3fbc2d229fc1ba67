from __future__ import annotations

from typing import Optional

from ..core.enums import RequestOutcome, Role, StageName, StageState
from ..requests.model import ApprovalRequest
from .sequence import CLEARED_STATES, SUCCESS_STATES, sequence, stage_for_role


def outcome(request: ApprovalRequest) -> RequestOutcome:
    seq = sequence(request.request_type)
    states = [request.status_of(stage) for stage in seq.stages]
    if any(s == StageState.REJECTED for s in states):
        return RequestOutcome.REJECTED
    if all(s in SUCCESS_STATES for s in states):
        return RequestOutcome.COMPLETED
    return RequestOutcome.IN_PROGRESS


def is_terminal(request: ApprovalRequest) -> bool:
    return outcome(request) != RequestOutcome.IN_PROGRESS


def _prior_stages_cleared(request: ApprovalRequest, stage: StageName) -> bool:
    seq = sequence(request.request_type)
    return all(request.status_of(prev) in CLEARED_STATES for prev in seq.before(stage))


def active_stage(request: ApprovalRequest) -> Optional[StageName]:
    """The one stage that may act now, or None once the request is closed."""
    if is_terminal(request):
        return None
    for stage in sequence(request.request_type).stages:
        if request.status_of(stage) == StageState.PENDING:
            return stage if _prior_stages_cleared(request, stage) else None
    return None


def can_act(role: Role, request: ApprovalRequest, stage: StageName) -> bool:
    """Whether `role` may decide `stage` of `request` right now.

    Pure predicate, safe to call before rendering or accepting an action.
    """
    if stage_for_role(role) != stage:
        return False
    if stage not in sequence(request.request_type).stages:
        return False
    if is_terminal(request):
        return False
    if request.status_of(stage) != StageState.PENDING:
        return False
    return _prior_stages_cleared(request, stage)
