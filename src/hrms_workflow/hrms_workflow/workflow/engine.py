from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional, Union

from ..core.enums import Decision, Role, StageName, StageState
from ..core.exceptions import AlreadyTerminal, InvalidDecision, MissingRemarks, NotAuthorized
from ..requests.model import ApprovalRequest
from .gate import can_act, is_terminal
from .sequence import sequence, stage_for_role

# Older clients post the resulting stage state instead of the verb.
_DECISION_ALIASES: Dict[str, Decision] = {
    "approve": Decision.APPROVE,
    "approved": Decision.APPROVE,
    "reject": Decision.REJECT,
    "rejected": Decision.REJECT,
    "acknowledge": Decision.ACKNOWLEDGE,
    "acknowledged": Decision.ACKNOWLEDGE,
}


def _role_label(role: Union[Role, str]) -> str:
    return getattr(role, "value", str(role))


def parse_decision(value: Union[Decision, str, None]) -> Decision:
    if isinstance(value, Decision):
        return value
    decision = _DECISION_ALIASES.get(str(value or "").strip().lower())
    if decision is None:
        raise InvalidDecision(f"Unknown decision: {value!r}")
    return decision


def apply_decision(
    request: ApprovalRequest,
    role: Role,
    decision: Union[Decision, str],
    remarks: Optional[str] = None,
) -> ApprovalRequest:
    """Apply one approver decision and return the resulting request.

    The input request is never modified. Any failure raises before a new
    request is built, so there is no partial application.
    """
    if is_terminal(request):
        raise AlreadyTerminal(f"Request {request.request_id} is already closed")

    stage = stage_for_role(role)
    if stage is None:
        raise NotAuthorized(f"{_role_label(role)} does not approve requests")

    seq = sequence(request.request_type)
    step = seq.step(stage)
    if step is None:
        raise NotAuthorized(f"{_role_label(role)} has no stage for {request.request_type.label}")

    verb = parse_decision(decision)
    if verb not in step.decisions:
        allowed = ", ".join(sorted(d.value for d in step.decisions))
        raise InvalidDecision(f"{verb.value} is not allowed at the {stage.value} stage (allowed: {allowed})")

    if not can_act(role, request, stage):
        raise NotAuthorized(f"Request is not pending {stage.value.upper()} approval")

    note = (remarks or "").strip()
    if verb == Decision.REJECT and not seq.is_terminal_stage(stage) and not note:
        raise MissingRemarks("Remarks are required for rejection")

    new_status: Dict[StageName, StageState] = dict(request.stage_status)
    new_status[stage] = verb.outcome

    nxt = seq.next_stage(stage)
    if verb != Decision.REJECT and nxt is not None:
        new_status[nxt] = StageState.PENDING

    new_remarks = request.remarks
    if verb == Decision.REJECT:
        new_remarks = note or request.remarks

    return replace(request, stage_status=new_status, remarks=new_remarks)
