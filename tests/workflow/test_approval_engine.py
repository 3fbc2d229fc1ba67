from __future__ import annotations

import pytest

from src.hrms_workflow.hrms_workflow.core.enums import Decision, RequestOutcome, RequestType, Role, StageName, StageState
from src.hrms_workflow.hrms_workflow.core.exceptions import (
    AlreadyTerminal,
    InvalidDecision,
    MissingRemarks,
    NotAuthorized,
)
from src.hrms_workflow.hrms_workflow.workflow.engine import apply_decision, parse_decision
from src.hrms_workflow.hrms_workflow.workflow.gate import active_stage, can_act, outcome

HOD, CEO, ADMIN = StageName.HOD, StageName.CEO, StageName.ADMIN


def test_ceo_cannot_skip_pending_hod(make_request):
    req = make_request(RequestType.OT, hod="Pending", ceo="Pending", admin="Pending")

    assert not can_act(Role.CEO, req, CEO)
    with pytest.raises(NotAuthorized):
        apply_decision(req, Role.CEO, Decision.APPROVE)


def test_rejection_closes_the_request(make_request):
    req = make_request(RequestType.LEAVE, hod="Pending", ceo="Pending", admin="Pending")

    rejected = apply_decision(req, Role.HOD, Decision.REJECT, "Project deadline")

    assert rejected.status_of(HOD) == StageState.REJECTED
    assert rejected.remarks == "Project deadline"
    assert outcome(rejected) == RequestOutcome.REJECTED
    for role, verb in [(Role.CEO, Decision.APPROVE), (Role.ADMIN, Decision.ACKNOWLEDGE), (Role.HOD, Decision.APPROVE)]:
        with pytest.raises(AlreadyTerminal):
            apply_decision(rejected, role, verb)


def test_hod_approval_unlocks_ceo(make_request):
    req = make_request(RequestType.LEAVE, hod="Pending", ceo="Pending", admin="Pending")

    approved = apply_decision(req, Role.HOD, Decision.APPROVE)

    assert dict(approved.stage_status) == {HOD: StageState.APPROVED, CEO: StageState.PENDING, ADMIN: StageState.PENDING}
    assert active_stage(approved) == CEO
    assert can_act(Role.CEO, approved, CEO)
    assert not can_act(Role.ADMIN, approved, ADMIN)


def test_input_request_is_not_modified(make_request):
    req = make_request(RequestType.LEAVE, hod="Pending", ceo="Pending", admin="Pending")

    apply_decision(req, Role.HOD, Decision.APPROVE)

    assert req.status_of(HOD) == StageState.PENDING


@pytest.mark.parametrize("remarks", [None, "", "   "])
def test_non_terminal_reject_needs_remarks(make_request, remarks):
    req = make_request(RequestType.OD, hod="Approved", ceo="Pending", admin="Pending")

    with pytest.raises(MissingRemarks):
        apply_decision(req, Role.CEO, Decision.REJECT, remarks)


def test_terminal_reject_needs_no_remarks(make_request):
    req = make_request(RequestType.PUNCH_MISSED, hod="Approved", admin="Approved", ceo="Pending")

    rejected = apply_decision(req, Role.CEO, Decision.REJECT)

    assert outcome(rejected) == RequestOutcome.REJECTED


def test_admin_acknowledge_completes_leave(make_request):
    req = make_request(RequestType.LEAVE, hod="Approved", ceo="Approved", admin="Pending")

    done = apply_decision(req, Role.ADMIN, Decision.ACKNOWLEDGE)

    assert done.status_of(ADMIN) == StageState.ACKNOWLEDGED
    assert outcome(done) == RequestOutcome.COMPLETED
    assert active_stage(done) is None
    for role, verb in [(Role.HOD, Decision.APPROVE), (Role.CEO, Decision.REJECT), (Role.ADMIN, Decision.ACKNOWLEDGE)]:
        with pytest.raises(AlreadyTerminal):
            apply_decision(done, role, verb, "late")


def test_admin_cannot_approve_leave(make_request):
    req = make_request(RequestType.LEAVE, hod="Approved", ceo="Approved", admin="Pending")

    with pytest.raises(InvalidDecision):
        apply_decision(req, Role.ADMIN, Decision.APPROVE)


def test_punch_missed_ceo_waits_for_admin(make_request):
    req = make_request(RequestType.PUNCH_MISSED, hod="Pending", admin="Pending", ceo="Pending")

    after_hod = apply_decision(req, Role.HOD, Decision.APPROVE)
    assert after_hod.status_of(ADMIN) == StageState.PENDING
    with pytest.raises(NotAuthorized):
        apply_decision(after_hod, Role.CEO, Decision.APPROVE)

    after_admin = apply_decision(after_hod, Role.ADMIN, Decision.APPROVE)
    done = apply_decision(after_admin, Role.CEO, Decision.APPROVE)
    assert outcome(done) == RequestOutcome.COMPLETED


def test_submitted_hod_stage_lets_ceo_act(make_request):
    req = make_request(RequestType.OT, hod="Submitted", ceo="Pending", admin="Pending")

    assert can_act(Role.CEO, req, CEO)
    assert apply_decision(req, Role.CEO, "Approved").status_of(CEO) == StageState.APPROVED


def test_employee_has_no_stage(make_request):
    req = make_request(RequestType.LEAVE, hod="Pending", ceo="Pending", admin="Pending")

    with pytest.raises(NotAuthorized):
        apply_decision(req, Role.EMPLOYEE, Decision.APPROVE)


def test_hod_cannot_decide_twice(make_request):
    req = make_request(RequestType.LEAVE, hod="Approved", ceo="Pending", admin="Pending")

    with pytest.raises(NotAuthorized):
        apply_decision(req, Role.HOD, Decision.APPROVE)


def test_parse_decision_aliases():
    assert parse_decision("Approved") == Decision.APPROVE
    assert parse_decision(" reject ") == Decision.REJECT
    assert parse_decision("Acknowledged") == Decision.ACKNOWLEDGE
    with pytest.raises(InvalidDecision):
        parse_decision("maybe")


def test_unknown_role_has_no_stage(make_request):
    req = make_request(RequestType.LEAVE, hod="Pending", ceo="Pending", admin="Pending")

    assert not can_act("Intern", req, HOD)
    with pytest.raises(NotAuthorized, match="Intern"):
        apply_decision(req, "Intern", "approve")
