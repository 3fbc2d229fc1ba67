"""Stage sequence table.

One entry per request type: the ordered approver stages and the decisions each
stage accepts. The engine never branches on request type; it only reads this
table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from ..core.enums import Decision, RequestType, Role, StageName, StageState

# States that let the next stage act.
CLEARED_STATES: FrozenSet[StageState] = frozenset({StageState.APPROVED, StageState.SUBMITTED})

# States that count as a successful finish of a stage.
SUCCESS_STATES: FrozenSet[StageState] = frozenset(
    {StageState.APPROVED, StageState.SUBMITTED, StageState.ACKNOWLEDGED}
)

_APPROVE_OR_REJECT = frozenset({Decision.APPROVE, Decision.REJECT})
_ACKNOWLEDGE_ONLY = frozenset({Decision.ACKNOWLEDGE})


@dataclass(frozen=True)
class StageStep:
    stage: StageName
    decisions: FrozenSet[Decision]


@dataclass(frozen=True)
class StageSequence:
    request_type: RequestType
    steps: Tuple[StageStep, ...]
    # State the hod stage starts in when the HOD files their own request.
    hod_self_state: StageState = StageState.SUBMITTED

    @property
    def stages(self) -> Tuple[StageName, ...]:
        return tuple(s.stage for s in self.steps)

    @property
    def terminal_stage(self) -> StageName:
        return self.steps[-1].stage

    def step(self, stage: StageName) -> Optional[StageStep]:
        for s in self.steps:
            if s.stage == stage:
                return s
        return None

    def index_of(self, stage: StageName) -> int:
        return self.stages.index(stage)

    def before(self, stage: StageName) -> Tuple[StageName, ...]:
        return self.stages[: self.index_of(stage)]

    def next_stage(self, stage: StageName) -> Optional[StageName]:
        i = self.index_of(stage)
        if i + 1 < len(self.steps):
            return self.steps[i + 1].stage
        return None

    def is_terminal_stage(self, stage: StageName) -> bool:
        return stage == self.terminal_stage


_HOD_CEO_ADMIN = (
    StageStep(StageName.HOD, _APPROVE_OR_REJECT),
    StageStep(StageName.CEO, _APPROVE_OR_REJECT),
    StageStep(StageName.ADMIN, _ACKNOWLEDGE_ONLY),
)

SEQUENCES: Dict[RequestType, StageSequence] = {
    RequestType.LEAVE: StageSequence(RequestType.LEAVE, _HOD_CEO_ADMIN),
    RequestType.OT: StageSequence(RequestType.OT, _HOD_CEO_ADMIN),
    RequestType.OD: StageSequence(RequestType.OD, _HOD_CEO_ADMIN, hod_self_state=StageState.APPROVED),
    RequestType.PUNCH_MISSED: StageSequence(
        RequestType.PUNCH_MISSED,
        (
            StageStep(StageName.HOD, _APPROVE_OR_REJECT),
            StageStep(StageName.ADMIN, _APPROVE_OR_REJECT),
            StageStep(StageName.CEO, _APPROVE_OR_REJECT),
        ),
    ),
}

_ROLE_STAGES: Dict[Role, Optional[StageName]] = {
    Role.HOD: StageName.HOD,
    Role.CEO: StageName.CEO,
    Role.ADMIN: StageName.ADMIN,
    Role.EMPLOYEE: None,
}

SUBMITTER_ROLES = frozenset({Role.EMPLOYEE, Role.HOD, Role.ADMIN})


def sequence(request_type: RequestType) -> StageSequence:
    return SEQUENCES[RequestType(request_type)]


def sequence_for(request_type: RequestType) -> Tuple[StageName, ...]:
    """Ordered stage names for a request type."""
    return sequence(request_type).stages


def stage_for_role(role: Role) -> Optional[StageName]:
    """Stage a role signs off, or None for roles that never act (Employee, unknown roles)."""
    try:
        return _ROLE_STAGES.get(Role(role))
    except ValueError:
        return None


def initial_stage_status(request_type: RequestType, submitter_role: Role) -> Dict[StageName, StageState]:
    """Stage states of a freshly submitted request.

    Employees start with every stage Pending. A HOD's own request skips the hod
    stage (Submitted, or Approved for OD); an Admin's request has the hod stage
    Approved, plus the admin stage when it comes right after hod.
    """
    seq = sequence(request_type)
    role = Role(submitter_role)
    status = {stage: StageState.PENDING for stage in seq.stages}

    if role == Role.EMPLOYEE:
        return status

    if role == Role.HOD:
        status[StageName.HOD] = seq.hod_self_state
        return status

    status[StageName.HOD] = StageState.APPROVED
    own = stage_for_role(role)
    for stage in seq.stages[1:]:
        if stage != own:
            break
        status[stage] = StageState.APPROVED
    return status
