from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Login type of an employee, used for permissions."""

    ADMIN = "Admin"
    CEO = "CEO"
    HOD = "HOD"
    EMPLOYEE = "Employee"


class RequestType(str, Enum):
    """Kinds of requests that go through the approval chain."""

    LEAVE = "leave"
    OD = "od"
    OT = "ot"
    PUNCH_MISSED = "punch_missed"

    @property
    def label(self) -> str:
        return _REQUEST_TYPE_LABELS[self]


_REQUEST_TYPE_LABELS = {
    RequestType.LEAVE: "Leave",
    RequestType.OD: "OD",
    RequestType.OT: "OT claim",
    RequestType.PUNCH_MISSED: "Punch Missed",
}


class StageName(str, Enum):
    """Approver slot in a request's sign-off chain."""

    HOD = "hod"
    CEO = "ceo"
    ADMIN = "admin"


class StageState(str, Enum):
    """State of a single stage, stored as-is in the database."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    SUBMITTED = "Submitted"
    ACKNOWLEDGED = "Acknowledged"


class Decision(str, Enum):
    """What an approver can do to the stage they own."""

    APPROVE = "approve"
    REJECT = "reject"
    ACKNOWLEDGE = "acknowledge"

    @property
    def outcome(self) -> StageState:
        return _DECISION_OUTCOMES[self]


_DECISION_OUTCOMES = {
    Decision.APPROVE: StageState.APPROVED,
    Decision.REJECT: StageState.REJECTED,
    Decision.ACKNOWLEDGE: StageState.ACKNOWLEDGED,
}


class RequestOutcome(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


class LeaveType(str, Enum):
    CASUAL = "Casual"
    MEDICAL = "Medical"
    MATERNITY = "Maternity"
    PATERNITY = "Paternity"
    COMPENSATORY = "Compensatory"
    RESTRICTED_HOLIDAYS = "Restricted Holidays"
    LEAVE_WITHOUT_PAY = "Leave Without Pay(LWP)"
    EMERGENCY = "Emergency"


class EmploymentType(str, Enum):
    CONFIRMED = "Confirmed"
    PROBATION = "Probation"
    CONTRACTUAL = "Contractual"
    INTERN = "Intern"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
