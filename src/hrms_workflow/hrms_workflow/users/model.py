from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..core.enums import EmploymentType, Gender, Role


@dataclass(frozen=True)
class CompensatoryEntry:
    entry_id: str
    work_date: date
    hours: float
    status: str = "Available"

    @property
    def is_available(self) -> bool:
        return self.status == "Available"


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object (no database access code). Carries the
    eligibility flags the request validators look at.
    """

    employee_id: str
    name: str
    role: Role
    department_id: Optional[int]
    designation: Optional[str] = None
    gender: Optional[Gender] = None
    employment_type: Optional[EmploymentType] = None
    date_of_joining: Optional[date] = None
    emergency_leave_permitted: bool = False
    paid_leaves: float = 0
    restricted_holidays: int = 1
    unpaid_leaves_taken: float = 0
    maternity_claims: int = 0
    paternity_claims: int = 0
    compensatory_entries: Sequence[CompensatoryEntry] = field(default_factory=tuple)
    last_punch_missed_submission: Optional[date] = None
    is_active: bool = True

    @property
    def is_confirmed(self) -> bool:
        return self.employment_type == EmploymentType.CONFIRMED
