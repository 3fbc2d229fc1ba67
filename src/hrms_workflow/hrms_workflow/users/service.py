from __future__ import annotations

from typing import Optional

from ..core.enums import Role, StageName
from ..core.exceptions import AuthenticationError
from .model import Employee
from .repository import EmployeeRepository


class IdentityService:
    """Use case: resolve who is acting and who approves next."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def resolve(self, employee_id: Optional[str]) -> Employee:
        if not employee_id:
            raise AuthenticationError("Please log in to continue")
        employee = self._employees.get_by_id(str(employee_id))
        if not employee or not employee.is_active:
            raise AuthenticationError("Unknown or inactive employee")
        return employee

    def lookup(self, employee_id: str) -> Optional[Employee]:
        """Employee record regardless of active state, None when missing."""
        return self._employees.get_by_id(str(employee_id))

    def approver_for(self, stage: StageName, *, department_id: Optional[int]) -> Optional[Employee]:
        """Who signs off `stage`: the department's HOD, or the CEO / Admin."""
        if stage == StageName.HOD:
            if department_id is None:
                return None
            return self._employees.find_by_role(Role.HOD, department_id=department_id)
        if stage == StageName.CEO:
            return self._employees.find_by_role(Role.CEO)
        return self._employees.find_by_role(Role.ADMIN)
