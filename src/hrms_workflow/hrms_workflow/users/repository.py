from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_role(self, role: Role, *, department_id: Optional[int] = None) -> Optional[Employee]:
        """First active employee holding `role` (in `department_id` when given)."""

        raise NotImplementedError
