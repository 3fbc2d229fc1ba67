from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..common.datetime_utils import optional_date, require_date
from ..core.enums import EmploymentType, Gender, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchone
from .model import CompensatoryEntry, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_EMPLOYEE_COLUMNS = """
    employee_id, name, login_type, department_id, designation, gender,
    employment_type, date_of_joining, emergency_leave_permitted,
    paid_leaves, restricted_holidays, unpaid_leaves_taken,
    maternity_claims, paternity_claims, compensatory_entries,
    last_punch_missed_submission, is_active
"""


def _compensatory_entries(raw: Any) -> tuple:
    if not raw:
        return ()
    items = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    return tuple(
        CompensatoryEntry(
            entry_id=str(item["entry_id"]),
            work_date=require_date(item["work_date"], "work_date"),
            hours=float(item.get("hours", 0)),
            status=str(item.get("status", "Available")),
        )
        for item in items
    )


def _row_to_employee(row: Dict[str, Any]) -> Optional[Employee]:
    """None for rows whose login type this service does not know."""
    try:
        role = Role(row["login_type"])
    except ValueError:
        logger.warning("Employee %s has unknown login type %r", row.get("employee_id"), row.get("login_type"))
        return None
    return Employee(
        employee_id=str(row["employee_id"]),
        name=row["name"],
        role=role,
        department_id=row.get("department_id"),
        designation=row.get("designation"),
        gender=Gender(row["gender"]) if row.get("gender") else None,
        employment_type=EmploymentType(row["employment_type"]) if row.get("employment_type") else None,
        date_of_joining=optional_date(row.get("date_of_joining"), "date_of_joining"),
        emergency_leave_permitted=bool(row.get("emergency_leave_permitted", False)),
        paid_leaves=float(row.get("paid_leaves") or 0),
        restricted_holidays=int(row.get("restricted_holidays") or 0),
        unpaid_leaves_taken=float(row.get("unpaid_leaves_taken") or 0),
        maternity_claims=int(row.get("maternity_claims") or 0),
        paternity_claims=int(row.get("paternity_claims") or 0),
        compensatory_entries=_compensatory_entries(row.get("compensatory_entries")),
        last_punch_missed_submission=optional_date(
            row.get("last_punch_missed_submission"), "last_punch_missed_submission"
        ),
        is_active=bool(row.get("is_active", True)),
    )


def write_balances(cur, employee: Employee) -> None:
    """Store the balance columns of `employee` through an open cursor.

    Takes the caller's cursor so the write joins the caller's transaction.
    """
    cur.execute(
        """
        UPDATE employees
        SET paid_leaves=%s, restricted_holidays=%s, unpaid_leaves_taken=%s,
            maternity_claims=%s, paternity_claims=%s, compensatory_entries=%s,
            last_punch_missed_submission=%s
        WHERE employee_id=%s
        """,
        (
            employee.paid_leaves,
            employee.restricted_holidays,
            employee.unpaid_leaves_taken,
            employee.maternity_claims,
            employee.paternity_claims,
            dump_json(
                [
                    {"entry_id": e.entry_id, "work_date": e.work_date, "hours": e.hours, "status": e.status}
                    for e in employee.compensatory_entries
                ]
            ),
            employee.last_punch_missed_submission,
            employee.employee_id,
        ),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s",
                (str(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return _row_to_employee(row)

    def find_by_role(self, role: Role, *, department_id: Optional[int] = None) -> Optional[Employee]:
        clauses = ["login_type=%s", "is_active=1"]
        params: list[object] = [Role(role).value]
        if department_id is not None:
            clauses.append("department_id=%s")
            params.append(int(department_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees
                WHERE {" AND ".join(clauses)}
                ORDER BY employee_id
                LIMIT 1
                """,
                tuple(params),
            )
            row = fetchone(cur)
            if not row:
                return None
            return _row_to_employee(row)
