from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.hrms_workflow.hrms_workflow.audit.model import AuditEntry
from src.hrms_workflow.hrms_workflow.audit.service import AuditService
from src.hrms_workflow.hrms_workflow.core.enums import EmploymentType, Gender, Role, StageName, StageState
from src.hrms_workflow.hrms_workflow.notifications.model import Notification
from src.hrms_workflow.hrms_workflow.notifications.service import NotificationService
from src.hrms_workflow.hrms_workflow.requests.model import ApprovalRequest, Page
from src.hrms_workflow.hrms_workflow.requests.service import RequestService
from src.hrms_workflow.hrms_workflow.users.model import CompensatoryEntry, Employee
from src.hrms_workflow.hrms_workflow.users.service import IdentityService

FIXED_TODAY = date(2026, 3, 10)

ENGINEERING = 2
HUMAN_RESOURCES = 3


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(str(employee_id))

    def find_by_role(self, role, *, department_id=None):
        for e in self._by_id.values():
            if e.role != role or not e.is_active:
                continue
            if department_id is not None and e.department_id != department_id:
                continue
            return e
        return None

    def store(self, employee):
        self._by_id[employee.employee_id] = employee


class FakeRequestsRepo:
    def __init__(self, employees_repo=None):
        self._employees = employees_repo
        self._next_id = 1
        self.rows: dict[int, ApprovalRequest] = {}
        self.lost_race = False

    def create(self, new, *, requester_balances=None):
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = ApprovalRequest(
            request_id=rid,
            request_type=new.request_type,
            requester_id=new.requester_id,
            requester_name=new.requester_name,
            department_id=new.department_id,
            stage_status=dict(new.stage_status),
            payload=dict(new.payload),
            start_date=new.start_date,
            end_date=new.end_date,
            created_at=datetime(2026, 3, 10, 9, 0, rid),
        )
        self._store_balances(requester_balances)
        return rid

    def get(self, *, request_id):
        return self.rows.get(int(request_id))

    def list(self, *, request_type, filters):
        items = [r for r in self.rows.values() if r.request_type == request_type]
        if filters.employee_id:
            items = [r for r in items if r.requester_id == filters.employee_id]
        if filters.department_id is not None:
            items = [r for r in items if r.department_id == filters.department_id]
        if filters.status is not None:
            items = [r for r in items if filters.status in r.stage_status.values()]
        if filters.from_date is not None:
            items = [r for r in items if r.start_date and r.start_date >= filters.from_date]
        if filters.to_date is not None:
            items = [r for r in items if r.end_date and r.end_date <= filters.to_date]
        items.sort(key=lambda r: r.request_id, reverse=True)
        offset = (filters.page - 1) * filters.limit
        return Page(
            items=items[offset : offset + filters.limit],
            total=len(items),
            page=filters.page,
            limit=filters.limit,
        )

    def save_decision(self, *, request_id, stage, expected, stage_status, remarks, requester_balances=None):
        req = self.rows.get(int(request_id))
        if self.lost_race or not req or req.status_of(stage) != expected:
            return False
        self.rows[int(request_id)] = replace(req, stage_status=dict(stage_status), remarks=remarks)
        self._store_balances(requester_balances)
        return True

    def _store_balances(self, employee):
        if employee is not None and self._employees is not None:
            self._employees.store(employee)


class FakeNotificationsRepo:
    def __init__(self):
        self.items: list[Notification] = []
        self.broken = False

    def create(self, *, employee_id, message, request_id=None):
        if self.broken:
            raise RuntimeError("notification store is down")
        nid = len(self.items) + 1
        self.items.append(Notification(notification_id=nid, employee_id=employee_id, message=message, request_id=request_id))
        return nid

    def list_for_employee(self, *, employee_id, unread_only=False, limit=50):
        found = [n for n in self.items if n.employee_id == employee_id and not (unread_only and n.is_read)]
        return list(reversed(found))[:limit]

    def mark_read(self, *, notification_id, employee_id):
        for i, n in enumerate(self.items):
            if n.notification_id == notification_id and n.employee_id == employee_id:
                self.items[i] = replace(n, is_read=True)
                return True
        return False

    def for_employee(self, employee_id):
        return [n.message for n in self.items if n.employee_id == employee_id]


class FakeAuditRepo:
    def __init__(self):
        self.rows: list[AuditEntry] = []

    @property
    def entries(self):
        return [(e.actor_id, e.action, e.request_id) for e in self.rows]

    def record(self, *, actor_id, action, details, request_id=None):
        aid = len(self.rows) + 1
        self.rows.append(AuditEntry(audit_id=aid, actor_id=actor_id, action=action, details=details, request_id=request_id))
        return aid

    def list_for_request(self, *, request_id):
        return [e for e in self.rows if e.request_id == request_id]


def _employee(employee_id, name, role, department_id, **kwargs):
    return Employee(employee_id=employee_id, name=name, role=role, department_id=department_id, **kwargs)


@pytest.fixture
def fixed_today():
    return FIXED_TODAY


@pytest.fixture
def employees():
    return {
        "admin": _employee("ADM001", "Meera Iyer", Role.ADMIN, 1),
        "ceo": _employee("CEO001", "Rajesh Menon", Role.CEO, 1),
        "hod": _employee("HOD001", "Lakshmi Narayan", Role.HOD, ENGINEERING),
        "hod_hr": _employee("HOD002", "Suresh Babu", Role.HOD, HUMAN_RESOURCES),
        "priya": _employee(
            "EMP001",
            "Priya Raman",
            Role.EMPLOYEE,
            ENGINEERING,
            gender=Gender.FEMALE,
            employment_type=EmploymentType.CONFIRMED,
            date_of_joining=date(2021, 6, 1),
            emergency_leave_permitted=True,
            paid_leaves=12,
            compensatory_entries=(CompensatoryEntry("CO-1", date(2026, 2, 14), 8),),
        ),
        "arun": _employee(
            "EMP002",
            "Arun Kumar",
            Role.EMPLOYEE,
            ENGINEERING,
            gender=Gender.MALE,
            employment_type=EmploymentType.PROBATION,
            date_of_joining=date(2025, 11, 3),
            paid_leaves=2,
        ),
        "karthik": _employee(
            "EMP003",
            "Karthik Subramanian",
            Role.EMPLOYEE,
            HUMAN_RESOURCES,
            gender=Gender.MALE,
            employment_type=EmploymentType.CONFIRMED,
            date_of_joining=date(2019, 1, 7),
            paid_leaves=12,
        ),
    }


@pytest.fixture
def employees_repo(employees):
    return FakeEmployeesRepo(employees.values())


@pytest.fixture
def requests_repo(employees_repo):
    return FakeRequestsRepo(employees_repo)


@pytest.fixture
def notifications_repo():
    return FakeNotificationsRepo()


@pytest.fixture
def audit_repo():
    return FakeAuditRepo()


@pytest.fixture
def identity(employees_repo):
    return IdentityService(employees_repo)


@pytest.fixture
def notification_service(notifications_repo, identity):
    return NotificationService(notifications_repo, identity)


@pytest.fixture
def request_service(requests_repo, identity, notification_service, audit_repo, fixed_today):
    return RequestService(
        requests_repo,
        identity,
        notification_service,
        AuditService(audit_repo),
        today=lambda: fixed_today,
    )


@pytest.fixture
def make_request():
    """Build an ApprovalRequest with explicit stage states."""

    def _make(request_type, request_id=1, requester_id="EMP001", department_id=ENGINEERING, remarks=None, **states):
        return ApprovalRequest(
            request_id=request_id,
            request_type=request_type,
            requester_id=requester_id,
            department_id=department_id,
            stage_status={StageName(k): StageState(v) for k, v in states.items()},
            remarks=remarks,
        )

    return _make
