from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..core.enums import RequestType, StageName, StageState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from ..users.model import Employee
from ..users.mysql_employee_repository import write_balances
from .model import ApprovalRequest, NewRequest, Page, RequestFilter
from .repository import RequestRepository

# Stage -> column. Only these names are ever interpolated into SQL.
_STATUS_COLUMNS: Dict[StageName, str] = {
    StageName.HOD: "hod_status",
    StageName.CEO: "ceo_status",
    StageName.ADMIN: "admin_status",
}

_REQUEST_COLUMNS = """
    r.request_id, r.request_type, r.requester_id, r.requester_name, r.department_id,
    r.hod_status, r.ceo_status, r.admin_status, r.remarks,
    r.start_date, r.end_date, r.payload, r.created_at, r.updated_at
"""


def _row_to_request(r: Dict[str, Any]) -> ApprovalRequest:
    return ApprovalRequest(
        request_id=int(r["request_id"]),
        request_type=RequestType(r["request_type"]),
        requester_id=str(r["requester_id"]),
        requester_name=r.get("requester_name") or "",
        department_id=r.get("department_id"),
        stage_status={stage: StageState(r[col]) for stage, col in _STATUS_COLUMNS.items()},
        remarks=r.get("remarks"),
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
        payload=load_json(r.get("payload")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewRequest, *, requester_balances: Optional[Employee] = None) -> int:
        status = {stage: new.stage_status.get(stage, StageState.PENDING) for stage in _STATUS_COLUMNS}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approval_requests(
                    request_type, requester_id, requester_name, department_id,
                    hod_status, ceo_status, admin_status,
                    start_date, end_date, payload
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.request_type.value,
                    new.requester_id,
                    new.requester_name,
                    new.department_id,
                    status[StageName.HOD].value,
                    status[StageName.CEO].value,
                    status[StageName.ADMIN].value,
                    new.start_date,
                    new.end_date,
                    dump_json(new.payload),
                ),
            )
            request_id = int(cur.lastrowid)
            if requester_balances is not None:
                write_balances(cur, requester_balances)
            return request_id

    def get(self, *, request_id: int) -> Optional[ApprovalRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM approval_requests r
                WHERE r.request_id=%s
                """,
                (int(request_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _row_to_request(r)

    def list(self, *, request_type: RequestType, filters: RequestFilter) -> Page:
        clauses = ["r.request_type=%s"]
        params: list[object] = [RequestType(request_type).value]

        if filters.employee_id:
            clauses.append("r.requester_id=%s")
            params.append(str(filters.employee_id))
        if filters.department_id is not None:
            clauses.append("r.department_id=%s")
            params.append(int(filters.department_id))
        if filters.status is not None:
            clauses.append("(r.hod_status=%s OR r.ceo_status=%s OR r.admin_status=%s)")
            params.extend([filters.status.value] * 3)
        if filters.from_date is not None:
            clauses.append("r.start_date>=%s")
            params.append(filters.from_date)
        if filters.to_date is not None:
            clauses.append("r.end_date<=%s")
            params.append(filters.to_date)

        where = " AND ".join(clauses)
        page = max(int(filters.page), 1)
        limit = int(filters.limit)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM approval_requests r WHERE {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total", 0))

            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM approval_requests r
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [limit, (page - 1) * limit]),
            )
            items = [_row_to_request(r) for r in fetchall(cur)]

        return Page(items=items, total=total, page=page, limit=limit)

    def save_decision(
        self,
        *,
        request_id: int,
        stage: StageName,
        expected: StageState,
        stage_status: Mapping[StageName, StageState],
        remarks: Optional[str],
        requester_balances: Optional[Employee] = None,
    ) -> bool:
        guard_col = _STATUS_COLUMNS[StageName(stage)]
        sets = [f"{col}=%s" for col in _STATUS_COLUMNS.values()]
        values = [
            stage_status.get(s, StageState.PENDING).value for s in _STATUS_COLUMNS
        ]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE approval_requests
                SET {", ".join(sets)}, remarks=%s, updated_at=NOW()
                WHERE request_id=%s AND {guard_col}=%s
                """,
                tuple(values + [remarks, int(request_id), StageState(expected).value]),
            )
            if cur.rowcount <= 0:
                return False
            if requester_balances is not None:
                write_balances(cur, requester_balances)
            return True
