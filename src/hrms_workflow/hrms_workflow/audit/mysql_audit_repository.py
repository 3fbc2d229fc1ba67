from __future__ import annotations

from typing import List, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, *, actor_id: str, action: str, details: str, request_id: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(actor_id, action, details, request_id)
                VALUES(%s,%s,%s,%s)
                """,
                (str(actor_id), action, details, request_id),
            )
            return int(cur.lastrowid)

    def list_for_request(self, *, request_id: int) -> List[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, actor_id, action, details, request_id, created_at
                FROM audit_logs
                WHERE request_id=%s
                ORDER BY created_at ASC, audit_id ASC
                """,
                (int(request_id),),
            )
            return [
                AuditEntry(
                    audit_id=int(r["audit_id"]),
                    actor_id=str(r["actor_id"]),
                    action=r["action"],
                    details=r.get("details") or "",
                    request_id=r.get("request_id"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
