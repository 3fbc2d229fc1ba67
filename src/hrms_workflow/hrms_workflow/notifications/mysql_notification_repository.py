from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


def _row_to_notification(r: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        employee_id=str(r["employee_id"]),
        message=r["message"],
        request_id=r.get("request_id"),
        is_read=bool(r.get("is_read")),
        created_at=r.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, employee_id: str, message: str, request_id: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(employee_id, message, request_id) VALUES(%s,%s,%s)",
                (str(employee_id), message, request_id),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, *, employee_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        where = "employee_id=%s"
        if unread_only:
            where += " AND is_read=0"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, employee_id, message, request_id, is_read, created_at
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (str(employee_id), int(limit)),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, *, notification_id: int, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND employee_id=%s",
                (int(notification_id), str(employee_id)),
            )
            return cur.rowcount > 0
