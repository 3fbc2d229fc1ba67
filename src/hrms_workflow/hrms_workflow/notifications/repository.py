from __future__ import annotations

from typing import List, Optional, Protocol

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, employee_id: str, message: str, request_id: Optional[int] = None) -> int:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, employee_id: str) -> bool:
        """Only the owner can mark a notification read."""

        raise NotImplementedError
