from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: int
    employee_id: str
    message: str
    request_id: Optional[int] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
