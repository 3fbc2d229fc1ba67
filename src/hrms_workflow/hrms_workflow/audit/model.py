from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AuditEntry:
    audit_id: int
    actor_id: str
    action: str
    details: str
    request_id: Optional[int] = None
    created_at: Optional[datetime] = None
