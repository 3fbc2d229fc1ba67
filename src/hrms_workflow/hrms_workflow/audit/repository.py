from __future__ import annotations

from typing import List, Optional, Protocol

from .model import AuditEntry


class AuditRepository(Protocol):
    """Append-only trail of who did what to which request."""

    def record(self, *, actor_id: str, action: str, details: str, request_id: Optional[int] = None) -> int:
        raise NotImplementedError

    def list_for_request(self, *, request_id: int) -> List[AuditEntry]:
        raise NotImplementedError
