from __future__ import annotations

import logging
from typing import List, Optional

from .model import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def record(self, actor_id: str, action: str, details: str, request_id: Optional[int] = None) -> None:
        """Write one audit line. Failures are logged, never raised."""
        try:
            self._audit.record(actor_id=str(actor_id), action=action, details=details, request_id=request_id)
        except Exception as ex:
            logger.warning("Audit %r for request %s failed: %s", action, request_id, ex)

    def trail(self, request_id: int) -> List[AuditEntry]:
        """Audit lines of one request, oldest first."""
        return self._audit.list_for_request(request_id=int(request_id))
