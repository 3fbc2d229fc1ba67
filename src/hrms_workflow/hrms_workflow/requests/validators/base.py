from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional

from ...users.model import Employee


@dataclass(frozen=True)
class ValidatedPayload:
    payload: Dict[str, Any]
    start_date: Optional[date]
    end_date: Optional[date]


class RequestValidator(ABC):
    """Strategy Pattern: eligibility and field rules for one request type.

    Runs once, before a request is stored. The approval engine never calls it.
    """

    @abstractmethod
    def validate(self, payload: Mapping[str, Any], *, requester: Employee, today: date) -> ValidatedPayload:
        raise NotImplementedError
