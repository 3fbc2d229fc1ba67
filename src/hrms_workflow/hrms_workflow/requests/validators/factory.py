from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ...core.enums import RequestType
from .base import RequestValidator
from .leave_validator import LeaveValidator
from .od_validator import ODValidator
from .ot_validator import OTValidator
from .punch_missed_validator import PunchMissedValidator


def _default_validators() -> Dict[RequestType, RequestValidator]:
    return {
        RequestType.LEAVE: LeaveValidator(),
        RequestType.OD: ODValidator(),
        RequestType.OT: OTValidator(),
        RequestType.PUNCH_MISSED: PunchMissedValidator(),
    }


@dataclass
class RequestValidatorFactory:
    """Factory Pattern: pick the validator for a request type."""

    validators: Dict[RequestType, RequestValidator] = field(default_factory=_default_validators)

    def for_type(self, request_type: RequestType) -> RequestValidator:
        return self.validators[RequestType(request_type)]
