"""Classification of P6 codes into schedule status and relationship types."""
from __future__ import annotations

from enum import Enum
from typing import Optional

PRED_TYPES = ("PR_FS", "PR_SS", "PR_FF", "PR_SF")

HOURS_PER_DAY = 8.0


class ActivityStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class RelationshipType(str, Enum):
    FS = "FS"
    SS = "SS"
    FF = "FF"
    SF = "SF"


_STATUS_CODES = {
    "TK_Complete": ActivityStatus.COMPLETED,
    "TK_Active": ActivityStatus.IN_PROGRESS,
    "TK_NotStart": ActivityStatus.NOT_STARTED,
}

_RELATION_CODES = {
    "PR_FS": RelationshipType.FS,
    "PR_SS": RelationshipType.SS,
    "PR_FF": RelationshipType.FF,
    "PR_SF": RelationshipType.SF,
}


def map_xer_status(status_code: Optional[str]) -> ActivityStatus:
    """Map a P6 ``status_code``; anything unrecognised is not started."""
    return _STATUS_CODES.get(status_code or "", ActivityStatus.NOT_STARTED)


def map_xer_relation_type(pred_type: Optional[str]) -> RelationshipType:
    """Map a P6 ``pred_type``; anything unrecognised is finish-to-start."""
    return _RELATION_CODES.get(pred_type or "", RelationshipType.FS)


def is_critical_activity(total_float_hrs: Optional[float]) -> bool:
    """Activities with total float <= 0 are on the critical path.

    Unknown float is treated as not critical.
    """
    if total_float_hrs is None:
        return False
    return total_float_hrs <= 0


def hours_to_workdays(
    hours: Optional[float], hours_per_day: float = HOURS_PER_DAY
) -> Optional[float]:
    if hours is None:
        return None
    return hours / hours_per_day


__all__ = [
    "ActivityStatus",
    "RelationshipType",
    "PRED_TYPES",
    "HOURS_PER_DAY",
    "map_xer_status",
    "map_xer_relation_type",
    "is_critical_activity",
    "hours_to_workdays",
]
