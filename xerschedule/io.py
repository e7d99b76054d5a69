"""Schedule records produced by the XER parser and file loading helpers."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .codes import (
    ActivityStatus,
    RelationshipType,
    is_critical_activity,
    map_xer_relation_type,
    map_xer_status,
)


@dataclass(frozen=True)
class XerProject:
    project_id: str
    short_name: str
    plan_start: Optional[datetime] = None
    plan_end: Optional[datetime] = None
    data_date: Optional[datetime] = None


@dataclass(frozen=True)
class XerWbs:
    wbs_id: str
    project_id: str
    parent_wbs_id: Optional[str]
    short_code: str
    name: str
    sort_order: float = 0


@dataclass(frozen=True)
class XerTask:
    task_id: str
    project_id: str
    wbs_id: Optional[str]
    activity_code: str
    name: str
    status_raw: str
    percent_complete: float = 0
    target_start: Optional[datetime] = None
    target_finish: Optional[datetime] = None
    actual_start: Optional[datetime] = None
    actual_finish: Optional[datetime] = None
    early_start: Optional[datetime] = None
    early_finish: Optional[datetime] = None
    late_start: Optional[datetime] = None
    late_finish: Optional[datetime] = None
    planned_duration_hrs: Optional[float] = None
    remaining_duration_hrs: Optional[float] = None
    total_float_hrs: Optional[float] = None
    free_float_hrs: Optional[float] = None
    activity_type: Optional[str] = None
    driving_path_flag: bool = False
    constraint_type: Optional[str] = None
    constraint_date: Optional[datetime] = None

    @property
    def status(self) -> ActivityStatus:
        return map_xer_status(self.status_raw)

    @property
    def is_critical(self) -> bool:
        return is_critical_activity(self.total_float_hrs)


@dataclass(frozen=True)
class XerTaskPred:
    id: str
    task_id: str
    predecessor_task_id: str
    project_id: str
    pred_type: str
    lag_hrs: float = 0

    @property
    def relation_type(self) -> RelationshipType:
        return map_xer_relation_type(self.pred_type)


@dataclass(frozen=True)
class ParseResult:
    projects: Sequence[XerProject] = ()
    wbs: Sequence[XerWbs] = ()
    tasks: Sequence[XerTask] = ()
    task_preds: Sequence[XerTaskPred] = ()
    errors: Sequence[str] = ()
    warnings: Sequence[str] = ()


class DataError(RuntimeError):
    """Raised when an input file cannot be read."""


def load_xer(path_like: Path | str, encoding: str = "utf-8") -> str:
    """Read an XER file from disk.

    Undecodable bytes are replaced rather than rejected; P6 exports are often
    written in a Windows code page even when labelled otherwise.
    """
    path = Path(path_like)
    if not path.exists():
        raise DataError(f"XER file not found: {path}")
    if not path.is_file():
        raise DataError(f"XER path is not a file: {path}")
    try:
        return path.read_bytes().decode(encoding, errors="replace")
    except LookupError as exc:
        raise DataError(f"Unknown text encoding: {encoding}") from exc


def record_to_dict(record: Any) -> Dict[str, Any]:
    """Convert one of the frozen records into JSON-serialisable values."""
    data: Dict[str, Any] = {}
    for item in fields(record):
        value = getattr(record, item.name)
        if isinstance(value, datetime):
            value = value.isoformat()
        data[item.name] = value
    return data


def result_to_dict(result: ParseResult) -> Dict[str, List[Any]]:
    """Helper to convert a :class:`ParseResult` into a JSON-serialisable dictionary."""

    tasks = []
    for task in result.tasks:
        entry = record_to_dict(task)
        entry["status"] = task.status.value
        entry["is_critical"] = task.is_critical
        tasks.append(entry)

    task_preds = []
    for pred in result.task_preds:
        entry = record_to_dict(pred)
        entry["relation_type"] = pred.relation_type.value
        task_preds.append(entry)

    return {
        "projects": [record_to_dict(project) for project in result.projects],
        "wbs": [record_to_dict(node) for node in result.wbs],
        "tasks": tasks,
        "task_preds": task_preds,
        "errors": list(result.errors),
        "warnings": list(result.warnings),
    }


__all__ = [
    "ActivityStatus",
    "RelationshipType",
    "XerProject",
    "XerWbs",
    "XerTask",
    "XerTaskPred",
    "ParseResult",
    "DataError",
    "load_xer",
    "record_to_dict",
    "result_to_dict",
]
