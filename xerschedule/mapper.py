"""Turn decoded XER tables into typed schedule records."""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .codes import (
    PRED_TYPES,
    hours_to_workdays,
    is_critical_activity,
    map_xer_relation_type,
    map_xer_status,
)
from .coerce import parse_xer_date, parse_xer_flag, parse_xer_number
from .decoder import Table, decode
from .io import ParseResult, XerProject, XerTask, XerTaskPred, XerWbs

logger = logging.getLogger(__name__)

PROJECT_TABLE = "PROJECT"
WBS_TABLE = "PROJWBS"
TASK_TABLE = "TASK"
TASKPRED_TABLE = "TASKPRED"


def parse_xer(content: str, strict: bool = False) -> ParseResult:
    """Parse XER text into projects, WBS nodes, tasks and relationships.

    Always returns a result. Missing tables are reported in ``errors``; with
    ``strict`` enabled, rows the lenient parse drops or truncates are also
    reported in ``warnings``.
    """
    warnings: Optional[List[str]] = [] if strict else None
    tables = decode(content, warnings=warnings)
    return map_to_domain(tables, strict=strict, warnings=warnings)


def map_to_domain(
    tables: Mapping[str, Table],
    strict: bool = False,
    warnings: Optional[List[str]] = None,
) -> ParseResult:
    errors: List[str] = []
    if strict and warnings is None:
        warnings = []

    projects: List[XerProject] = []
    table = _require(tables, PROJECT_TABLE, errors)
    if table is not None:
        projects = [_project(row) for row in table.rows]

    wbs: List[XerWbs] = []
    table = _require(tables, WBS_TABLE, errors)
    if table is not None:
        wbs = [_wbs(row) for row in table.rows]

    tasks: List[XerTask] = []
    table = _require(tables, TASK_TABLE, errors)
    if table is not None:
        tasks = [_task(row) for row in table.rows]

    task_preds: List[XerTaskPred] = []
    table = _require(tables, TASKPRED_TABLE, errors)
    if table is not None:
        dropped = 0
        for row in table.rows:
            pred_type = row.get("pred_type", "")
            if pred_type not in PRED_TYPES:
                dropped += 1
                if warnings is not None:
                    warnings.append(
                        f"TASKPRED {row.get('task_pred_id', '')!r} dropped: "
                        f"unknown relationship type {pred_type!r}"
                    )
                continue
            task_preds.append(_task_pred(row, pred_type))
        if dropped:
            logger.debug("Dropped %d relationships with unknown pred_type", dropped)

    logger.debug(
        "Mapped %d projects, %d WBS nodes, %d tasks, %d relationships",
        len(projects),
        len(wbs),
        len(tasks),
        len(task_preds),
    )
    return ParseResult(
        projects=projects,
        wbs=wbs,
        tasks=tasks,
        task_preds=task_preds,
        errors=errors,
        warnings=list(warnings or ()),
    )


def _require(tables: Mapping[str, Table], name: str, errors: List[str]) -> Optional[Table]:
    table = tables.get(name)
    if table is None:
        errors.append(f"{name} table not found in XER file")
    return table


def _project(row: Dict[str, str]) -> XerProject:
    return XerProject(
        project_id=row.get("proj_id") or "",
        short_name=row.get("proj_short_name") or "",
        plan_start=parse_xer_date(row.get("plan_start_date")),
        plan_end=parse_xer_date(row.get("plan_end_date")),
        data_date=parse_xer_date(row.get("last_recalc_date")),
    )


def _wbs(row: Dict[str, str]) -> XerWbs:
    return XerWbs(
        wbs_id=row.get("wbs_id") or "",
        project_id=row.get("proj_id") or "",
        parent_wbs_id=row.get("parent_wbs_id") or None,
        short_code=row.get("wbs_short_name") or "",
        name=row.get("wbs_name") or "",
        sort_order=parse_xer_number(row.get("seq_num")) or 0,
    )


def _task(row: Dict[str, str]) -> XerTask:
    return XerTask(
        task_id=row.get("task_id") or "",
        project_id=row.get("proj_id") or "",
        wbs_id=row.get("wbs_id") or None,
        activity_code=row.get("task_code") or "",
        name=row.get("task_name") or "",
        status_raw=row.get("status_code") or "TK_NotStart",
        percent_complete=parse_xer_number(row.get("phys_complete_pct")) or 0,
        target_start=parse_xer_date(row.get("target_start_date")),
        target_finish=parse_xer_date(row.get("target_end_date")),
        actual_start=parse_xer_date(row.get("act_start_date")),
        actual_finish=parse_xer_date(row.get("act_end_date")),
        early_start=parse_xer_date(row.get("early_start_date")),
        early_finish=parse_xer_date(row.get("early_end_date")),
        late_start=parse_xer_date(row.get("late_start_date")),
        late_finish=parse_xer_date(row.get("late_end_date")),
        planned_duration_hrs=parse_xer_number(row.get("target_drtn_hr_cnt")),
        remaining_duration_hrs=parse_xer_number(row.get("remain_drtn_hr_cnt")),
        total_float_hrs=parse_xer_number(row.get("total_float_hr_cnt")),
        free_float_hrs=parse_xer_number(row.get("free_float_hr_cnt")),
        activity_type=row.get("task_type") or None,
        driving_path_flag=parse_xer_flag(row.get("driving_path_flag")),
        constraint_type=row.get("cstr_type") or None,
        constraint_date=parse_xer_date(row.get("cstr_date")),
    )


def _task_pred(row: Dict[str, str], pred_type: str) -> XerTaskPred:
    return XerTaskPred(
        id=row.get("task_pred_id") or "",
        task_id=row.get("task_id") or "",
        predecessor_task_id=row.get("pred_task_id") or "",
        project_id=row.get("proj_id") or "",
        pred_type=pred_type,
        lag_hrs=parse_xer_number(row.get("lag_hr_cnt")) or 0,
    )


__all__ = [
    "parse_xer",
    "map_to_domain",
    "map_xer_status",
    "map_xer_relation_type",
    "is_critical_activity",
    "hours_to_workdays",
]
