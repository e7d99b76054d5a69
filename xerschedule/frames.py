"""Tabular (pandas) views of a parse result."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import pandas as pd

from .codes import HOURS_PER_DAY, hours_to_workdays
from .io import ParseResult, record_to_dict

PROJECT_COLUMNS = ["project_id", "short_name", "plan_start", "plan_end", "data_date"]
WBS_COLUMNS = ["wbs_id", "project_id", "parent_wbs_id", "short_code", "name", "sort_order"]
TASK_COLUMNS = [
    "task_id",
    "project_id",
    "wbs_id",
    "activity_code",
    "name",
    "status_raw",
    "status",
    "percent_complete",
    "target_start",
    "target_finish",
    "actual_start",
    "actual_finish",
    "early_start",
    "early_finish",
    "late_start",
    "late_finish",
    "planned_duration_hrs",
    "remaining_duration_hrs",
    "total_float_hrs",
    "free_float_hrs",
    "planned_duration_days",
    "remaining_duration_days",
    "total_float_days",
    "is_critical",
    "activity_type",
    "driving_path_flag",
    "constraint_type",
    "constraint_date",
]
TASK_PRED_COLUMNS = [
    "id",
    "task_id",
    "predecessor_task_id",
    "project_id",
    "pred_type",
    "relation_type",
    "lag_hrs",
]


def result_to_frames(
    result: ParseResult, hours_per_day: float = HOURS_PER_DAY
) -> Dict[str, pd.DataFrame]:
    """Build one DataFrame per record list; empty lists keep their columns."""
    tasks = []
    for task in result.tasks:
        row = record_to_dict(task)
        row["status"] = task.status.value
        row["is_critical"] = task.is_critical
        row["planned_duration_days"] = hours_to_workdays(task.planned_duration_hrs, hours_per_day)
        row["remaining_duration_days"] = hours_to_workdays(
            task.remaining_duration_hrs, hours_per_day
        )
        row["total_float_days"] = hours_to_workdays(task.total_float_hrs, hours_per_day)
        tasks.append(row)

    preds = []
    for pred in result.task_preds:
        row = record_to_dict(pred)
        row["relation_type"] = pred.relation_type.value
        preds.append(row)

    return {
        "projects": pd.DataFrame(
            [record_to_dict(project) for project in result.projects], columns=PROJECT_COLUMNS
        ),
        "wbs": pd.DataFrame([record_to_dict(node) for node in result.wbs], columns=WBS_COLUMNS),
        "tasks": pd.DataFrame(tasks, columns=TASK_COLUMNS),
        "task_preds": pd.DataFrame(preds, columns=TASK_PRED_COLUMNS),
    }


def write_csv_bundle(
    result: ParseResult, directory: Path, hours_per_day: float = HOURS_PER_DAY
) -> Dict[str, Path]:
    directory.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}
    for name, frame in result_to_frames(result, hours_per_day).items():
        target = directory / f"{name}.csv"
        frame.to_csv(target, index=False)
        written[name] = target

    errors_path = directory / "errors.json"
    with errors_path.open("w", encoding="utf-8") as handle:
        json.dump(
            {"errors": list(result.errors), "warnings": list(result.warnings)},
            handle,
            ensure_ascii=False,
            indent=2,
        )
    written["errors"] = errors_path
    return written


__all__ = ["result_to_frames", "write_csv_bundle"]
