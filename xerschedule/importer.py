"""Import a parsed XER schedule into a schedule store.

The store owns persistence and surrogate keys. The importer only decides the
order of writes and translates XER identifiers into the ids handed back by
the store.
"""
from __future__ import annotations

import logging
import uuid
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, List, Mapping, MutableMapping, Optional, Sequence, Set

from .io import ParseResult, XerWbs
from .mapper import parse_xer

logger = logging.getLogger(__name__)


class ScheduleImportError(RuntimeError):
    """Raised when an uploaded schedule cannot be imported."""

    def __init__(self, message: str, details: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.details = list(details)


@dataclass
class ImportSummary:
    project_id: str
    file_name: Optional[str]
    activities_count: int
    relationships_count: int
    wbs_count: int
    skipped_relationships: int
    xer_project_id: Optional[str] = None
    xer_project_name: Optional[str] = None
    data_date: Optional[datetime] = None
    warnings: List[str] = field(default_factory=list)


class ScheduleStore:
    """Persistence operations the importer relies on."""

    def delete_schedule(self, project_id: str) -> None:  # pragma: no cover - interface only
        """Remove relationships, activities and WBS rows for ``project_id``."""
        raise NotImplementedError

    def create_wbs(self, project_id: str, data: Mapping[str, Any]) -> str:  # pragma: no cover - interface only
        """Insert one WBS row and return its new id."""
        raise NotImplementedError

    def create_activities(self, project_id: str, rows: Sequence[Mapping[str, Any]]) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    def activity_ids(self, project_id: str) -> Dict[str, str]:  # pragma: no cover - interface only
        """Return ``{xer_task_id: activity id}`` for the project's activities."""
        raise NotImplementedError

    def create_relationships(self, project_id: str, rows: Sequence[Mapping[str, Any]]) -> None:  # pragma: no cover - interface only
        raise NotImplementedError


class InMemoryScheduleStore(ScheduleStore):
    """Dictionary backed store, used by the CLI dry run and the web service."""

    def __init__(self) -> None:
        self.wbs: MutableMapping[str, List[Dict[str, Any]]] = defaultdict(list)
        self.activities: MutableMapping[str, List[Dict[str, Any]]] = defaultdict(list)
        self.relationships: MutableMapping[str, List[Dict[str, Any]]] = defaultdict(list)

    def delete_schedule(self, project_id: str) -> None:
        self.relationships.pop(project_id, None)
        self.activities.pop(project_id, None)
        self.wbs.pop(project_id, None)

    def create_wbs(self, project_id: str, data: Mapping[str, Any]) -> str:
        row = {"id": _new_id(), "project_id": project_id, **data}
        self.wbs[project_id].append(row)
        return row["id"]

    def create_activities(self, project_id: str, rows: Sequence[Mapping[str, Any]]) -> None:
        self.activities[project_id].extend(
            {"id": _new_id(), "project_id": project_id, **row} for row in rows
        )

    def activity_ids(self, project_id: str) -> Dict[str, str]:
        return {
            row["xer_task_id"]: row["id"]
            for row in self.activities.get(project_id, ())
            if row.get("xer_task_id")
        }

    def create_relationships(self, project_id: str, rows: Sequence[Mapping[str, Any]]) -> None:
        self.relationships[project_id].extend(
            {"id": _new_id(), "project_id": project_id, **row} for row in rows
        )

    def has_schedule(self, project_id: str) -> bool:
        return project_id in self.wbs or project_id in self.activities

    def schedule(self, project_id: str) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "wbs": list(self.wbs.get(project_id, ())),
            "activities": list(self.activities.get(project_id, ())),
            "relationships": list(self.relationships.get(project_id, ())),
        }


def _new_id() -> str:
    return uuid.uuid4().hex


def order_wbs_for_insert(nodes: Sequence[XerWbs]) -> List[XerWbs]:
    """Order WBS nodes so every parent is created before its children.

    Nodes are sorted roots first, then by ``sort_order``; the sort is stable.
    A node whose parent appears in the file but has not been placed yet waits
    until that parent is placed. A parent id missing from the file (or a
    cycle) leaves the node to be placed in sorted position.
    """
    ordered = sorted(nodes, key=lambda node: (node.parent_wbs_id is not None, node.sort_order))
    known = {node.wbs_id for node in nodes}
    waiting: MutableMapping[str, List[XerWbs]] = defaultdict(list)
    placed: Set[str] = set()
    result: List[XerWbs] = []

    def place(node: XerWbs) -> None:
        queue: Deque[XerWbs] = deque([node])
        while queue:
            current = queue.popleft()
            result.append(current)
            placed.add(current.wbs_id)
            queue.extend(waiting.pop(current.wbs_id, ()))

    for node in ordered:
        parent = node.parent_wbs_id
        if parent and parent in known and parent not in placed and parent != node.wbs_id:
            waiting[parent].append(node)
            continue
        place(node)

    # Parents that never got placed form a cycle; keep their subtrees anyway.
    for children in list(waiting.values()):
        for node in children:
            if node.wbs_id not in placed:
                place(node)
    waiting.clear()
    return result


def import_schedule(
    store: ScheduleStore,
    project_id: str,
    content: str,
    *,
    file_name: Optional[str] = None,
    strict: bool = False,
    result: Optional[ParseResult] = None,
) -> ImportSummary:
    """Replace the schedule stored for ``project_id`` with the XER content."""
    if result is None:
        result = parse_xer(content, strict=strict)

    if result.errors and not result.tasks:
        logger.info("Rejected XER import for %s: %s", project_id, "; ".join(result.errors))
        raise ScheduleImportError("Failed to parse XER file", details=result.errors)

    xer_project = result.projects[0] if result.projects else None

    store.delete_schedule(project_id)
    logger.info("Cleared existing schedule for project %s", project_id)

    wbs_map: Dict[str, str] = {}
    for node in order_wbs_for_insert(result.wbs):
        parent_id = wbs_map.get(node.parent_wbs_id) if node.parent_wbs_id else None
        wbs_map[node.wbs_id] = store.create_wbs(
            project_id,
            {
                "xer_wbs_id": node.wbs_id,
                "code": node.short_code,
                "name": node.name,
                "parent_id": parent_id,
                "sort_order": node.sort_order,
                "is_expanded": True,
            },
        )
    logger.info("Created %d WBS rows for project %s", len(wbs_map), project_id)

    activity_rows = [
        {
            "wbs_id": wbs_map.get(task.wbs_id) if task.wbs_id else None,
            "xer_task_id": task.task_id,
            "activity_id": task.activity_code,
            "name": task.name,
            "status": task.status.value,
            "percent_complete": task.percent_complete,
            "planned_start": task.target_start,
            "planned_finish": task.target_finish,
            "actual_start": task.actual_start,
            "actual_finish": task.actual_finish,
            "early_start": task.early_start,
            "early_finish": task.early_finish,
            "late_start": task.late_start,
            "late_finish": task.late_finish,
            "planned_duration": task.planned_duration_hrs,
            "remaining_duration": task.remaining_duration_hrs,
            "total_float": task.total_float_hrs,
            "free_float": task.free_float_hrs,
            "is_critical": task.is_critical,
            "driving_path_flag": task.driving_path_flag,
            "activity_type": task.activity_type,
            "constraint_type": task.constraint_type,
            "constraint_date": task.constraint_date,
            "sort_order": index,
        }
        for index, task in enumerate(result.tasks)
    ]
    store.create_activities(project_id, activity_rows)
    logger.info("Created %d activities for project %s", len(activity_rows), project_id)

    activity_map = store.activity_ids(project_id)
    relationship_rows = []
    skipped = 0
    for pred in result.task_preds:
        predecessor_id = activity_map.get(pred.predecessor_task_id)
        successor_id = activity_map.get(pred.task_id)
        if not predecessor_id or not successor_id:
            skipped += 1
            continue
        relationship_rows.append(
            {
                "predecessor_id": predecessor_id,
                "successor_id": successor_id,
                "type": pred.relation_type.value,
                "lag_hours": pred.lag_hrs,
                "xer_pred_id": pred.id,
            }
        )
    if relationship_rows:
        store.create_relationships(project_id, relationship_rows)
    logger.info(
        "Created %d relationships for project %s (%d unresolved skipped)",
        len(relationship_rows),
        project_id,
        skipped,
    )

    return ImportSummary(
        project_id=project_id,
        file_name=file_name,
        activities_count=len(result.tasks),
        relationships_count=len(relationship_rows),
        wbs_count=len(result.wbs),
        skipped_relationships=skipped,
        xer_project_id=xer_project.project_id if xer_project else None,
        xer_project_name=xer_project.short_name if xer_project else None,
        data_date=xer_project.data_date if xer_project else None,
        warnings=[*result.errors, *result.warnings],
    )


__all__ = [
    "ImportSummary",
    "InMemoryScheduleStore",
    "ScheduleImportError",
    "ScheduleStore",
    "import_schedule",
    "order_wbs_for_insert",
]
