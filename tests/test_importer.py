"""Tests for importing a parsed schedule into a store."""
import pytest

from xerschedule.importer import (
    InMemoryScheduleStore,
    ScheduleImportError,
    import_schedule,
    order_wbs_for_insert,
)
from xerschedule.io import XerWbs


def wbs(wbs_id, parent, order):
    return XerWbs(
        wbs_id=wbs_id,
        project_id="P1",
        parent_wbs_id=parent,
        short_code=wbs_id,
        name=wbs_id,
        sort_order=order,
    )


def test_roots_come_first_then_sequence():
    nodes = [wbs("C", "A", 5), wbs("B", None, 2), wbs("A", None, 1), wbs("D", "A", 3)]

    assert [node.wbs_id for node in order_wbs_for_insert(nodes)] == ["A", "B", "D", "C"]


def test_parent_sorted_after_child_is_still_created_first():
    nodes = [
        wbs("ROOT", None, 1),
        wbs("LEAF", "MID", 2),
        wbs("MID", "ROOT", 9),
    ]

    order = [node.wbs_id for node in order_wbs_for_insert(nodes)]
    assert order == ["ROOT", "MID", "LEAF"]


def test_unknown_parent_and_cycles_keep_every_node():
    nodes = [wbs("X", "MISSING", 1), wbs("Y", "Z", 2), wbs("Z", "Y", 3)]

    order = [node.wbs_id for node in order_wbs_for_insert(nodes)]
    assert sorted(order) == ["X", "Y", "Z"]
    assert order[0] == "X"


def test_import_builds_remapped_schedule(sample_xer):
    store = InMemoryScheduleStore()
    summary = import_schedule(store, "proj-1", sample_xer, file_name="tower.xer")

    assert summary.wbs_count == 3
    assert summary.activities_count == 3
    assert summary.relationships_count == 2
    assert summary.skipped_relationships == 1
    assert summary.xer_project_id == "P1"
    assert summary.xer_project_name == "Tower A"
    assert summary.warnings == []

    schedule = store.schedule("proj-1")
    wbs_rows = {row["xer_wbs_id"]: row for row in schedule["wbs"]}
    assert [row["xer_wbs_id"] for row in schedule["wbs"]] == ["W1", "W2", "W3"]
    assert wbs_rows["W1"]["parent_id"] is None
    assert wbs_rows["W2"]["parent_id"] == wbs_rows["W1"]["id"]

    activities = {row["xer_task_id"]: row for row in schedule["activities"]}
    assert activities["T1"]["wbs_id"] == wbs_rows["W2"]["id"]
    assert activities["T2"]["status"] == "IN_PROGRESS"
    assert activities["T2"]["is_critical"] is True
    assert activities["T3"]["sort_order"] == 2

    relationships = schedule["relationships"]
    assert {row["xer_pred_id"] for row in relationships} == {"R1", "R2"}
    second = next(row for row in relationships if row["xer_pred_id"] == "R2")
    assert second["predecessor_id"] == activities["T2"]["id"]
    assert second["successor_id"] == activities["T3"]["id"]
    assert second["type"] == "SS"
    assert second["lag_hours"] == 16


def test_reimport_replaces_previous_schedule(sample_xer):
    store = InMemoryScheduleStore()
    import_schedule(store, "proj-1", sample_xer)
    import_schedule(store, "proj-1", sample_xer)

    schedule = store.schedule("proj-1")
    assert len(schedule["activities"]) == 3
    assert len(schedule["wbs"]) == 3


def test_import_rejected_when_no_tasks():
    store = InMemoryScheduleStore()
    content = "%T\tPROJECT\n%F\tproj_id\tproj_short_name\n%R\tP1\tDemo\n"

    with pytest.raises(ScheduleImportError) as excinfo:
        import_schedule(store, "proj-1", content)

    assert "TASK table not found in XER file" in excinfo.value.details
    assert not store.has_schedule("proj-1")


def test_missing_tables_become_warnings():
    store = InMemoryScheduleStore()
    content = "%T\tTASK\n%F\ttask_id\ttask_name\tstatus_code\n%R\tT1\tDig\tTK_Complete\n"

    summary = import_schedule(store, "proj-1", content)

    assert summary.activities_count == 1
    assert summary.xer_project_name is None
    assert len(summary.warnings) == 3
    activity = store.schedule("proj-1")["activities"][0]
    assert activity["status"] == "COMPLETED"
    assert activity["wbs_id"] is None


def test_wbs_order_contains_each_node_once():
    nodes = [wbs("B", "A", 1), wbs("C", "B", 0), wbs("A", None, 5)]

    order = [node.wbs_id for node in order_wbs_for_insert(nodes)]
    assert order == ["A", "B", "C"]
