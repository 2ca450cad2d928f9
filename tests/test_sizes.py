"""Tests for per-entity size rules."""

from loomstats.core.sizes import (
    activity_info_size,
    blob_size,
    child_info_size,
    execution_info_size,
    signal_info_size,
    task_count_by_category,
    text_size,
    timer_info_size,
)
from loomstats.schemas.execution import (
    ChildExecutionInfo,
    DataBlob,
    SignalInfo,
    TaskCategory,
    TimerInfo,
)


def test_execution_info_size_sums_identifiers(execution_info):
    """Execution info size is the sum of its four identifying strings."""
    info = execution_info(
        workflow_id="abc", task_list="de", workflow_type_name="f", parent_workflow_id="ghij"
    )
    assert execution_info_size(info) == 10


def test_execution_info_ignores_other_fields(execution_info):
    """Run and domain ids do not take part in the size."""
    info = execution_info(run_id="r" * 36, domain_id="d" * 36)
    assert execution_info_size(info) == execution_info_size(execution_info())


def test_text_size_counts_utf8_bytes():
    """Identifiers are measured as serialized UTF-8 bytes."""
    assert text_size("abc") == 3
    assert text_size("é") == 2
    assert text_size("") == 0
    assert text_size(None) == 0


def test_activity_size_with_all_payloads(make_activity):
    """Activity size adds id, scheduled, started and details."""
    activity = make_activity("act", scheduled=b"12345", started=b"123", details=b"xy")
    assert activity_info_size(activity) == 3 + 5 + 3 + 2


def test_activity_size_without_events(make_activity):
    """Absent events contribute zero."""
    assert activity_info_size(make_activity("abcd")) == 4


def test_activity_empty_event_equals_absent_event(make_activity):
    """An empty payload and a missing payload measure the same."""
    assert activity_info_size(make_activity("a", scheduled=b"")) == activity_info_size(
        make_activity("a")
    )


def test_timer_size_is_id_length():
    """Timer size is the length of its identifier."""
    assert timer_info_size(TimerInfo(timer_id="timer-42")) == 8


def test_child_size_ignores_identifier():
    """Child size counts only the event payloads."""
    child = ChildExecutionInfo(
        initiated_event=DataBlob(data=b"1234"),
        started_event=DataBlob(data=b"56"),
        started_workflow_id="child-workflow-id",
    )
    assert child_info_size(child) == 6


def test_child_size_without_events():
    """A child with no events has zero size."""
    assert child_info_size(ChildExecutionInfo(initiated_event=None, started_event=None)) == 0


def test_signal_size():
    """Signal size adds name, input and control."""
    signal = SignalInfo(signal_name="cancel", input=b"abc", control=b"z")
    assert signal_info_size(signal) == 10


def test_blob_size():
    """Blob size is the payload length, zero when absent."""
    assert blob_size(DataBlob(data=b"xyz", encoding="json")) == 3
    assert blob_size(None) == 0


def test_task_count_by_category():
    """Tasks are counted per category without looking at their content."""
    tasks = {
        TaskCategory.TRANSFER: [object(), object()],
        TaskCategory.TIMER: [],
        "custom": [{"big": "x" * 100}],
    }
    assert task_count_by_category(tasks) == {
        TaskCategory.TRANSFER: 2,
        TaskCategory.TIMER: 0,
        "custom": 1,
    }


def test_task_count_by_category_missing():
    """A missing task collection yields an empty mapping."""
    assert task_count_by_category(None) == {}
    assert task_count_by_category({}) == {}
