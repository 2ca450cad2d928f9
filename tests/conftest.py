"""Test configuration and fixtures."""

import pytest

from loomstats.schemas.execution import (
    ActivityInfo,
    ChildExecutionInfo,
    DataBlob,
    SignalInfo,
    TimerInfo,
    WorkflowExecutionInfo,
    WorkflowMutation,
    WorkflowSnapshot,
)


def _execution_info(**overrides) -> WorkflowExecutionInfo:
    info = WorkflowExecutionInfo(
        workflow_id="wf",
        task_list="tl",
        workflow_type_name="type",
        parent_workflow_id="",
    )
    info.update(overrides)  # type: ignore[typeddict-item]
    return info


def _activity(activity_id: str, scheduled=None, started=None, details=b"") -> ActivityInfo:
    return ActivityInfo(
        activity_id=activity_id,
        scheduled_event=DataBlob(data=scheduled) if scheduled is not None else None,
        started_event=DataBlob(data=started) if started is not None else None,
        details=details,
    )


def _snapshot(**overrides) -> WorkflowSnapshot:
    snapshot = WorkflowSnapshot(
        execution_info=_execution_info(workflow_id="", task_list="", workflow_type_name=""),
        activity_infos=[],
        timer_infos=[],
        child_execution_infos=[],
        request_cancel_infos=[],
        signal_infos=[],
        tasks_by_category={},
    )
    snapshot.update(overrides)  # type: ignore[typeddict-item]
    return snapshot


def _mutation(**overrides) -> WorkflowMutation:
    mutation = WorkflowMutation(
        execution_info=_execution_info(workflow_id="", task_list="", workflow_type_name=""),
        upsert_activity_infos=[],
        delete_activity_infos=[],
        upsert_timer_infos=[],
        delete_timer_infos=[],
        upsert_child_execution_infos=[],
        delete_child_execution_infos=[],
        upsert_request_cancel_infos=[],
        delete_request_cancel_infos=[],
        upsert_signal_infos=[],
        delete_signal_infos=[],
        new_buffered_events=None,
        tasks_by_category={},
    )
    mutation.update(overrides)  # type: ignore[typeddict-item]
    return mutation


@pytest.fixture
def execution_info():
    """Factory for execution descriptors (workflow_id/task_list/type default to 'wf'/'tl'/'type')."""
    return _execution_info


@pytest.fixture
def make_activity():
    """Factory for activity records with optional event payloads."""
    return _activity


@pytest.fixture
def make_snapshot():
    """Factory for snapshots; every field defaults to empty."""
    return _snapshot


@pytest.fixture
def make_mutation():
    """Factory for mutations; every field defaults to empty."""
    return _mutation


@pytest.fixture
def sample_mutable_state():
    """A full mutable state with one record of every kind and two buffered events."""
    return {
        "state": {
            "execution_info": _execution_info(parent_workflow_id="parent"),
            "activity_infos": {
                5: _activity("act", scheduled=b"12345", started=b"123", details=b"xy"),
            },
            "timer_infos": {"timer-1": TimerInfo(timer_id="timer-1")},
            "child_execution_infos": {
                9: ChildExecutionInfo(
                    initiated_event=DataBlob(data=b"init"), started_event=None
                ),
            },
            "signal_infos": {
                11: SignalInfo(signal_name="sig", input=b"in", control=b"ctl"),
            },
            "request_cancel_infos": {12: {"initiated_id": 12}, 13: {"initiated_id": 13}},
            "buffered_events": [DataBlob(data=b"a" * 10), DataBlob(data=b"")],
        }
    }
