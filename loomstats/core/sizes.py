"""Per-entity size rules.

Sizes approximate the serialized footprint of each record: identifiers are
measured as UTF-8 bytes, payloads by their raw byte length. Absent optional
payloads contribute nothing.
"""

from typing import Dict

from ..schemas.execution import (
    ActivityInfo,
    ChildExecutionInfo,
    DataBlob,
    SignalInfo,
    TaskCategory,
    TasksByCategory,
    TimerInfo,
    WorkflowExecutionInfo,
)


def text_size(value: str | None) -> int:
    if not value:
        return 0
    return len(value.encode("utf-8"))


def blob_size(blob: DataBlob | None) -> int:
    if blob is None:
        return 0
    return len(blob["data"])


def execution_info_size(execution_info: WorkflowExecutionInfo) -> int:
    size = text_size(execution_info["workflow_id"])
    size += text_size(execution_info["task_list"])
    size += text_size(execution_info["workflow_type_name"])
    size += text_size(execution_info["parent_workflow_id"])

    return size


def activity_info_size(activity_info: ActivityInfo) -> int:
    size = text_size(activity_info["activity_id"])
    size += blob_size(activity_info.get("scheduled_event"))
    size += blob_size(activity_info.get("started_event"))
    size += len(activity_info["details"])

    return size


def timer_info_size(timer_info: TimerInfo) -> int:
    return text_size(timer_info["timer_id"])


def child_info_size(child_info: ChildExecutionInfo) -> int:
    # The child's own identifiers are not part of the accounted size.
    size = blob_size(child_info.get("initiated_event"))
    size += blob_size(child_info.get("started_event"))

    return size


def signal_info_size(signal_info: SignalInfo) -> int:
    size = text_size(signal_info["signal_name"])
    size += len(signal_info["input"])
    size += len(signal_info["control"])

    return size


def task_count_by_category(
    tasks: TasksByCategory | None,
) -> Dict[TaskCategory | str, int]:
    if not tasks:
        return {}
    return {category: len(category_tasks) for category, category_tasks in tasks.items()}
