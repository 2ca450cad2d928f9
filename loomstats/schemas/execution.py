from enum import Enum
from typing import Any, Collection, List, Mapping, NotRequired, Sequence, TypedDict


class TaskCategory(str, Enum):
    TRANSFER = "TRANSFER"
    TIMER = "TIMER"
    REPLICATION = "REPLICATION"
    CROSS_CLUSTER = "CROSS_CLUSTER"


class DataBlob(TypedDict):
    """Serialized payload as it is written to storage.

    Attributes:
        data: Raw bytes of the payload
        encoding: Encoding the bytes were produced with (e.g. 'thriftrw', 'json')
    """

    data: bytes
    encoding: NotRequired[str]


class WorkflowExecutionInfo(TypedDict):
    """Identifying metadata of a workflow execution.

    Only the identifying strings take part in size accounting; any further
    descriptive keys a storage record carries are tolerated and ignored.
    """

    workflow_id: str
    task_list: str
    workflow_type_name: str
    parent_workflow_id: str
    domain_id: NotRequired[str]
    run_id: NotRequired[str]


class ActivityInfo(TypedDict):
    activity_id: str
    scheduled_event: DataBlob | None
    started_event: DataBlob | None
    details: bytes
    schedule_id: NotRequired[int]


class TimerInfo(TypedDict):
    timer_id: str
    started_id: NotRequired[int]


class ChildExecutionInfo(TypedDict):
    initiated_event: DataBlob | None
    started_event: DataBlob | None
    initiated_id: NotRequired[int]
    started_workflow_id: NotRequired[str]


class SignalInfo(TypedDict):
    signal_name: str
    input: bytes
    control: bytes
    initiated_id: NotRequired[int]


class RequestCancelInfo(TypedDict, total=False):
    initiated_id: int
    cancel_request_id: str


TasksByCategory = Mapping[TaskCategory | str, Sequence[Any]]


class WorkflowMutableState(TypedDict):
    """Full durable state of a workflow run as loaded from storage."""

    execution_info: WorkflowExecutionInfo
    activity_infos: Mapping[int, ActivityInfo]
    timer_infos: Mapping[str, TimerInfo]
    child_execution_infos: Mapping[int, ChildExecutionInfo]
    signal_infos: Mapping[int, SignalInfo]
    request_cancel_infos: Mapping[int, RequestCancelInfo]
    buffered_events: List[DataBlob]


class WorkflowMutation(TypedDict):
    """Incremental change set applied to an existing workflow run.

    Upserts carry full records, deletes carry only the keys of removed
    records. At most one new batch of buffered events is pending.
    """

    execution_info: WorkflowExecutionInfo
    upsert_activity_infos: Sequence[ActivityInfo]
    delete_activity_infos: Collection[int]
    upsert_timer_infos: Sequence[TimerInfo]
    delete_timer_infos: Collection[str]
    upsert_child_execution_infos: Sequence[ChildExecutionInfo]
    delete_child_execution_infos: Collection[int]
    upsert_request_cancel_infos: Sequence[RequestCancelInfo]
    delete_request_cancel_infos: Collection[int]
    upsert_signal_infos: Sequence[SignalInfo]
    delete_signal_infos: Collection[int]
    new_buffered_events: DataBlob | None
    tasks_by_category: TasksByCategory


class WorkflowSnapshot(TypedDict):
    """Complete point-in-time state of a workflow run."""

    execution_info: WorkflowExecutionInfo
    activity_infos: Sequence[ActivityInfo]
    timer_infos: Sequence[TimerInfo]
    child_execution_infos: Sequence[ChildExecutionInfo]
    request_cancel_infos: Sequence[RequestCancelInfo]
    signal_infos: Sequence[SignalInfo]
    tasks_by_category: TasksByCategory


class GetWorkflowExecutionResponse(TypedDict):
    state: WorkflowMutableState


class UpdateWorkflowExecutionRequest(TypedDict):
    update_workflow_mutation: WorkflowMutation
    new_workflow_snapshot: WorkflowSnapshot | None


class CreateWorkflowExecutionRequest(TypedDict):
    new_workflow_snapshot: WorkflowSnapshot


class ConflictResolveWorkflowExecutionRequest(TypedDict):
    reset_workflow_snapshot: WorkflowSnapshot
    new_workflow_snapshot: WorkflowSnapshot | None
    current_workflow_mutation: WorkflowMutation | None

