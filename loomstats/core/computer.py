import logging
from functools import reduce
from typing import Callable, Iterable, Tuple, Type, TypeVar

from ..schemas.execution import (
    ConflictResolveWorkflowExecutionRequest,
    CreateWorkflowExecutionRequest,
    GetWorkflowExecutionResponse,
    UpdateWorkflowExecutionRequest,
    WorkflowMutation,
    WorkflowSnapshot,
)
from ..schemas.stats import MutableStateStats, MutableStateUpdateSessionStats
from .sizes import (
    activity_info_size,
    blob_size,
    child_info_size,
    execution_info_size,
    signal_info_size,
    task_count_by_category,
    timer_info_size,
)

logger = logging.getLogger("loomstats.stats")

StatsT = TypeVar("StatsT", MutableStateStats, MutableStateUpdateSessionStats)
RecordT = TypeVar("RecordT")

_CATEGORY_FIELD = "task_count_by_category"


def _accumulate(
    records: Iterable[RecordT], size_of: Callable[[RecordT], int]
) -> Tuple[int, int]:
    """Return (count, total size) of a collection of records."""
    count = 0
    size = 0
    for record in records:
        count += 1
        size += size_of(record)
    return count, size


class StatsComputer:
    """Computes size and count statistics of workflow mutable state.

    The computer holds no state: every method reads only its arguments and
    returns a freshly built statistics model, so a single instance can be
    shared freely between threads and callers.

    Example:
        ```python
        stats = stats_computer.compute_mutable_state_update_stats(request)
        metrics.histogram("mutable_state_size", stats.mutable_state_size)
        ```
    """

    def compute_mutable_state_stats(
        self, response: GetWorkflowExecutionResponse
    ) -> MutableStateStats:
        """Compute statistics of the full state returned by a load."""
        state = response["state"]
        exec_size = execution_info_size(state["execution_info"])

        activity_count, activity_size = _accumulate(
            state["activity_infos"].values(), activity_info_size
        )
        timer_count, timer_size = _accumulate(
            state["timer_infos"].values(), timer_info_size
        )
        child_count, child_size = _accumulate(
            state["child_execution_infos"].values(), child_info_size
        )
        signal_count, signal_size = _accumulate(
            state["signal_infos"].values(), signal_info_size
        )
        buffered_count, buffered_size = _accumulate(
            state["buffered_events"], blob_size
        )

        stats = MutableStateStats(
            mutable_state_size=exec_size
            + activity_size
            + timer_size
            + child_size
            + signal_size
            + buffered_size,
            execution_info_size=exec_size,
            activity_info_size=activity_size,
            timer_info_size=timer_size,
            child_info_size=child_size,
            signal_info_size=signal_size,
            buffered_events_size=buffered_size,
            activity_info_count=activity_count,
            timer_info_count=timer_count,
            child_info_count=child_count,
            signal_info_count=signal_count,
            request_cancel_info_count=len(state["request_cancel_infos"]),
            buffered_events_count=buffered_count,
        )
        logger.debug(
            "Mutable state of %s: %d bytes, %d buffered events",
            state["execution_info"]["workflow_id"],
            stats.mutable_state_size,
            stats.buffered_events_count,
        )
        return stats

    def compute_mutable_state_update_stats(
        self, request: UpdateWorkflowExecutionRequest
    ) -> MutableStateUpdateSessionStats:
        """Compute statistics of an update, including a new run if one is created."""
        partials = [self.compute_workflow_mutation_stats(request["update_workflow_mutation"])]

        new_snapshot = request.get("new_workflow_snapshot")
        if new_snapshot is not None:
            partials.append(self.compute_workflow_snapshot_stats(new_snapshot))

        return self._session_total("update", partials)

    def compute_mutable_state_create_stats(
        self, request: CreateWorkflowExecutionRequest
    ) -> MutableStateUpdateSessionStats:
        """Compute statistics of a create, i.e. of the single new snapshot."""
        return self._session_total(
            "create",
            [self.compute_workflow_snapshot_stats(request["new_workflow_snapshot"])],
        )

    def compute_mutable_state_conflict_resolve_stats(
        self, request: ConflictResolveWorkflowExecutionRequest
    ) -> MutableStateUpdateSessionStats:
        """Compute statistics of a conflict resolution.

        Starts from the reset snapshot, then folds in the new run snapshot and
        the current run mutation when they are present.
        """
        partials = [self.compute_workflow_snapshot_stats(request["reset_workflow_snapshot"])]

        new_snapshot = request.get("new_workflow_snapshot")
        if new_snapshot is not None:
            partials.append(self.compute_workflow_snapshot_stats(new_snapshot))

        current_mutation = request.get("current_workflow_mutation")
        if current_mutation is not None:
            partials.append(self.compute_workflow_mutation_stats(current_mutation))

        return self._session_total("conflict resolve", partials)

    def compute_workflow_mutation_stats(
        self, mutation: WorkflowMutation
    ) -> MutableStateUpdateSessionStats:
        """Compute statistics of the upserts, deletes and tasks of a mutation."""
        exec_size = execution_info_size(mutation["execution_info"])

        activity_count, activity_size = _accumulate(
            mutation["upsert_activity_infos"], activity_info_size
        )
        timer_count, timer_size = _accumulate(
            mutation["upsert_timer_infos"], timer_info_size
        )
        child_count, child_size = _accumulate(
            mutation["upsert_child_execution_infos"], child_info_size
        )
        signal_count, signal_size = _accumulate(
            mutation["upsert_signal_infos"], signal_info_size
        )
        buffered_size = blob_size(mutation.get("new_buffered_events"))

        return MutableStateUpdateSessionStats(
            mutable_state_size=exec_size
            + activity_size
            + timer_size
            + child_size
            + signal_size
            + buffered_size,
            execution_info_size=exec_size,
            activity_info_size=activity_size,
            timer_info_size=timer_size,
            child_info_size=child_size,
            signal_info_size=signal_size,
            buffered_events_size=buffered_size,
            activity_info_count=activity_count,
            timer_info_count=timer_count,
            child_info_count=child_count,
            signal_info_count=signal_count,
            request_cancel_info_count=len(mutation["upsert_request_cancel_infos"]),
            delete_activity_info_count=len(mutation["delete_activity_infos"]),
            delete_timer_info_count=len(mutation["delete_timer_infos"]),
            delete_child_info_count=len(mutation["delete_child_execution_infos"]),
            delete_signal_info_count=len(mutation["delete_signal_infos"]),
            delete_request_cancel_info_count=len(
                mutation["delete_request_cancel_infos"]
            ),
            task_count_by_category=task_count_by_category(
                mutation.get("tasks_by_category")
            ),
        )

    def compute_workflow_snapshot_stats(
        self, snapshot: WorkflowSnapshot
    ) -> MutableStateUpdateSessionStats:
        """Compute statistics of a snapshot. Buffered-event and delete fields stay zero."""
        exec_size = execution_info_size(snapshot["execution_info"])

        activity_count, activity_size = _accumulate(
            snapshot["activity_infos"], activity_info_size
        )
        timer_count, timer_size = _accumulate(snapshot["timer_infos"], timer_info_size)
        child_count, child_size = _accumulate(
            snapshot["child_execution_infos"], child_info_size
        )
        signal_count, signal_size = _accumulate(
            snapshot["signal_infos"], signal_info_size
        )

        return MutableStateUpdateSessionStats(
            mutable_state_size=exec_size
            + activity_size
            + timer_size
            + child_size
            + signal_size,
            execution_info_size=exec_size,
            activity_info_size=activity_size,
            timer_info_size=timer_size,
            child_info_size=child_size,
            signal_info_size=signal_size,
            activity_info_count=activity_count,
            timer_info_count=timer_count,
            child_info_count=child_count,
            signal_info_count=signal_count,
            request_cancel_info_count=len(snapshot["request_cancel_infos"]),
            task_count_by_category=task_count_by_category(
                snapshot.get("tasks_by_category")
            ),
        )

    def _session_total(
        self, operation: str, partials: list[MutableStateUpdateSessionStats]
    ) -> MutableStateUpdateSessionStats:
        stats = merge_update_session_stats(*partials)
        logger.debug(
            "Mutable state %s session: %d bytes over %d part(s)",
            operation,
            stats.mutable_state_size,
            len(partials),
        )
        return stats


def _add(left: StatsT, right: StatsT) -> StatsT:
    """Field-wise sum of two statistics of the same kind."""
    values = {}
    for name in type(left).model_fields:
        if name == _CATEGORY_FIELD:
            categories = dict(getattr(left, name))
            for category, count in getattr(right, name).items():
                categories[category] = categories.get(category, 0) + count
            values[name] = categories
        else:
            values[name] = getattr(left, name) + getattr(right, name)
    return type(left)(**values)


def _merge(model: Type[StatsT], stats: Iterable[StatsT]) -> StatsT:
    return reduce(_add, stats, model())


def merge_update_session_stats(
    *stats: MutableStateUpdateSessionStats,
) -> MutableStateUpdateSessionStats:
    """Sum any number of update session statistics into one.

    Every count and size is summed, task counts are summed per category with
    missing categories counting as zero. Merging nothing yields all zeros.
    """
    return _merge(MutableStateUpdateSessionStats, stats)


def merge_mutable_state_stats(*stats: MutableStateStats) -> MutableStateStats:
    """Sum any number of full state statistics into one."""
    return _merge(MutableStateStats, stats)


stats_computer = StatsComputer()
