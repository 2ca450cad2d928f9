from types import MappingProxyType
from typing import Dict, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_serializer,
    field_validator,
    model_validator,
)

from .execution import TaskCategory

SIZE_FIELDS = (
    "execution_info_size",
    "activity_info_size",
    "timer_info_size",
    "child_info_size",
    "signal_info_size",
    "buffered_events_size",
)


class _SizedStats(BaseModel):
    """Sizes and upsert counts shared by both statistics kinds.

    The total size must equal the sum of the per-kind sizes; documents that
    break this, or carry unknown keys, are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mutable_state_size: NonNegativeInt = Field(
        default=0,
        description="Total size in bytes, the sum of the per-kind sizes",
    )
    execution_info_size: NonNegativeInt = 0
    activity_info_size: NonNegativeInt = 0
    timer_info_size: NonNegativeInt = 0
    child_info_size: NonNegativeInt = 0
    signal_info_size: NonNegativeInt = 0
    buffered_events_size: NonNegativeInt = 0

    activity_info_count: NonNegativeInt = 0
    timer_info_count: NonNegativeInt = 0
    child_info_count: NonNegativeInt = 0
    signal_info_count: NonNegativeInt = 0
    request_cancel_info_count: NonNegativeInt = 0

    @model_validator(mode="after")
    def check_total(self):
        parts = sum(getattr(self, name) for name in SIZE_FIELDS)
        if self.mutable_state_size != parts:
            raise ValueError(
                f"mutable_state_size {self.mutable_state_size} does not equal "
                f"the sum of the per-kind sizes {parts}"
            )
        return self


class MutableStateStats(_SizedStats):
    """Size and count breakdown of the full durable state of a workflow run."""

    buffered_events_count: NonNegativeInt = 0


class MutableStateUpdateSessionStats(_SizedStats):
    """Size and count breakdown of a single persistence write session.

    Produced for mutations, snapshots and combinations of both. Delete counts
    and task counts are tracked separately and never contribute to the size.
    The task mapping is read-only.
    """

    delete_activity_info_count: NonNegativeInt = 0
    delete_timer_info_count: NonNegativeInt = 0
    delete_child_info_count: NonNegativeInt = 0
    delete_signal_info_count: NonNegativeInt = 0
    delete_request_cancel_info_count: NonNegativeInt = 0

    task_count_by_category: Dict[TaskCategory | str, NonNegativeInt] = Field(
        default_factory=dict,
        description="Number of tasks written per task category",
        examples=[{"TRANSFER": 2, "TIMER": 1}],
    )

    @field_validator("task_count_by_category", mode="after")
    @classmethod
    def freeze_tasks(
        cls, value: Dict[TaskCategory | str, int]
    ) -> Mapping[TaskCategory | str, int]:
        return MappingProxyType(dict(value))

    @field_serializer("task_count_by_category")
    def dump_tasks(
        self, value: Mapping[TaskCategory | str, int]
    ) -> Dict[TaskCategory | str, int]:
        return dict(value)
