"""Loomstats - Size and shape instrumentation for workflow mutable state.

This module provides the main API for measuring how large a workflow's
durable state is and how much a write session changes it.

Example:
    >>> import loomstats
    >>>
    >>> stats = loomstats.stats_computer.compute_mutable_state_update_stats(
    ...     {"update_workflow_mutation": mutation, "new_workflow_snapshot": None}
    ... )
    >>> stats.mutable_state_size
    1024
"""

from loomstats.common.errors import ConfigError, RequestDecodeError
from loomstats.common.loader import load_request
from loomstats.core.computer import (
    StatsComputer,
    merge_mutable_state_stats,
    merge_update_session_stats,
    stats_computer,
)
from loomstats.core.logger import configure_logging
from loomstats.schemas.execution import (
    ActivityInfo,
    ChildExecutionInfo,
    ConflictResolveWorkflowExecutionRequest,
    CreateWorkflowExecutionRequest,
    DataBlob,
    GetWorkflowExecutionResponse,
    RequestCancelInfo,
    SignalInfo,
    TaskCategory,
    TimerInfo,
    UpdateWorkflowExecutionRequest,
    WorkflowExecutionInfo,
    WorkflowMutableState,
    WorkflowMutation,
    WorkflowSnapshot,
)
from loomstats.schemas.stats import MutableStateStats, MutableStateUpdateSessionStats

__version__ = "0.1.0"

__all__ = [
    # Core
    "StatsComputer",
    "stats_computer",
    "merge_update_session_stats",
    "merge_mutable_state_stats",
    # Functions
    "load_request",
    "configure_logging",
    # Version
    "__version__",
    # Statistics
    "MutableStateStats",
    "MutableStateUpdateSessionStats",
    # Workflow state
    "ActivityInfo",
    "ChildExecutionInfo",
    "DataBlob",
    "RequestCancelInfo",
    "SignalInfo",
    "TaskCategory",
    "TimerInfo",
    "WorkflowExecutionInfo",
    "WorkflowMutableState",
    "WorkflowMutation",
    "WorkflowSnapshot",
    # Requests
    "GetWorkflowExecutionResponse",
    "UpdateWorkflowExecutionRequest",
    "CreateWorkflowExecutionRequest",
    "ConflictResolveWorkflowExecutionRequest",
    # Exceptions
    "RequestDecodeError",
    "ConfigError",
]
