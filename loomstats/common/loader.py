"""Decode JSON request documents into workflow state shapes.

Payload fields accept either a plain string, which is UTF-8 encoded, or an
object ``{"data": "...", "encoding": "base64"}`` whose data is base64 decoded.
Collections that are missing decode as empty, optional payloads that are
missing decode as ``None``, and identifiers that are missing or null decode
as empty strings. Records are kept in document order and never deduplicated.
"""

import base64
import binascii
import json
from typing import IO, Any, Callable, Dict, List, Literal, Mapping, TypeVar

from ..schemas.execution import (
    ActivityInfo,
    ChildExecutionInfo,
    ConflictResolveWorkflowExecutionRequest,
    CreateWorkflowExecutionRequest,
    DataBlob,
    GetWorkflowExecutionResponse,
    SignalInfo,
    TimerInfo,
    UpdateWorkflowExecutionRequest,
    WorkflowExecutionInfo,
    WorkflowMutableState,
    WorkflowMutation,
    WorkflowSnapshot,
)
from ..schemas.stats import MutableStateUpdateSessionStats
from .errors import RequestDecodeError

RequestKind = Literal["state", "update", "create", "conflict-resolve"]

DecodedT = TypeVar("DecodedT")


class _Decoder:
    def __init__(self, source: str) -> None:
        self.source = source

    def fail(self, reason: str) -> RequestDecodeError:
        return RequestDecodeError(self.source, reason)

    def require(self, doc: Mapping[str, Any], key: str) -> Any:
        if key not in doc or doc[key] is None:
            raise self.fail(f"missing required field '{key}'")
        return doc[key]

    def obj(self, value: Any, where: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise self.fail(f"'{where}' must be an object, got {type(value).__name__}")
        return value

    def text(self, doc: Mapping[str, Any], key: str) -> str:
        value = doc.get(key)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise self.fail(f"'{key}' must be a string, got {type(value).__name__}")
        return value

    def payload(self, value: Any, where: str) -> bytes:
        if value is None:
            return b""
        if isinstance(value, str):
            return value.encode("utf-8")
        blob = self.blob(value, where)
        return blob["data"] if blob else b""

    def blob(self, value: Any, where: str) -> DataBlob | None:
        if value is None:
            return None
        if isinstance(value, str):
            return DataBlob(data=value.encode("utf-8"), encoding="utf-8")

        doc = self.obj(value, where)
        data = doc.get("data", "")
        encoding = doc.get("encoding", "utf-8")
        if not isinstance(data, str):
            raise self.fail(f"'{where}.data' must be a string")

        if encoding == "base64":
            try:
                return DataBlob(data=base64.b64decode(data, validate=True), encoding=encoding)
            except binascii.Error as e:
                raise self.fail(f"'{where}.data' is not valid base64") from e
        return DataBlob(data=data.encode("utf-8"), encoding=encoding)

    def records(self, doc: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
        value = doc.get(key) or []
        if isinstance(value, Mapping):
            value = list(value.values())
        if not isinstance(value, list):
            raise self.fail(f"'{key}' must be a list or an object")
        return [self.obj(item, key) for item in value]

    def keys(self, doc: Mapping[str, Any], key: str) -> List[Any]:
        value = doc.get(key) or []
        if not isinstance(value, list):
            raise self.fail(f"'{key}' must be a list")
        return value

    # === Entities ===

    def execution_info(self, doc: Mapping[str, Any]) -> WorkflowExecutionInfo:
        info = self.obj(self.require(doc, "execution_info"), "execution_info")
        return WorkflowExecutionInfo(
            workflow_id=self.text(info, "workflow_id"),
            task_list=self.text(info, "task_list"),
            workflow_type_name=self.text(info, "workflow_type_name"),
            parent_workflow_id=self.text(info, "parent_workflow_id"),
        )

    def activity(self, doc: Mapping[str, Any]) -> ActivityInfo:
        return ActivityInfo(
            activity_id=self.text(doc, "activity_id"),
            scheduled_event=self.blob(doc.get("scheduled_event"), "scheduled_event"),
            started_event=self.blob(doc.get("started_event"), "started_event"),
            details=self.payload(doc.get("details"), "details"),
        )

    def timer(self, doc: Mapping[str, Any]) -> TimerInfo:
        return TimerInfo(timer_id=self.text(doc, "timer_id"))

    def child(self, doc: Mapping[str, Any]) -> ChildExecutionInfo:
        return ChildExecutionInfo(
            initiated_event=self.blob(doc.get("initiated_event"), "initiated_event"),
            started_event=self.blob(doc.get("started_event"), "started_event"),
        )

    def signal(self, doc: Mapping[str, Any]) -> SignalInfo:
        return SignalInfo(
            signal_name=self.text(doc, "signal_name"),
            input=self.payload(doc.get("input"), "input"),
            control=self.payload(doc.get("control"), "control"),
        )

    def tasks(self, doc: Mapping[str, Any]) -> Dict[str, List[Any]]:
        value = self.obj(doc.get("tasks_by_category") or {}, "tasks_by_category")
        tasks: Dict[str, List[Any]] = {}
        for category, items in value.items():
            if not isinstance(items, list):
                raise self.fail(f"tasks of category '{category}' must be a list")
            tasks[str(category)] = items
        return tasks

    # === Aggregates ===

    def state(self, doc: Mapping[str, Any]) -> WorkflowMutableState:
        return WorkflowMutableState(
            execution_info=self.execution_info(doc),
            activity_infos=dict(enumerate(map(self.activity, self.records(doc, "activity_infos")))),
            timer_infos=dict(enumerate(map(self.timer, self.records(doc, "timer_infos")))),
            child_execution_infos=dict(
                enumerate(map(self.child, self.records(doc, "child_execution_infos")))
            ),
            signal_infos=dict(enumerate(map(self.signal, self.records(doc, "signal_infos")))),
            request_cancel_infos=dict(enumerate(self.records(doc, "request_cancel_infos"))),
            buffered_events=[
                self.blob(event, "buffered_events") or DataBlob(data=b"")
                for event in self.keys(doc, "buffered_events")
            ],
        )

    def snapshot(self, value: Any, where: str) -> WorkflowSnapshot:
        doc = self.obj(value, where)
        return WorkflowSnapshot(
            execution_info=self.execution_info(doc),
            activity_infos=[self.activity(d) for d in self.records(doc, "activity_infos")],
            timer_infos=[self.timer(d) for d in self.records(doc, "timer_infos")],
            child_execution_infos=[
                self.child(d) for d in self.records(doc, "child_execution_infos")
            ],
            request_cancel_infos=list(self.records(doc, "request_cancel_infos")),
            signal_infos=[self.signal(d) for d in self.records(doc, "signal_infos")],
            tasks_by_category=self.tasks(doc),
        )

    def mutation(self, value: Any, where: str) -> WorkflowMutation:
        doc = self.obj(value, where)
        return WorkflowMutation(
            execution_info=self.execution_info(doc),
            upsert_activity_infos=[
                self.activity(d) for d in self.records(doc, "upsert_activity_infos")
            ],
            delete_activity_infos=self.keys(doc, "delete_activity_infos"),
            upsert_timer_infos=[self.timer(d) for d in self.records(doc, "upsert_timer_infos")],
            delete_timer_infos=self.keys(doc, "delete_timer_infos"),
            upsert_child_execution_infos=[
                self.child(d) for d in self.records(doc, "upsert_child_execution_infos")
            ],
            delete_child_execution_infos=self.keys(doc, "delete_child_execution_infos"),
            upsert_request_cancel_infos=list(
                self.records(doc, "upsert_request_cancel_infos")
            ),
            delete_request_cancel_infos=self.keys(doc, "delete_request_cancel_infos"),
            upsert_signal_infos=[
                self.signal(d) for d in self.records(doc, "upsert_signal_infos")
            ],
            delete_signal_infos=self.keys(doc, "delete_signal_infos"),
            new_buffered_events=self.blob(doc.get("new_buffered_events"), "new_buffered_events"),
            tasks_by_category=self.tasks(doc),
        )

    def optional(
        self,
        doc: Mapping[str, Any],
        key: str,
        decode: Callable[[Any, str], DecodedT],
    ) -> DecodedT | None:
        value = doc.get(key)
        return None if value is None else decode(value, key)


def _parse(stream: IO[str], source: str) -> Mapping[str, Any]:
    try:
        doc = json.load(stream)
    except json.JSONDecodeError as e:
        raise RequestDecodeError(source, f"invalid JSON ({e.msg} at line {e.lineno})") from e
    if not isinstance(doc, dict):
        raise RequestDecodeError(source, "top-level document must be an object")
    return doc


def decode_mutable_state(doc: Mapping[str, Any], source: str = "<document>") -> GetWorkflowExecutionResponse:
    decoder = _Decoder(source)
    return GetWorkflowExecutionResponse(
        state=decoder.state(decoder.obj(decoder.require(doc, "state"), "state"))
    )


def decode_update_request(doc: Mapping[str, Any], source: str = "<document>") -> UpdateWorkflowExecutionRequest:
    decoder = _Decoder(source)
    return UpdateWorkflowExecutionRequest(
        update_workflow_mutation=decoder.mutation(
            decoder.require(doc, "update_workflow_mutation"), "update_workflow_mutation"
        ),
        new_workflow_snapshot=decoder.optional(doc, "new_workflow_snapshot", decoder.snapshot),
    )


def decode_create_request(doc: Mapping[str, Any], source: str = "<document>") -> CreateWorkflowExecutionRequest:
    decoder = _Decoder(source)
    return CreateWorkflowExecutionRequest(
        new_workflow_snapshot=decoder.snapshot(
            decoder.require(doc, "new_workflow_snapshot"), "new_workflow_snapshot"
        )
    )


def decode_conflict_resolve_request(
    doc: Mapping[str, Any], source: str = "<document>"
) -> ConflictResolveWorkflowExecutionRequest:
    decoder = _Decoder(source)
    return ConflictResolveWorkflowExecutionRequest(
        reset_workflow_snapshot=decoder.snapshot(
            decoder.require(doc, "reset_workflow_snapshot"), "reset_workflow_snapshot"
        ),
        new_workflow_snapshot=decoder.optional(doc, "new_workflow_snapshot", decoder.snapshot),
        current_workflow_mutation=decoder.optional(
            doc, "current_workflow_mutation", decoder.mutation
        ),
    )


DECODERS = {
    "state": decode_mutable_state,
    "update": decode_update_request,
    "create": decode_create_request,
    "conflict-resolve": decode_conflict_resolve_request,
}

REQUEST_KINDS = tuple(DECODERS)


def load_request(stream: IO[str], kind: RequestKind, source: str = "<stdin>") -> Any:
    """Read a JSON request document of the given kind from a text stream.

    Raises:
        RequestDecodeError: If the document is not valid JSON or does not
            describe a request of the given kind.
    """
    if kind not in DECODERS:
        raise RequestDecodeError(source, f"unknown request kind '{kind}'")
    return DECODERS[kind](_parse(stream, source), source)


def load_session_stats(stream: IO[str], source: str = "<stdin>") -> MutableStateUpdateSessionStats:
    """Read update session statistics previously printed as JSON."""
    doc = _parse(stream, source)
    try:
        return MutableStateUpdateSessionStats.model_validate(doc)
    except ValueError as e:
        raise RequestDecodeError(source, f"not a statistics document: {e}") from e
