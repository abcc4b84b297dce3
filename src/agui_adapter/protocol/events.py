"""
Pydantic models for the AG-UI lifecycle protocol.

Covers:
- The five event kinds and their payload variants
- The wire envelope sent to the presentation layer
- HumanAction, the operator response coming back from it
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from agui_adapter.utils import utc_timestamp


class EventType(str, Enum):
    RUN_STARTED = "RUN_STARTED"
    TEXT_MESSAGE_CONTENT = "TEXT_MESSAGE_CONTENT"
    STEP_STARTED = "STEP_STARTED"
    WAITING_FOR_HUMAN = "WAITING_FOR_HUMAN"
    RUN_FINISHED = "RUN_FINISHED"


# ─── Payload Variants ────────────────────────────────────────────────


class RunStartedData(BaseModel):
    agent_name: str


class TextMessageData(BaseModel):
    delta: str


class StepStartedData(BaseModel):
    step_type: Literal["tool_call"] = "tool_call"
    tool_name: str


class ApprovalPayload(BaseModel):
    """UI component description rendered for the operator (e.g. an ApprovalCard)."""

    component: str = "ApprovalCard"
    props: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def approval_card(
        cls,
        title: str,
        description: Optional[str] = None,
        command: Optional[str] = None,
        actions: Optional[list[str]] = None,
    ) -> "ApprovalPayload":
        props: dict[str, Any] = {"title": title}
        if description is not None:
            props["description"] = description
        if command is not None:
            props["command"] = command
        props["actions"] = list(actions or ["Approve", "Reject"])
        return cls(component="ApprovalCard", props=props)


class WaitingForHumanData(BaseModel):
    reason: str
    approval_payload: Optional[ApprovalPayload] = None


class RunFinishedData(BaseModel):
    status: Literal["success", "failed"]


EventData = Union[
    RunStartedData,
    TextMessageData,
    StepStartedData,
    WaitingForHumanData,
    RunFinishedData,
]

DATA_TYPES: dict[EventType, type] = {
    EventType.RUN_STARTED: RunStartedData,
    EventType.TEXT_MESSAGE_CONTENT: TextMessageData,
    EventType.STEP_STARTED: StepStartedData,
    EventType.WAITING_FOR_HUMAN: WaitingForHumanData,
    EventType.RUN_FINISHED: RunFinishedData,
}


# ─── Envelope ────────────────────────────────────────────────────────


class AgentEvent(BaseModel):
    """A single lifecycle event for one session."""

    type: EventType
    session_id: str
    timestamp: str = Field(default_factory=utc_timestamp)
    data: EventData

    @model_validator(mode="before")
    @classmethod
    def _coerce_data(cls, values: Any) -> Any:
        # Raw dicts (e.g. parsed wire JSON) are resolved against the declared type.
        if isinstance(values, dict) and isinstance(values.get("data"), dict):
            try:
                data_cls = DATA_TYPES[EventType(values.get("type"))]
            except (KeyError, ValueError):
                return values
            values = {**values, "data": data_cls.model_validate(values["data"])}
        return values

    @model_validator(mode="after")
    def _check_data_matches_type(self) -> "AgentEvent":
        expected = DATA_TYPES[self.type]
        if not isinstance(self.data, expected):
            raise ValueError(
                f"{self.type.value} requires {expected.__name__}, "
                f"got {type(self.data).__name__}"
            )
        return self

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the dict shape consumed by the transport layer."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


def make_event(event_type: EventType, session_id: str, data: EventData) -> AgentEvent:
    """Stamp a payload with its session and the current time."""
    return AgentEvent(type=event_type, session_id=session_id, data=data)


# ─── Operator Response ───────────────────────────────────────────────


class HumanAction(BaseModel):
    """Presentation layer → adapter: the operator's answer to a prompt."""

    session_id: str
    action_type: Literal["APPROVE", "REJECT", "PROVIDE_INPUT"]
    payload: Union[str, bool] = ""
