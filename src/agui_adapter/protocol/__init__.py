"""
AG-UI protocol types.

- events: lifecycle event kinds, payload variants and the wire envelope
- events.HumanAction: the operator response routed back to the agent
"""

from agui_adapter.protocol.events import (
    AgentEvent,
    ApprovalPayload,
    EventData,
    EventType,
    HumanAction,
    RunFinishedData,
    RunStartedData,
    StepStartedData,
    TextMessageData,
    WaitingForHumanData,
    make_event,
)

__all__ = [
    "AgentEvent",
    "ApprovalPayload",
    "EventData",
    "EventType",
    "HumanAction",
    "RunFinishedData",
    "RunStartedData",
    "StepStartedData",
    "TextMessageData",
    "WaitingForHumanData",
    "make_event",
]
