"""
Tests for the AG-UI event models and wire shape.
"""

import json
import re

import pytest
from pydantic import ValidationError

from agui_adapter.protocol.events import (
    AgentEvent,
    ApprovalPayload,
    EventType,
    HumanAction,
    RunFinishedData,
    RunStartedData,
    StepStartedData,
    TextMessageData,
    WaitingForHumanData,
    make_event,
)
from agui_adapter.utils import strip_ansi, utc_timestamp

ISO_MS_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestWireShape:
    def test_text_event(self):
        event = make_event(
            EventType.TEXT_MESSAGE_CONTENT, "s1", TextMessageData(delta="hello")
        )
        wire = event.to_wire()
        assert set(wire) == {"type", "session_id", "timestamp", "data"}
        assert wire["type"] == "TEXT_MESSAGE_CONTENT"
        assert wire["session_id"] == "s1"
        assert wire["data"] == {"delta": "hello"}
        assert ISO_MS_RE.match(wire["timestamp"])

    def test_step_event_defaults_to_tool_call(self):
        event = make_event(EventType.STEP_STARTED, "s1", StepStartedData(tool_name="Bash"))
        assert event.to_wire()["data"] == {"step_type": "tool_call", "tool_name": "Bash"}

    def test_waiting_without_payload_omits_it(self):
        event = make_event(
            EventType.WAITING_FOR_HUMAN, "s1", WaitingForHumanData(reason="confirm")
        )
        assert event.to_wire()["data"] == {"reason": "confirm"}

    def test_waiting_with_approval_card(self):
        payload = ApprovalPayload.approval_card(
            title="Dangerous Operation Warning", command="rm -rf /tmp/x"
        )
        event = make_event(
            EventType.WAITING_FOR_HUMAN,
            "s1",
            WaitingForHumanData(reason="danger", approval_payload=payload),
        )
        assert event.to_wire()["data"]["approval_payload"] == {
            "component": "ApprovalCard",
            "props": {
                "title": "Dangerous Operation Warning",
                "command": "rm -rf /tmp/x",
                "actions": ["Approve", "Reject"],
            },
        }

    def test_to_json_round_trips_through_model(self):
        event = make_event(EventType.RUN_STARTED, "s1", RunStartedData(agent_name="claude"))
        parsed = AgentEvent.model_validate(json.loads(event.to_json()))
        assert parsed == event
        assert isinstance(parsed.data, RunStartedData)


class TestValidation:
    def test_data_must_match_type(self):
        with pytest.raises(ValidationError):
            AgentEvent(
                type=EventType.RUN_FINISHED,
                session_id="s1",
                data=TextMessageData(delta="nope"),
            )

    def test_raw_dict_resolved_by_type(self):
        event = AgentEvent.model_validate(
            {
                "type": "RUN_FINISHED",
                "session_id": "s1",
                "timestamp": "2025-01-01T00:00:00.000Z",
                "data": {"status": "failed"},
            }
        )
        assert event.data == RunFinishedData(status="failed")

    def test_invalid_finish_status(self):
        with pytest.raises(ValidationError):
            RunFinishedData(status="cancelled")

    def test_human_action(self):
        action = HumanAction.model_validate(
            {"session_id": "s1", "action_type": "APPROVE", "payload": True}
        )
        assert action.payload is True

        with pytest.raises(ValidationError):
            HumanAction(session_id="s1", action_type="MAYBE")


class TestUtils:
    def test_strip_ansi(self):
        assert strip_ansi("\x1b[1m\x1b[31mred\x1b[0m\r") == "red"
        assert strip_ansi("\x1b]8;;http://x\x1b\\link\x1b]8;;\x1b\\") == "link"
        assert strip_ansi("plain") == "plain"

    def test_strip_ansi_unterminated_osc(self):
        # A title sequence cut off by the chunk boundary runs to end of line.
        assert strip_ansi("\x1b]0;title only") == ""
        assert strip_ansi("ready \x1b]0;agent: build") == "ready "
        assert strip_ansi("\x1b]0;t\x07ok\x1b]2;cut") == "ok"

    def test_strip_ansi_lone_trailing_escape(self):
        assert strip_ansi("prompt> \x1b") == "prompt> "
        assert strip_ansi("\x1b") == ""

    def test_strip_ansi_two_byte_escape(self):
        # ESC M (reverse index) goes; the text around it stays.
        assert strip_ansi("a\x1bMb") == "ab"
        assert strip_ansi("[ok] done") == "[ok] done"

    def test_utc_timestamp_format(self):
        assert ISO_MS_RE.match(utc_timestamp())
