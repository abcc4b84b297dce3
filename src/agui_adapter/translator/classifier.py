"""
Pattern Classifier.

Maps each complete line (or forced partial) of a session to exactly one
AG-UI event, synthesizes RUN_STARTED once per lifecycle and emits
RUN_FINISHED when the process exits.
"""

from typing import Callable, Dict, List, Optional, Set

from agui_adapter.logger import get_logger
from agui_adapter.protocol.events import (
    AgentEvent,
    EventData,
    EventType,
    RunFinishedData,
    RunStartedData,
    TextMessageData,
    make_event,
)
from agui_adapter.translator.patterns import (
    DEFAULT_AGENT,
    RULE_TABLES,
    classify,
    detect_agent_type,
)

logger = get_logger(__name__)

EventCallback = Callable[[AgentEvent], None]

AUTO = "auto"


class PatternClassifier:
    """
    Session-aware line translator.

    Events are delivered synchronously to listeners, in the order their
    triggering inputs were processed.
    """

    def __init__(self, default_agent_type: str = AUTO):
        self._check_agent_type(default_agent_type)
        self.default_agent_type = default_agent_type
        self._started: Set[str] = set()
        self._agent_types: Dict[str, str] = {}
        self._listeners: List[EventCallback] = []

    def add_listener(self, callback: EventCallback):
        self._listeners.append(callback)

    def remove_listener(self, callback: EventCallback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def set_agent_type(self, session_id: str, agent_type: str):
        """Pin the dialect for a session; ``auto`` defers to detection."""
        self._check_agent_type(agent_type)
        self._agent_types[session_id] = agent_type

    def agent_type(self, session_id: str) -> Optional[str]:
        return self._agent_types.get(session_id)

    def is_started(self, session_id: str) -> bool:
        return session_id in self._started

    def process_line(self, session_id: str, line: str):
        """Classify one complete line, opening the lifecycle if needed."""
        self._ensure_started(session_id, line)

        rules = RULE_TABLES.get(self._agent_types.get(session_id), RULE_TABLES[DEFAULT_AGENT])
        result = classify(line, rules)
        if result is not None:
            rule, data = result
            logger.debug(f"[{session_id}] matched rule '{rule.name}'")
            self._emit(session_id, rule.event_type, data)
            return

        if line.strip():
            self._emit(session_id, EventType.TEXT_MESSAGE_CONTENT, TextMessageData(delta=line))

    def process_exit(self, session_id: str, exit_code: int):
        """Close the lifecycle; the session id may be reused afterwards."""
        status = "success" if exit_code == 0 else "failed"
        self._emit(session_id, EventType.RUN_FINISHED, RunFinishedData(status=status))
        self._started.discard(session_id)
        self._agent_types.pop(session_id, None)
        logger.info(f"Run finished for {session_id} (exit code {exit_code}, {status})")

    def process_flush(self, session_id: str, partial: str):
        """Surface an incomplete line as plain text, bypassing the rule table."""
        if partial.strip():
            self._ensure_started(session_id, partial)
            self._emit(
                session_id, EventType.TEXT_MESSAGE_CONTENT, TextMessageData(delta=partial)
            )

    def _ensure_started(self, session_id: str, first_line: str):
        if session_id in self._started:
            return
        agent = self._resolve_agent_type(session_id, first_line)
        self._started.add(session_id)
        logger.info(f"Run started for {session_id} (agent: {agent})")
        self._emit(session_id, EventType.RUN_STARTED, RunStartedData(agent_name=agent))

    def _resolve_agent_type(self, session_id: str, first_line: str) -> str:
        agent = self._agent_types.get(session_id, self.default_agent_type)
        if agent == AUTO:
            agent = detect_agent_type(first_line)
        self._agent_types[session_id] = agent
        return agent

    @staticmethod
    def _check_agent_type(agent_type: str):
        if agent_type != AUTO and agent_type not in RULE_TABLES:
            raise ValueError(
                f"Unknown agent type '{agent_type}' "
                f"(expected one of: {AUTO}, {', '.join(RULE_TABLES)})"
            )

    def _emit(self, session_id: str, event_type: EventType, data: EventData):
        event = make_event(event_type, session_id, data)
        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Event listener failed for {session_id}: {e}")
