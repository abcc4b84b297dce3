"""
Translation pipeline.

Wires raw agent output through the segmenter and classifier to event
sinks:

    raw chunk → LineSegmenter → PatternClassifier → sinks

Also keeps a coarse per-session status and turns operator responses into
the text a process supervisor should write to the agent's stdin.
"""

import asyncio
from typing import Callable, Dict, List, Literal, Optional

from agui_adapter.config import AdapterConfig
from agui_adapter.logger import get_logger
from agui_adapter.protocol.events import AgentEvent, EventType, HumanAction
from agui_adapter.stream.segmenter import LineSegmenter
from agui_adapter.translator.classifier import PatternClassifier

logger = get_logger(__name__)

SessionStatus = Literal["running", "waiting", "finished"]
EventSink = Callable[[AgentEvent], None]


def resolve_human_input(action: HumanAction) -> str:
    """Convert an operator response into the text to send to the agent's stdin."""
    if action.action_type == "APPROVE":
        return "y\n"
    if action.action_type == "REJECT":
        return "n\n"
    if isinstance(action.payload, str):
        return action.payload + "\n"
    return "\n"


class TranslationPipeline:
    """Owns one segmenter and one classifier and fans events out to sinks."""

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.config = config or AdapterConfig()
        self.segmenter = LineSegmenter(flush_timeout=self.config.flush_timeout, loop=loop)
        self.classifier = PatternClassifier(default_agent_type=self.config.agent_type)
        self._sinks: List[EventSink] = []
        self._status: Dict[str, SessionStatus] = {}

        self.segmenter.on_line(self.classifier.process_line)
        self.segmenter.on_flush(self.classifier.process_flush)
        self.classifier.add_listener(self._dispatch)

    def add_sink(self, sink: EventSink):
        self._sinks.append(sink)

    def feed(self, session_id: str, chunk: str):
        self.segmenter.feed(session_id, chunk)

    def handle_exit(self, session_id: str, exit_code: int):
        """Finish a session: flush pending text, emit RUN_FINISHED, drop buffers."""
        if self.config.flush_on_exit:
            self.segmenter.flush(session_id)
        elif self.segmenter.pending(session_id):
            logger.debug(f"Dropping unflushed partial for {session_id} on exit")
            self.segmenter.discard(session_id)

        self.classifier.process_exit(session_id, exit_code)
        self.segmenter.remove(session_id)

    def resolve_human_action(self, action: HumanAction) -> str:
        """Translate an operator response and mark the session as running again."""
        text = resolve_human_input(action)
        self._status[action.session_id] = "running"
        logger.info(f"Human action {action.action_type} for {action.session_id}")
        return text

    def status(self, session_id: str) -> Optional[SessionStatus]:
        return self._status.get(session_id)

    def dispose(self):
        self.segmenter.dispose()
        self._status.clear()

    def _dispatch(self, event: AgentEvent):
        if event.type == EventType.WAITING_FOR_HUMAN:
            self._status[event.session_id] = "waiting"
        elif event.type == EventType.RUN_FINISHED:
            self._status[event.session_id] = "finished"
        elif event.type == EventType.RUN_STARTED:
            self._status[event.session_id] = "running"

        for sink in list(self._sinks):
            try:
                sink(event)
            except Exception as e:
                logger.error(f"Event sink failed for {event.session_id}: {e}")
