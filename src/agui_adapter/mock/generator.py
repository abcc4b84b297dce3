"""
Mock Lifecycle Generator.

Replays a complete, canned agent lifecycle so consumers of the event
stream can be developed and tested without a real agent process.
"""

import asyncio
import uuid
from typing import Awaitable, Callable, List, Optional, Union

from agui_adapter.logger import get_logger
from agui_adapter.protocol.events import (
    AgentEvent,
    ApprovalPayload,
    EventData,
    EventType,
    RunFinishedData,
    RunStartedData,
    StepStartedData,
    TextMessageData,
    WaitingForHumanData,
    make_event,
)

logger = get_logger(__name__)

DEFAULT_BASE_DELAY = 0.8
DEFAULT_INITIAL_DELAY = 0.3

OnEvent = Callable[[AgentEvent], Union[None, Awaitable[None]]]


class MockLifecycleGenerator:
    """Produces one session's worth of AG-UI events."""

    def __init__(self, agent_name: str = "claude", session_id: Optional[str] = None):
        self.agent_name = agent_name
        self.session_id = session_id or str(uuid.uuid4())

    def generate_lifecycle(self) -> List[AgentEvent]:
        """Build the full canned sequence, RUN_STARTED through RUN_FINISHED."""
        events = [self._event(EventType.RUN_STARTED, RunStartedData(agent_name=self.agent_name))]

        for line in (
            "I'll help you with that task. Let me analyze the codebase first.",
            "Looking at the project structure...",
            "I can see this is a TypeScript project with the following layout:",
        ):
            events.append(self._text(line))

        events.append(self._step("Read file: src/index.ts"))
        events.append(self._text("The main entry point exports the application config..."))

        events.append(self._step("Bash: npm test"))
        events.append(self._text("All 15 tests passed successfully."))

        events.append(
            self._event(
                EventType.WAITING_FOR_HUMAN,
                WaitingForHumanData(
                    reason="Agent wants to execute a potentially dangerous command",
                    approval_payload=ApprovalPayload.approval_card(
                        title="Dangerous Operation Warning",
                        command="rm -rf /tmp/old-build",
                    ),
                ),
            )
        )
        events.append(self._text("Old build artifacts cleaned up. Now deploying..."))

        events.append(self._step("Bash: npm run build"))
        events.append(self._text("Build completed successfully. Output written to dist/"))

        events.append(self._event(EventType.RUN_FINISHED, RunFinishedData(status="success")))
        return events

    async def replay(
        self,
        on_event: OnEvent,
        base_delay: float = DEFAULT_BASE_DELAY,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
    ):
        """
        Deliver the lifecycle with realistic pacing.

        Text arrives faster than steps; an approval prompt is followed by a
        longer pause. ``on_event`` may be a plain function or a coroutine.
        """
        events = self.generate_lifecycle()
        await asyncio.sleep(initial_delay)

        for index, event in enumerate(events):
            result = on_event(event)
            if asyncio.iscoroutine(result):
                await result

            if index + 1 < len(events):
                await asyncio.sleep(next_delay(events[index + 1], base_delay))

        logger.debug(f"Mock lifecycle for {self.session_id} delivered {len(events)} events")

    def stream_lifecycle(
        self,
        on_event: OnEvent,
        base_delay: float = DEFAULT_BASE_DELAY,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
    ) -> asyncio.Task:
        """Schedule ``replay`` in the background; cancel the task to stop it."""
        return asyncio.create_task(self.replay(on_event, base_delay, initial_delay))

    def _event(self, event_type: EventType, data: EventData) -> AgentEvent:
        return make_event(event_type, self.session_id, data)

    def _text(self, delta: str) -> AgentEvent:
        return self._event(EventType.TEXT_MESSAGE_CONTENT, TextMessageData(delta=delta))

    def _step(self, tool_name: str) -> AgentEvent:
        return self._event(EventType.STEP_STARTED, StepStartedData(tool_name=tool_name))


def next_delay(upcoming: AgentEvent, base_delay: float) -> float:
    """Pause before delivering ``upcoming``."""
    if upcoming.type == EventType.TEXT_MESSAGE_CONTENT:
        return base_delay * 0.5
    if upcoming.type == EventType.WAITING_FOR_HUMAN:
        return base_delay * 2
    return base_delay
