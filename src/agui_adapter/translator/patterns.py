"""
Ordered classification tables for CLI agent output.

Each table is an immutable tuple of rules scanned top to bottom; the first
rule whose regex matches a line decides the event. Reordering or adding
rules only touches the tuples below.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from agui_adapter.protocol.events import (
    ApprovalPayload,
    EventData,
    EventType,
    RunFinishedData,
    StepStartedData,
    TextMessageData,
    WaitingForHumanData,
)

DEFAULT_AGENT = "claude"


@dataclass(frozen=True)
class TranslationRule:
    """A single (matcher, event kind, payload extractor) entry."""

    name: str
    pattern: re.Pattern
    event_type: EventType
    extract: Callable[[re.Match], EventData]

    def match(self, line: str) -> Optional[re.Match]:
        return self.pattern.search(line)


RuleTable = Tuple[TranslationRule, ...]


def _rule(name, pattern, event_type, extract, flags=re.IGNORECASE) -> TranslationRule:
    return TranslationRule(name, re.compile(pattern, flags), event_type, extract)


# ─── Extractors ──────────────────────────────────────────────────────


def _tool_step(match: re.Match) -> StepStartedData:
    return StepStartedData(tool_name=match.group(1).strip())


def _full_line_text(match: re.Match) -> TextMessageData:
    return TextMessageData(delta=match.string)


def _matched_text(match: re.Match) -> TextMessageData:
    return TextMessageData(delta=match.group(0))


def _success(match: re.Match) -> RunFinishedData:
    return RunFinishedData(status="success")


def _approval(title: str) -> Callable[[re.Match], WaitingForHumanData]:
    def extract(match: re.Match) -> WaitingForHumanData:
        return WaitingForHumanData(
            reason=match.group(0),
            approval_payload=ApprovalPayload.approval_card(
                title=title, description=match.string
            ),
        )

    return extract


def _dangerous(match: re.Match) -> WaitingForHumanData:
    return WaitingForHumanData(
        reason=f"Dangerous operation detected: {match.group(0)}",
        approval_payload=ApprovalPayload.approval_card(
            title="Dangerous Operation Warning", command=match.string
        ),
    )


# ─── Shared Rules ────────────────────────────────────────────────────

DANGEROUS_OPERATION = _rule(
    "dangerous_operation",
    r"\brm\s+-(?:rf|fr)"
    r"|\bDROP\s+(?:TABLE|DATABASE)\b"
    r"|\bDELETE\s+FROM\b"
    r"|\bTRUNCATE\s+TABLE\b"
    r"|\bforce\s+push"
    r"|--force\b",
    EventType.WAITING_FOR_HUMAN,
    _dangerous,
)

ERROR_MESSAGE = _rule(
    "error",
    r"\b(?:error|failed|fatal|panic|exception):\s*(.+)",
    EventType.TEXT_MESSAGE_CONTENT,
    _matched_text,
)

YES_NO_PROMPT = r"\b(?:y/n|yes/no)\b|\[[yY]/[nN]\]"


# ─── Claude Code ─────────────────────────────────────────────────────

CLAUDE_RULES: RuleTable = (
    _rule(
        "tool_announcement",
        r"\b(?:Running|Executing|Using)\s+(?:tool:\s*)?(\w.*?)\s*(?:\(.*)?$",
        EventType.STEP_STARTED,
        _tool_step,
    ),
    _rule(
        "shell_echo",
        r"^>\s*(\S.*)$",
        EventType.STEP_STARTED,
        _tool_step,
    ),
    _rule(
        "approval_prompt",
        r"\b(?:allow|approve|permit|accept|deny|reject)|" + YES_NO_PROMPT,
        EventType.WAITING_FOR_HUMAN,
        _approval("Agent requires approval"),
    ),
    DANGEROUS_OPERATION,
    _rule(
        "completion",
        r"\b(?:task\s+completed?|finished|done|completed\s+successfully)\b",
        EventType.RUN_FINISHED,
        _success,
    ),
    ERROR_MESSAGE,
)


# ─── OpenClaw ────────────────────────────────────────────────────────

OPENCLAW_RULES: RuleTable = (
    # The synthesized RUN_STARTED already opens the lifecycle; the banner is text.
    _rule(
        "startup_marker",
        r"(?:🦞|\bopenclaw)\s*(?:start|launch|init|ready)",
        EventType.TEXT_MESSAGE_CONTENT,
        _full_line_text,
    ),
    _rule(
        "tool_call",
        r"(?:Running\s+tool|Calling|Invoking):\s*(.+)",
        EventType.STEP_STARTED,
        _tool_step,
    ),
    _rule(
        "reasoning",
        r"^(?:Thinking\.\.\.|Reasoning|Analyzing|Planning)(.*)$",
        EventType.TEXT_MESSAGE_CONTENT,
        _matched_text,
    ),
    _rule(
        "input_prompt",
        r"Waiting\s+for\s+user|permission\s+required|\bconfirm|proceed\?|" + YES_NO_PROMPT,
        EventType.WAITING_FOR_HUMAN,
        _approval("OpenClaw requires input"),
    ),
    DANGEROUS_OPERATION,
    _rule(
        "completion",
        r"^\s*Done\s*$"
        r"|\bsession\s+(?:ended|closed|finished)\b"
        r"|\btask\s+completed?\b"
        r"|\bcompleted\s+successfully\b",
        EventType.RUN_FINISHED,
        _success,
    ),
    ERROR_MESSAGE,
)


RULE_TABLES: Dict[str, RuleTable] = {
    "claude": CLAUDE_RULES,
    "openclaw": OPENCLAW_RULES,
}

OPENCLAW_MARKER_RE = re.compile(r"🦞|openclaw", re.IGNORECASE)


def detect_agent_type(line: str) -> str:
    """Guess the agent dialect from its first line of output."""
    if OPENCLAW_MARKER_RE.search(line):
        return "openclaw"
    return DEFAULT_AGENT


def classify(
    line: str, rules: RuleTable = CLAUDE_RULES
) -> Optional[Tuple[TranslationRule, EventData]]:
    """
    Return the first matching rule and its payload, or None.

    Scanning stops at the first match; there is no backtracking.
    """
    for rule in rules:
        match = rule.match(line)
        if match:
            return rule, rule.extract(match)
    return None
