"""
Line classification into AG-UI events.

- patterns: ordered rule tables per agent dialect
- classifier: session-aware translator that applies them
"""

from agui_adapter.translator.classifier import PatternClassifier
from agui_adapter.translator.patterns import (
    CLAUDE_RULES,
    OPENCLAW_RULES,
    RULE_TABLES,
    TranslationRule,
    classify,
    detect_agent_type,
)

__all__ = [
    "CLAUDE_RULES",
    "OPENCLAW_RULES",
    "RULE_TABLES",
    "PatternClassifier",
    "TranslationRule",
    "classify",
    "detect_agent_type",
]
