"""
AG-UI adapter: translate raw CLI agent output into lifecycle events.

    LineSegmenter → PatternClassifier → event sinks

See ``TranslationPipeline`` for the wired-up form.
"""

from agui_adapter.config import AdapterConfig
from agui_adapter.mock.generator import MockLifecycleGenerator
from agui_adapter.pipeline import TranslationPipeline, resolve_human_input
from agui_adapter.protocol.events import AgentEvent, EventType, HumanAction
from agui_adapter.stream.segmenter import LineSegmenter
from agui_adapter.translator.classifier import PatternClassifier

__version__ = "0.1.0"

__all__ = [
    "AdapterConfig",
    "AgentEvent",
    "EventType",
    "HumanAction",
    "LineSegmenter",
    "MockLifecycleGenerator",
    "PatternClassifier",
    "TranslationPipeline",
    "resolve_human_input",
]
