"""Shared pytest fixtures and configuration."""

import pytest

from agui_adapter.stream.segmenter import LineSegmenter
from agui_adapter.translator.classifier import PatternClassifier

FAST_FLUSH_TIMEOUT = 0.02


class Recorder:
    """Collects everything a component emits, in delivery order."""

    def __init__(self):
        self.lines = []
        self.flushes = []
        self.events = []

    def on_line(self, session_id, line):
        self.lines.append((session_id, line))

    def on_flush(self, session_id, partial):
        self.flushes.append((session_id, partial))

    def on_event(self, event):
        self.events.append(event)

    def types(self, session_id=None):
        return [
            e.type.value
            for e in self.events
            if session_id is None or e.session_id == session_id
        ]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def segmenter(recorder):
    """A segmenter with a short idle timeout, wired to the recorder."""
    seg = LineSegmenter(flush_timeout=FAST_FLUSH_TIMEOUT)
    seg.on_line(recorder.on_line)
    seg.on_flush(recorder.on_flush)
    yield seg
    seg.dispose()


@pytest.fixture
def classifier(recorder):
    clf = PatternClassifier()
    clf.add_listener(recorder.on_event)
    return clf
