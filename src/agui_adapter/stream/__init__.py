"""
Raw agent output handling.

- segmenter: per-session line buffering with idle-timeout flushing
"""

from agui_adapter.stream.segmenter import LineSegmenter

__all__ = ["LineSegmenter"]
