"""
Development fixtures.

- generator: canned, realistically paced lifecycle replay
"""

from agui_adapter.mock.generator import MockLifecycleGenerator

__all__ = ["MockLifecycleGenerator"]
