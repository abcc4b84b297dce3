"""
Line Segmenter.

Turns arbitrarily chunked per-session output into complete, ANSI-clean
lines. An unterminated tail is held back until more data arrives or the
idle timeout elapses, at which point it is emitted as a forced partial.
"""

import asyncio
import re
from typing import Callable, Dict, List, Optional

from agui_adapter.logger import get_logger
from agui_adapter.utils import strip_ansi

logger = get_logger(__name__)

LINE_BREAK_RE = re.compile(r"\r?\n")

DEFAULT_FLUSH_TIMEOUT = 0.1

# (session_id, text)
SegmentCallback = Callable[[str, str], None]


class LineSegmenter:
    """
    Stateful per-session line buffer.

    Listeners:
    - line listeners receive every complete, non-empty line
    - flush listeners receive forced partials (idle timeout or teardown)
    """

    def __init__(
        self,
        flush_timeout: float = DEFAULT_FLUSH_TIMEOUT,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.flush_timeout = flush_timeout
        self._loop = loop
        self._buffers: Dict[str, str] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._line_listeners: List[SegmentCallback] = []
        self._flush_listeners: List[SegmentCallback] = []

    # ─── Listeners ───────────────────────────────────────────────────

    def on_line(self, callback: SegmentCallback):
        self._line_listeners.append(callback)

    def on_flush(self, callback: SegmentCallback):
        self._flush_listeners.append(callback)

    # ─── Operations ──────────────────────────────────────────────────

    def feed(self, session_id: str, chunk: str):
        """Append a chunk and emit every line it completes."""
        self._cancel_timer(session_id)

        combined = self._buffers.get(session_id, "") + chunk
        parts = LINE_BREAK_RE.split(combined)

        for part in parts[:-1]:
            line = strip_ansi(part)
            if line:
                self._emit(self._line_listeners, session_id, line)

        remainder = parts[-1]
        if remainder:
            self._buffers[session_id] = remainder
            self._start_timer(session_id)
        else:
            self._buffers.pop(session_id, None)

    def flush(self, session_id: str):
        """Force-emit the buffered remainder as a partial."""
        self._cancel_timer(session_id)
        buffered = self._buffers.pop(session_id, "")
        if not buffered:
            return

        partial = strip_ansi(buffered)
        if partial:
            self._emit(self._flush_listeners, session_id, partial)

    def remove(self, session_id: str):
        """Flush, then forget the session. Safe on unknown ids."""
        self.flush(session_id)
        self.discard(session_id)

    def discard(self, session_id: str):
        """Forget a session without emitting its buffered text."""
        self._cancel_timer(session_id)
        self._buffers.pop(session_id, None)

    def dispose(self):
        """Cancel every pending timer and drop all buffered text."""
        for timer in self._timers.values():
            timer.cancel()
        if self._timers:
            logger.debug(f"Disposed {len(self._timers)} pending flush timer(s)")
        self._timers.clear()
        self._buffers.clear()

    # ─── Inspection ──────────────────────────────────────────────────

    def pending(self, session_id: str) -> str:
        """Text buffered for a session that has not yet been emitted."""
        return self._buffers.get(session_id, "")

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    @property
    def sessions(self) -> List[str]:
        return list(self._buffers)

    # ─── Internals ───────────────────────────────────────────────────

    def _start_timer(self, session_id: str):
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug(
                    f"No running event loop; holding partial for {session_id} "
                    "until an explicit flush"
                )
                return

        self._timers[session_id] = loop.call_later(
            self.flush_timeout, self._on_timeout, session_id
        )

    def _on_timeout(self, session_id: str):
        self._timers.pop(session_id, None)
        logger.debug(f"Idle timeout elapsed for {session_id}, flushing partial")
        self.flush(session_id)

    def _cancel_timer(self, session_id: str):
        timer = self._timers.pop(session_id, None)
        if timer is not None:
            timer.cancel()

    def _emit(self, listeners: List[SegmentCallback], session_id: str, text: str):
        for callback in listeners:
            try:
                callback(session_id, text)
            except Exception as e:
                logger.error(f"Segment listener failed for {session_id}: {e}")
