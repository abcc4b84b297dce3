"""
Small text and time helpers shared across the adapter.
"""

import re
from datetime import datetime, timezone

# CSI (colours, cursor movement, private modes), OSC (window titles,
# hyperlinks) terminated by BEL, ST or the end of the line, two-byte
# escapes, and a dangling ESC at the end of the line.
ANSI_ESCAPE_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\|$)"
    r"|\x1b[@-Z\\^_]"
    r"|\x1b$"
)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and carriage returns."""
    return ANSI_ESCAPE_RE.sub("", text).replace("\r", "")


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. ``2025-01-01T12:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
