"""
Presentation helpers shared by the CLI and anything else that renders rolls.

All times are handled as timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

__all__ = [
    "utc_from_unix",
    "format_timestamp",
    "relative_time",
    "format_hash",
]


def utc_from_unix(ts: int | float) -> datetime:
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Short human form, e.g. ``Oct 17, 14:03:09``."""
    return f"{dt:%b} {dt.day}, {dt:%H:%M:%S}"


def relative_time(dt: datetime, now: Optional[datetime] = None) -> str:
    """
    Coarse age of *dt* relative to *now*: "Just now", "5m ago", "3h ago", "2d ago".
    Future timestamps are reported as "Just now".
    """
    now = now or datetime.now(timezone.utc)
    seconds = int((now - dt).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def format_hash(value: str, start: int = 8, end: int = 6) -> str:
    """Abbreviate a long hex/opaque string as ``head...tail``."""
    if len(value) <= start + end:
        return value
    return f"{value[:start]}...{value[len(value) - end:]}"
