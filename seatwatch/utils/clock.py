# seatwatch/utils/clock.py
"""Wall-clock helpers for human-facing timestamps (logs, notifications)."""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

DISPLAY_FORMAT = "%Y/%m/%d %H:%M:%S"


def local_now(tz_name: str) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def format_local(tz_name: str, when: Optional[datetime] = None) -> str:
    """Format `when` (default: now) in `tz_name`, e.g. '2025/11/03 14:20:00 CST'."""
    tz = ZoneInfo(tz_name)
    when = when.astimezone(tz) if when is not None else datetime.now(tz)
    return f"{when.strftime(DISPLAY_FORMAT)} {when.tzname()}"


def format_duration(seconds: float) -> str:
    """1200 → '20m', 21240 → '5h 54m', 45 → '45s'."""
    seconds = int(round(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)
