"""Time label formatting for window rows.

Labels use a 12-hour clock without a leading zero on the hour, e.g.
``"12:30 PM"`` or ``"9:05 AM"``. Row labels carry minutes only; capture
labels add seconds.
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Manila"


def _to_zone(dt: datetime, tz: tzinfo | str) -> datetime:
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(zone)


def _hour12(dt: datetime) -> tuple[int, str]:
    hour = dt.hour % 12 or 12
    return hour, "AM" if dt.hour < 12 else "PM"


def format_time_label(dt: datetime, tz: tzinfo | str = DEFAULT_TIMEZONE) -> str:
    """Format a timestamp as a row label like ``"12:30 PM"``.

    Args:
        dt: Timestamp (naive values are taken as UTC)
        tz: Target timezone or IANA name

    Returns:
        Display label in the target timezone
    """
    local = _to_zone(dt, tz)
    hour, meridiem = _hour12(local)
    return f"{hour}:{local.minute:02d} {meridiem}"


def format_capture_label(dt: datetime, tz: tzinfo | str = DEFAULT_TIMEZONE) -> str:
    """Format a capture time as ``"12:30:05 PM"``."""
    local = _to_zone(dt, tz)
    hour, meridiem = _hour12(local)
    return f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
