# motowash/utils/timeutil.py
"""
Timestamp helpers. Entities carry timezone-aware UTC datetimes truncated to
milliseconds, so the ISO-8601 wire form (2026-02-20T10:30:00.123Z) reloads
to an equal value.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow_ms() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are treated as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    """Millisecond ISO-8601 with a trailing Z, as browsers emit it."""
    return ensure_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")
