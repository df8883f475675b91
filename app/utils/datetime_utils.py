"""
Timezone-aware datetime helpers. Store and compute in UTC.
"""
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for filed_at, approved_at, created_at."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO 8601 string in UTC (e.g. 2026-02-11T12:30:00+00:00) for API responses."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()
