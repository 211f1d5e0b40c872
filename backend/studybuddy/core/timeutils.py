"""RFC3339 helpers. The database keeps naive UTC datetimes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc
EPOCH = datetime(1970, 1, 1)


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Aware -> converted to UTC and stripped; naive is taken as UTC already."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def to_rfc3339(dt: datetime) -> str:
    dt = to_naive_utc(dt)
    return dt.replace(microsecond=0).isoformat() + "Z"
