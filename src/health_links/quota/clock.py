"""Calendar-day helpers for the quota counter (fixed UTC+9, Asia/Seoul)."""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

QUOTA_TZ = timezone(timedelta(hours=9), name="KST")

KEY_PREFIX = "global_daily_api_count:"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _local(now: Optional[datetime]) -> datetime:
    if now is None:
        now = utc_now()
    if now.tzinfo is None:
        raise ValueError("quota clock must return timezone-aware datetimes")
    return now.astimezone(QUOTA_TZ)


def date_key(now: Optional[datetime] = None) -> str:
    """Local calendar date as YYYY-MM-DD."""
    return _local(now).strftime("%Y-%m-%d")


def store_key(now: Optional[datetime] = None) -> str:
    """Remote key holding the counter for the current local day."""
    return KEY_PREFIX + date_key(now)


def seconds_until_midnight(now: Optional[datetime] = None) -> int:
    """Whole seconds (rounded up) until the next local midnight."""
    local = _local(now)
    next_midnight = (local + timedelta(days=1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return math.ceil((next_midnight - local).total_seconds())
