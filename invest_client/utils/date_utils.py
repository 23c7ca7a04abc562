"""Date manipulation utilities"""

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    """Return timezone-aware UTC now"""
    return datetime.now(timezone.utc)


def as_datetime(value: Union[date, datetime], like: Optional[datetime] = None) -> datetime:
    """
    Promote a date to midnight and align awareness with `like`, so values from
    the API (plain dates or naive timestamps) compare against an aware clock.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)

    if like is not None:
        if like.tzinfo is not None and value.tzinfo is None:
            value = value.replace(tzinfo=like.tzinfo)
        elif like.tzinfo is None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)

    return value


def ceil_days(delta: timedelta) -> int:
    """Whole days needed to cover `delta`, never negative"""
    return max(0, math.ceil(delta.total_seconds() / SECONDS_PER_DAY))
