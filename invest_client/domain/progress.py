"""Plan progress derived from an enrollment's start and end dates"""

from typing import Optional

from invest_client.domain.models import DateLike, PlanProgress
from invest_client.utils.date_utils import as_datetime, ceil_days, utc_now

# 100% is reserved for plans that have ended
IN_PROGRESS_CAP = 99.99


def calculate_progress(
    start: DateLike,
    end: DateLike,
    now: Optional[DateLike] = None,
) -> PlanProgress:
    """
    Compute completion percentage and day counts for a plan.

    Rules:
    - end <= start: degenerate plan, immediately 100% complete
    - now < start: 0%, days remaining counted from now
    - now >= end: 100%, nothing remaining
    - otherwise elapsed / total, capped below 100

    Dates without a time component are treated as midnight. Pure: identical
    inputs always produce the same result.

    Example:
        start = yesterday, end = tomorrow, now = today 00:00
        -> 50.0%, 1 day remaining, 2 total days
    """
    now_dt = as_datetime(now if now is not None else utc_now())
    start_dt = as_datetime(start, like=now_dt)
    end_dt = as_datetime(end, like=now_dt)

    total_days = ceil_days(end_dt - start_dt)

    if end_dt <= start_dt:
        return PlanProgress(percent_complete=100.0, days_remaining=0, total_days=0, elapsed_days=0)

    if now_dt < start_dt:
        percent = 0.0
        days_remaining = ceil_days(end_dt - now_dt)
    elif now_dt >= end_dt:
        percent = 100.0
        days_remaining = 0
    else:
        elapsed = (now_dt - start_dt).total_seconds()
        duration = (end_dt - start_dt).total_seconds()
        percent = min(max(elapsed / duration * 100, 0.0), IN_PROGRESS_CAP)
        days_remaining = ceil_days(end_dt - now_dt)

    return PlanProgress(
        percent_complete=percent,
        days_remaining=days_remaining,
        total_days=total_days,
        elapsed_days=max(0, total_days - days_remaining),
    )
