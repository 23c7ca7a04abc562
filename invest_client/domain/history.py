"""Summaries for the plan history and transaction history screens"""

from decimal import Decimal
from typing import Optional, Sequence

from invest_client.domain.models import (
    DateLike,
    EnrollmentStatus,
    PlanEnrollment,
    PlanHistoryStats,
    TransactionLogEntry,
    TransactionLogSummary,
)
from invest_client.utils.date_utils import as_datetime, ceil_days, utc_now


def days_until(end: DateLike, now: Optional[DateLike] = None) -> int:
    """Calendar days left until `end`, counted between midnights; 0 once passed"""
    today = as_datetime(now if now is not None else utc_now()).date()
    return ceil_days(as_datetime(end).date() - today)


def summarize_plan_history(enrollments: Sequence[PlanEnrollment]) -> PlanHistoryStats:
    """Counts by status plus the total ever invested (all statuses)"""
    return PlanHistoryStats(
        total_plans=len(enrollments),
        active_plans=sum(1 for e in enrollments if e.status is EnrollmentStatus.ACTIVE),
        expired_plans=sum(1 for e in enrollments if e.status is EnrollmentStatus.EXPIRED),
        completed_plans=sum(1 for e in enrollments if e.status is EnrollmentStatus.COMPLETED),
        total_investment=sum((e.amount for e in enrollments), Decimal("0")),
    )


def summarize_transactions(entries: Sequence[TransactionLogEntry]) -> TransactionLogSummary:
    """Deposit / withdrawal log totals; unknown statuses count as pending"""
    statuses = [(e.status or "").strip().lower() for e in entries]
    approved = statuses.count("approved")
    rejected = statuses.count("rejected")

    return TransactionLogSummary(
        count=len(entries),
        total_amount=sum((e.amount for e in entries), Decimal("0")),
        approved=approved,
        pending=len(entries) - approved - rejected,
        rejected=rejected,
    )
