"""Profit aggregation - merges plan enrollments with their earnings records"""

from decimal import Decimal
from typing import List, Optional, Sequence

from invest_client.domain.models import (
    DateLike,
    EnrollmentStatus,
    PlanEnrollment,
    PlanSummary,
    PortfolioSummary,
    ProfitRecord,
)
from invest_client.domain.progress import calculate_progress
from invest_client.utils.date_utils import as_datetime

ZERO = Decimal("0")


def _same_day(a: DateLike, b: DateLike) -> bool:
    return as_datetime(a).date() == as_datetime(b).date()


def match_profit_record(
    enrollment: PlanEnrollment,
    records: Sequence[ProfitRecord],
) -> Optional[ProfitRecord]:
    """
    Find the earnings record for an enrollment.

    Records are keyed by plan title only. When a record also carries a start
    date, (title, start_date) wins over a bare title match; otherwise the
    first record with the title is used.
    """
    first_by_title = None
    for record in records:
        if record.title != enrollment.title:
            continue
        if record.start_date is not None and _same_day(record.start_date, enrollment.start_date):
            return record
        if first_by_title is None:
            first_by_title = record
    return first_by_title


def summarize_enrollment(
    enrollment: PlanEnrollment,
    record: Optional[ProfitRecord],
    now: DateLike,
) -> PlanSummary:
    """Merge static plan terms with dynamic earnings; missing records read as zero"""
    progress = calculate_progress(enrollment.start_date, enrollment.end_date, now)

    return PlanSummary(
        title=enrollment.title,
        amount=enrollment.amount,
        start_date=enrollment.start_date,
        end_date=enrollment.end_date,
        status=enrollment.status,
        daily_profit=record.daily_profit if record else ZERO,
        total_earned=record.total_earned if record else ZERO,
        remaining_days=max(record.remaining_days, 0) if record else 0,
        is_active_profit=record.is_active if record else False,
        has_profit_record=record is not None,
        progress=progress,
    )


def aggregate_profit(
    enrollments: Sequence[PlanEnrollment],
    records: Sequence[ProfitRecord],
    now: DateLike,
) -> PortfolioSummary:
    """
    Build the portfolio summary shown on the dashboard and profit pages.

    - per_plan: every ACTIVE enrollment, in input order, with or without a record
    - total_earned_across_active: sum of total_earned over records with is_active
    - total_invested: sum of amount over ACTIVE enrollments

    Expired and completed enrollments are history, not current exposure.
    Progress is measured at `now`, so identical inputs give identical output.
    """
    active = [e for e in enrollments if e.status is EnrollmentStatus.ACTIVE]

    per_plan: List[PlanSummary] = [
        summarize_enrollment(enrollment, match_profit_record(enrollment, records), now)
        for enrollment in active
    ]

    total_earned = sum((r.total_earned for r in records if r.is_active), ZERO)
    total_invested = sum((e.amount for e in active), ZERO)

    return PortfolioSummary(
        per_plan=per_plan,
        total_earned_across_active=total_earned,
        total_invested=total_invested,
    )
