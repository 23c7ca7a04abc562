"""Unit tests for profit aggregation"""

from datetime import timedelta
from decimal import Decimal

from invest_client.domain.models import EnrollmentStatus, PlanEnrollment, ProfitRecord
from invest_client.domain.profit import aggregate_profit, match_profit_record


def _record(title, earned, active=True, start_date=None):
    return ProfitRecord(
        title=title,
        daily_profit=Decimal("50"),
        total_earned=Decimal(earned),
        remaining_days=10,
        is_active=active,
        start_date=start_date,
    )


def test_per_plan_lists_only_active_enrollments_in_order(sample_enrollments, sample_profit_records, today):
    summary = aggregate_profit(sample_enrollments, sample_profit_records, now=today)

    assert [p.title for p in summary.per_plan] == ["10 Marla", "1 Kanal"]
    assert all(p.status is EnrollmentStatus.ACTIVE for p in summary.per_plan)


def test_totals(sample_enrollments, sample_profit_records, today):
    summary = aggregate_profit(sample_enrollments, sample_profit_records, now=today)

    # only the active record counts; the expired plan's 3000 does not
    assert summary.total_earned_across_active == Decimal("500")
    assert summary.total_invested == Decimal("11000")


def test_enrollment_without_record_shows_zeros(sample_enrollments, sample_profit_records, today):
    summary = aggregate_profit(sample_enrollments, sample_profit_records, now=today)
    kanal = summary.per_plan[1]

    assert kanal.has_profit_record is False
    assert kanal.daily_profit == Decimal("0")
    assert kanal.total_earned == Decimal("0")
    assert kanal.remaining_days == 0
    assert kanal.is_active_profit is False


def test_enrollment_merged_with_record(sample_enrollments, sample_profit_records, today):
    marla = aggregate_profit(sample_enrollments, sample_profit_records, now=today).per_plan[0]

    assert marla.has_profit_record
    assert marla.amount == Decimal("3000")
    assert marla.total_earned == Decimal("500")
    assert marla.daily_profit == Decimal("50")
    assert marla.progress.total_days == 30
    assert marla.progress.days_remaining == 20


def test_empty_inputs(today):
    summary = aggregate_profit([], [], now=today)

    assert summary.per_plan == []
    assert summary.total_earned_across_active == Decimal("0")
    assert summary.total_invested == Decimal("0")


def test_records_without_enrollment_still_count_toward_earned(today):
    summary = aggregate_profit([], [_record("10 Marla", "750")], now=today)
    assert summary.total_earned_across_active == Decimal("750")


def test_title_match_uses_first_record(today):
    enrollment = PlanEnrollment("10 Marla", Decimal("3000"), today, today + timedelta(days=30), EnrollmentStatus.ACTIVE)
    records = [_record("20 Marla", "1"), _record("10 Marla", "2"), _record("10 Marla", "3")]

    assert match_profit_record(enrollment, records) is records[1]


def test_start_date_disambiguates_repeat_enrollments(today):
    earlier = today - timedelta(days=40)
    enrollment = PlanEnrollment("10 Marla", Decimal("3000"), today, today + timedelta(days=30), EnrollmentStatus.ACTIVE)
    records = [
        _record("10 Marla", "1500", active=False, start_date=earlier),
        _record("10 Marla", "200", start_date=today),
    ]

    assert match_profit_record(enrollment, records) is records[1]


def test_no_match_returns_none(sample_enrollments):
    assert match_profit_record(sample_enrollments[1], [_record("10 Marla", "1")]) is None


def test_aggregate_is_idempotent(sample_enrollments, sample_profit_records, today):
    first = aggregate_profit(sample_enrollments, sample_profit_records, now=today)
    second = aggregate_profit(sample_enrollments, sample_profit_records, now=today)

    assert first == second
