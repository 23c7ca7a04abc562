"""Unit tests for plan and transaction history summaries"""

from datetime import datetime, time, timedelta
from decimal import Decimal

from invest_client.domain.history import days_until, summarize_plan_history, summarize_transactions
from invest_client.domain.models import TransactionLogEntry


def test_days_until_counts_calendar_days(today):
    assert days_until(today + timedelta(days=3), now=today) == 3
    assert days_until(today, now=today) == 0


def test_days_until_ignores_time_of_day(today):
    late_evening = datetime.combine(today, time(23, 30))
    assert days_until(today + timedelta(days=1), now=late_evening) == 1


def test_days_until_past_end_is_zero(today):
    assert days_until(today - timedelta(days=5), now=today) == 0


def test_summarize_plan_history(sample_enrollments):
    stats = summarize_plan_history(sample_enrollments)

    assert stats.total_plans == 4
    assert stats.active_plans == 2
    assert stats.expired_plans == 1
    assert stats.completed_plans == 1
    assert stats.total_investment == Decimal("26000")


def test_summarize_plan_history_empty():
    stats = summarize_plan_history([])
    assert stats.total_plans == 0
    assert stats.total_investment == Decimal("0")


def test_summarize_transactions_counts_by_status():
    entries = [
        TransactionLogEntry(amount=Decimal("3000"), method="BankTransfer", status="Approved"),
        TransactionLogEntry(amount=Decimal("5000"), method="JazzCash", status="pending"),
        TransactionLogEntry(amount=Decimal("100"), method="EasyPaisa", status="rejected"),
        TransactionLogEntry(amount=Decimal("250"), method="EasyPaisa", status="on hold"),
    ]

    summary = summarize_transactions(entries)

    assert summary.count == 4
    assert summary.total_amount == Decimal("8350")
    assert (summary.approved, summary.pending, summary.rejected) == (1, 2, 1)
