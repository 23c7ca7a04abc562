"""Read models for the dashboard, profit, plan history and transaction history screens"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from invest_client.domain.exceptions import BackendAPIError
from invest_client.domain.history import summarize_plan_history, summarize_transactions
from invest_client.domain.models import (
    DateLike,
    InvestmentPlan,
    PlanEnrollment,
    PlanHistoryStats,
    PortfolioSummary,
    TransactionLogEntry,
    TransactionLogSummary,
    WalletDetail,
)
from invest_client.domain.profit import aggregate_profit
from invest_client.infrastructure.clients.backend import BackendGateway
from invest_client.utils.date_utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class DashboardView:
    wallet: WalletDetail
    plans: List[InvestmentPlan]
    display_name: str


@dataclass
class PlanHistoryView:
    enrollments: List[PlanEnrollment]
    stats: PlanHistoryStats


@dataclass
class TransactionHistoryView:
    entries: List[TransactionLogEntry]
    summary: TransactionLogSummary


class PortfolioService:
    """
    Fetches server state and derives what the screens show.

    Nothing here is mutated optimistically: after any state-changing action
    the caller runs refresh() and the cached views are replaced wholesale.
    """

    def __init__(self, gateway: BackendGateway):
        self.gateway = gateway
        self.dashboard: Optional[DashboardView] = None
        self.profit_overview: Optional[PortfolioSummary] = None

    async def load_dashboard(self) -> DashboardView:
        wallet, plans = await asyncio.gather(self.gateway.get_wallet(), self.gateway.get_plans())
        view = DashboardView(
            wallet=wallet,
            plans=plans,
            display_name=self.gateway.session.current_user(),
        )
        self.dashboard = view
        return view

    async def load_profit_overview(self, now: Optional[DateLike] = None) -> PortfolioSummary:
        records, enrollments = await asyncio.gather(
            self.gateway.get_profit_history(),
            self.gateway.get_plan_history(),
        )
        summary = aggregate_profit(enrollments, records, now=now or utc_now())
        self.profit_overview = summary
        return summary

    async def load_plan_history(self) -> PlanHistoryView:
        enrollments = await self.gateway.get_plan_history()
        return PlanHistoryView(enrollments=enrollments, stats=summarize_plan_history(enrollments))

    async def load_deposit_history(self) -> TransactionHistoryView:
        entries = await self.gateway.get_deposit_history()
        return TransactionHistoryView(entries=entries, summary=summarize_transactions(entries))

    async def load_withdrawal_history(self) -> TransactionHistoryView:
        entries = await self.gateway.get_withdrawal_history()
        return TransactionHistoryView(entries=entries, summary=summarize_transactions(entries))

    async def refresh(self) -> None:
        """Refetch everything a transaction or investment can change"""
        logger.debug("Refreshing portfolio views")
        await self.load_dashboard()
        await self.load_profit_overview()

    async def try_refresh(self) -> bool:
        """
        refresh() after an acknowledged action. The action already succeeded,
        so a failed refetch is logged and leaves the previous views in place.
        """
        try:
            await self.refresh()
        except BackendAPIError as e:
            logger.warning(f"Portfolio refresh failed: {e}")
            return False
        return True
