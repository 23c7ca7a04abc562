"""Pydantic schemas for backend response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from invest_client.domain.models import (
    EnrollmentStatus,
    InvestmentPlan,
    PlanEnrollment,
    ProfitRecord,
    TransactionLogEntry,
    WalletDetail,
)


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PlanSchema(_ApiModel):
    """Item of GET /transactions/plans/"""

    id: int
    title: str
    amount: Decimal
    daily_profit: Decimal
    duration_days: Optional[int] = None
    total_profit: Decimal = Decimal("0")
    is_locked: bool = False

    def to_domain(self) -> InvestmentPlan:
        return InvestmentPlan(
            id=self.id,
            title=self.title,
            amount=self.amount,
            daily_profit=self.daily_profit,
            duration_days=self.duration_days,
            total_profit=self.total_profit,
            is_locked=self.is_locked,
        )


class PlanHistorySchema(_ApiModel):
    """Item of GET /transactions/plans/history/"""

    title: str
    amount: Decimal
    start_date: Union[datetime, date]
    end_date: Union[datetime, date]
    status: Optional[str] = None

    def to_domain(self) -> PlanEnrollment:
        return PlanEnrollment(
            title=self.title,
            amount=self.amount,
            start_date=self.start_date,
            end_date=self.end_date,
            status=EnrollmentStatus.parse(self.status),
        )


class ProfitHistorySchema(_ApiModel):
    """Item of GET /transactions/profit/history/, keyed by plan title"""

    title: str = Field(alias="plan")
    daily_profit: Decimal = Decimal("0")
    total_earned: Decimal = Decimal("0")
    remaining_days: int = 0
    is_active: bool = False
    start_date: Optional[Union[datetime, date]] = None

    def to_domain(self) -> ProfitRecord:
        return ProfitRecord(
            title=self.title,
            daily_profit=self.daily_profit,
            total_earned=self.total_earned,
            remaining_days=self.remaining_days,
            is_active=self.is_active,
            start_date=self.start_date,
        )


class WalletSchema(_ApiModel):
    """Body of GET /transactions/wallet/detail/"""

    balance: Decimal = Decimal("0")
    username: Optional[str] = None
    name: Optional[str] = None

    def to_domain(self) -> WalletDetail:
        return WalletDetail(balance=self.balance, display_name=self.username or self.name)


class TransactionLogSchema(_ApiModel):
    """Item of the deposit / withdrawal history endpoints"""

    amount: Decimal
    method: str = ""
    status: str = "pending"
    created_at: Optional[datetime] = None
    transaction_id: Optional[str] = None

    def to_domain(self) -> TransactionLogEntry:
        return TransactionLogEntry(
            amount=self.amount,
            method=self.method,
            status=self.status,
            created_at=self.created_at,
            reference_id=self.transaction_id,
        )


class MessageSchema(_ApiModel):
    """Acknowledgement body of the POST endpoints"""

    message: Optional[str] = None
