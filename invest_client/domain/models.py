"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from invest_client.domain.methods import FieldName, PaymentMethod, carry_over_fields

RawAmount = Union[str, int, float, Decimal, None]
DateLike = Union[date, datetime]


@dataclass
class ProofAttachment:
    """Payment screenshot picked by the user"""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class TransactionDraft:
    """In-progress user input for one wizard run, never persisted"""

    amount: RawAmount = None
    method: Optional[PaymentMethod] = None
    method_fields: Dict[FieldName, str] = field(default_factory=dict)
    proof: Optional[ProofAttachment] = None
    reference_id: Optional[str] = None

    def set_amount(self, amount: RawAmount) -> None:
        self.amount = amount

    def select_method(self, method: PaymentMethod) -> None:
        """Switch channel, dropping fields that belong to the previous one"""
        self.method_fields = carry_over_fields(self.method_fields, self.method, method)
        self.method = method

    def set_field(self, name: FieldName, value: str) -> None:
        self.method_fields[FieldName(name)] = value

    def attach_proof(self, proof: Optional[ProofAttachment]) -> None:
        self.proof = proof

    def set_reference(self, reference_id: Optional[str]) -> None:
        self.reference_id = reference_id

    def is_empty(self) -> bool:
        return (
            self.amount in (None, "")
            and not self.method_fields
            and self.proof is None
            and not self.reference_id
        )


@dataclass
class InvestmentPlan:
    """Plan template offered by the platform"""

    id: int
    title: str
    amount: Decimal
    daily_profit: Decimal
    duration_days: Optional[int]
    total_profit: Decimal
    is_locked: bool = False


class EnrollmentStatus(str, Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    COMPLETED = "Completed"
    PENDING = "Pending"

    @classmethod
    def parse(cls, value: Optional[str]) -> "EnrollmentStatus":
        """Case-insensitive; anything unrecognised is shown as pending"""
        normalized = (value or "").strip().lower()
        for status in cls:
            if status.value.lower() == normalized:
                return status
        return cls.PENDING


@dataclass
class PlanEnrollment:
    """A user's instance of a plan; status is owned by the server"""

    title: str
    amount: Decimal
    start_date: DateLike
    end_date: DateLike
    status: EnrollmentStatus


@dataclass
class ProfitRecord:
    """Earnings figures for one enrollment, keyed by plan title"""

    title: str
    daily_profit: Decimal
    total_earned: Decimal
    remaining_days: int
    is_active: bool
    start_date: Optional[DateLike] = None


@dataclass
class PlanProgress:
    """Derived time progress of an enrollment"""

    percent_complete: float
    days_remaining: int
    total_days: int
    elapsed_days: int


@dataclass
class PlanSummary:
    """One active enrollment merged with its profit record"""

    title: str
    amount: Decimal
    start_date: DateLike
    end_date: DateLike
    status: EnrollmentStatus
    daily_profit: Decimal
    total_earned: Decimal
    remaining_days: int
    is_active_profit: bool
    has_profit_record: bool
    progress: PlanProgress


@dataclass
class PortfolioSummary:
    """Output of profit aggregation across all enrollments"""

    per_plan: List[PlanSummary]
    total_earned_across_active: Decimal
    total_invested: Decimal


@dataclass
class WalletDetail:
    balance: Decimal
    display_name: Optional[str] = None


@dataclass
class TransactionLogEntry:
    """Row of the deposit or withdrawal history"""

    amount: Decimal
    method: str
    status: str
    created_at: Optional[datetime] = None
    reference_id: Optional[str] = None


@dataclass
class PlanHistoryStats:
    total_plans: int
    active_plans: int
    expired_plans: int
    completed_plans: int
    total_investment: Decimal


@dataclass
class TransactionLogSummary:
    count: int
    total_amount: Decimal
    approved: int
    pending: int
    rejected: int
