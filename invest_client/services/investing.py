"""Plan investment submission"""

import logging
import time
from dataclasses import dataclass

from invest_client.domain.exceptions import (
    AuthenticationError,
    BackendAPIError,
    PlanLockedError,
    SubmissionInProgressError,
    SubmissionRejectedError,
)
from invest_client.domain.models import InvestmentPlan
from invest_client.domain.wizard import SESSION_EXPIRED_MESSAGE, TRANSPORT_ERROR_MESSAGE
from invest_client.infrastructure.observability.logging import log_submission
from invest_client.infrastructure.observability.metrics import record_submission
from invest_client.services.portfolio import PortfolioService

logger = logging.getLogger(__name__)

INVEST_FLOW = "invest"


@dataclass
class InvestmentOutcome:
    success: bool
    message: str
    requires_login: bool = False


class InvestmentService:
    """Buys a plan for the current user, one request at a time"""

    def __init__(self, portfolio: PortfolioService):
        self.portfolio = portfolio
        self.gateway = portfolio.gateway
        self._busy = False

    @property
    def is_busy(self) -> bool:
        return self._busy

    async def invest(self, plan: InvestmentPlan) -> InvestmentOutcome:
        """
        Submit an investment in `plan` and refetch the portfolio on success.

        Raises:
            PlanLockedError: Plan is locked for this user (no request is sent)
            SubmissionInProgressError: Another investment is in flight
        """
        if plan.is_locked:
            raise PlanLockedError(f"Plan {plan.title} is locked")
        if self._busy:
            raise SubmissionInProgressError("An investment request is already in progress")

        self._busy = True
        start_time = time.time()
        outcome_label = "error"
        try:
            message = await self.gateway.invest(plan.id)
            outcome_label = "succeeded"

        except AuthenticationError:
            outcome_label = "auth_error"
            return InvestmentOutcome(success=False, message=SESSION_EXPIRED_MESSAGE, requires_login=True)

        except SubmissionRejectedError as e:
            # e.g. "already has an active plan", "insufficient balance"
            outcome_label = "rejected"
            return InvestmentOutcome(success=False, message=e.message)

        except BackendAPIError as e:
            outcome_label = "transport_error"
            logger.warning(f"Investment failed: {e}", extra={"plan_id": plan.id})
            return InvestmentOutcome(success=False, message=TRANSPORT_ERROR_MESSAGE)

        finally:
            self._busy = False
            record_submission(INVEST_FLOW, outcome_label)
            log_submission(
                flow=INVEST_FLOW,
                user=self.gateway.session.current_user(),
                outcome=outcome_label,
                step=1,
                duration_ms=(time.time() - start_time) * 1000,
            )

        await self.portfolio.try_refresh()
        return InvestmentOutcome(success=True, message=message)
