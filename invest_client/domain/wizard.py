"""Generic multi-step transaction wizard shared by the deposit and withdrawal flows"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Mapping, Optional, Sequence, TypeVar

from invest_client.domain.exceptions import (
    AuthenticationError,
    BackendAPIError,
    DomainException,
    InputValidationError,
    SubmissionInProgressError,
    SubmissionRejectedError,
    WizardStateError,
)
from invest_client.infrastructure.observability.logging import log_submission
from invest_client.infrastructure.observability.metrics import record_step_rejection, record_submission

logger = logging.getLogger(__name__)

StepT = TypeVar("StepT", bound=Enum)
DraftT = TypeVar("DraftT")

SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."
TRANSPORT_ERROR_MESSAGE = "Network error or API failed. Please try again."


@dataclass
class StepOutcome:
    """Result of a wizard operation, rendered inline by the current step"""

    step: int
    advanced: bool
    error: Optional[str] = None
    message: Optional[str] = None
    requires_login: bool = False
    cause: Optional[DomainException] = None


class TransactionWizard(Generic[StepT, DraftT]):
    """
    Bounded, ordered step machine over a mutable draft.

    The last entry of `steps` is the terminal success state; it is reachable
    only through submit() after the backend acknowledged the draft. Every
    other step has a validator that raises InputValidationError.

    Invariants:
    - step only grows through a passing next() or a successful submit()
    - back() moves one step down, never below 1, and keeps the draft
    - next()/back() at a boundary are no-ops, not errors
    - a failed submit() keeps the draft so the user does not retype it
    """

    def __init__(
        self,
        flow: str,
        steps: Sequence[StepT],
        validators: Mapping[StepT, Callable[[DraftT], None]],
        draft_factory: Callable[[], DraftT],
        submitter: Callable[[DraftT], Awaitable[str]],
        on_success: Optional[Callable[[], Awaitable[None]]] = None,
        user: Optional[Callable[[], str]] = None,
    ):
        if len(steps) < 2:
            raise ValueError("A wizard needs at least one input step and a success step")
        missing = [s for s in steps[:-1] if s not in validators]
        if missing:
            raise ValueError(f"No validator for steps: {missing}")

        self.flow = flow
        self.steps = tuple(steps)
        self._validators = dict(validators)
        self._draft_factory = draft_factory
        self._submitter = submitter
        self._on_success = on_success
        self._user = user or (lambda: "anonymous")

        self._index = 0
        self._busy = False
        self.draft: DraftT = draft_factory()
        self.error: Optional[str] = None
        self.cause: Optional[DomainException] = None
        self.message: Optional[str] = None

    # --- State ---

    @property
    def step(self) -> int:
        """1-based position of the cursor"""
        return self._index + 1

    @property
    def current(self) -> StepT:
        return self.steps[self._index]

    @property
    def final_input_step(self) -> StepT:
        return self.steps[-2]

    @property
    def is_complete(self) -> bool:
        return self._index == len(self.steps) - 1

    @property
    def is_busy(self) -> bool:
        """True while a submission is in flight; the UI disables its actions"""
        return self._busy

    # --- Transitions ---

    def next(self) -> StepOutcome:
        """Validate the current step and advance; stays in place on failure"""
        self._ensure_idle()
        if self.is_complete or self.current == self.final_input_step:
            return self._outcome(advanced=False)

        if not self._validate_current():
            return self._outcome(advanced=False)

        self._index += 1
        logger.debug("Wizard advanced", extra={"flow": self.flow, "step": self.step})
        return self._outcome(advanced=True)

    def back(self) -> StepOutcome:
        """Go back one step keeping entered data; not allowed from success"""
        self._ensure_idle()
        if self.is_complete or self._index == 0:
            return self._outcome(advanced=False)

        self._index -= 1
        self._clear_feedback()
        return self._outcome(advanced=False)

    async def submit(self) -> StepOutcome:
        """
        Hand the draft to the backend from the final input step.

        Raises:
            WizardStateError: Called from any other step
            SubmissionInProgressError: A submission is already in flight
        """
        self._ensure_idle()
        if self.current != self.final_input_step:
            raise WizardStateError(f"submit() is only allowed on {self.final_input_step.name}")

        if not self._validate_current():
            return self._outcome(advanced=False)

        self._busy = True
        self._clear_feedback()
        start_time = time.time()
        outcome_label = "error"
        try:
            message = await self._submitter(self.draft)
            outcome_label = "succeeded"

        except AuthenticationError as e:
            # Session is gone; the draft goes with it
            outcome_label = "auth_error"
            self._reset()
            self.error = SESSION_EXPIRED_MESSAGE
            self.cause = e
            return self._outcome(advanced=False, requires_login=True)

        except SubmissionRejectedError as e:
            outcome_label = "rejected"
            self.error = e.message
            self.cause = e
            return self._outcome(advanced=False)

        except BackendAPIError as e:
            outcome_label = "transport_error"
            logger.warning(f"Submission failed: {e}", extra={"flow": self.flow, "step": self.step})
            self.error = TRANSPORT_ERROR_MESSAGE
            self.cause = e
            return self._outcome(advanced=False)

        finally:
            self._busy = False
            record_submission(self.flow, outcome_label)
            log_submission(
                flow=self.flow,
                user=self._user(),
                outcome=outcome_label,
                step=self.step,
                duration_ms=(time.time() - start_time) * 1000,
            )

        self._index = len(self.steps) - 1
        self.draft = self._draft_factory()
        self.message = message

        if self._on_success is not None:
            await self._on_success()

        return self._outcome(advanced=True)

    def restart(self) -> StepOutcome:
        """Start a new run from the success screen"""
        if not self.is_complete:
            raise WizardStateError("restart() is only allowed after a successful submission")
        self._reset()
        return self._outcome(advanced=False)

    def cancel(self) -> StepOutcome:
        """Discard the draft; nothing exists server-side before submit() succeeds"""
        self._ensure_idle()
        if self.is_complete:
            raise WizardStateError("Nothing to cancel after a successful submission")
        self._reset()
        return self._outcome(advanced=False)

    # --- Internals ---

    def _validate_current(self) -> bool:
        validator = self._validators[self.current]
        try:
            validator(self.draft)
        except InputValidationError as e:
            self.error = e.message
            self.cause = e
            record_step_rejection(self.flow, self.current.name)
            logger.info(
                "Step validation failed",
                extra={"flow": self.flow, "step": self.step, "field": e.field},
            )
            return False

        self._clear_feedback()
        return True

    def _ensure_idle(self) -> None:
        if self._busy:
            raise SubmissionInProgressError("A submission is already in progress")

    def _reset(self) -> None:
        self._index = 0
        self.draft = self._draft_factory()
        self._clear_feedback()

    def _clear_feedback(self) -> None:
        self.error = None
        self.cause = None
        self.message = None

    def _outcome(self, advanced: bool, requires_login: bool = False) -> StepOutcome:
        return StepOutcome(
            step=self.step,
            advanced=advanced,
            error=self.error,
            message=self.message,
            requires_login=requires_login,
            cause=self.cause,
        )
