"""Wizard factories binding the flow definitions to the backend gateway"""

from typing import Awaitable, Callable, Optional

from invest_client.config import Settings, settings as default_settings
from invest_client.domain.amounts import AmountSelector
from invest_client.domain.flows import (
    DEPOSIT_FLOW,
    WITHDRAWAL_FLOW,
    DepositStep,
    WithdrawalStep,
    build_deposit_payload,
    build_withdrawal_payload,
    deposit_validators,
    new_deposit_draft,
    new_withdrawal_draft,
    withdrawal_validators,
)
from invest_client.domain.models import TransactionDraft
from invest_client.domain.wizard import TransactionWizard
from invest_client.infrastructure.clients.backend import BackendGateway

DepositWizard = TransactionWizard[DepositStep, TransactionDraft]
WithdrawalWizard = TransactionWizard[WithdrawalStep, TransactionDraft]


def deposit_amount_selector(settings: Settings) -> AmountSelector:
    return AmountSelector(settings.deposit_minimum, settings.deposit_presets)


def withdrawal_amount_selector(settings: Settings) -> AmountSelector:
    return AmountSelector(settings.withdrawal_minimum)


def create_deposit_wizard(
    gateway: BackendGateway,
    settings: Optional[Settings] = None,
    on_success: Optional[Callable[[], Awaitable[None]]] = None,
) -> DepositWizard:
    """Amount -> Method -> ProofAndDetails -> Success"""
    config = settings or default_settings
    selector = deposit_amount_selector(config)

    async def submit(draft: TransactionDraft) -> str:
        payload = build_deposit_payload(draft, selector, config.max_proof_bytes)
        return await gateway.submit_deposit(payload)

    return TransactionWizard(
        flow=DEPOSIT_FLOW,
        steps=list(DepositStep),
        validators=deposit_validators(selector, config.max_proof_bytes),
        draft_factory=new_deposit_draft,
        submitter=submit,
        on_success=on_success,
        user=gateway.session.current_user,
    )


def create_withdrawal_wizard(
    gateway: BackendGateway,
    settings: Optional[Settings] = None,
    on_success: Optional[Callable[[], Awaitable[None]]] = None,
) -> WithdrawalWizard:
    """Method -> Details -> Success"""
    config = settings or default_settings
    selector = withdrawal_amount_selector(config)

    async def submit(draft: TransactionDraft) -> str:
        return await gateway.submit_withdrawal(build_withdrawal_payload(draft, selector))

    return TransactionWizard(
        flow=WITHDRAWAL_FLOW,
        steps=list(WithdrawalStep),
        validators=withdrawal_validators(selector),
        draft_factory=new_withdrawal_draft,
        submitter=submit,
        on_success=on_success,
        user=gateway.session.current_user,
    )
