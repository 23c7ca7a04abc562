"""Deposit and withdrawal flow definitions: steps, per-step validators, payloads"""

from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any, Callable, Dict, Optional

from invest_client.domain.amounts import AmountSelector
from invest_client.domain.exceptions import MissingFieldError, ProofError
from invest_client.domain.methods import (
    FieldName,
    PaymentMethod,
    account_identifier,
    validate_method_fields,
)
from invest_client.domain.models import ProofAttachment, TransactionDraft

DEPOSIT_FLOW = "deposit"
WITHDRAWAL_FLOW = "withdrawal"


class DepositStep(IntEnum):
    AMOUNT = 1
    METHOD = 2
    PROOF_AND_DETAILS = 3
    SUCCESS = 4


class WithdrawalStep(IntEnum):
    METHOD = 1
    DETAILS = 2
    SUCCESS = 3


@dataclass
class DepositPayload:
    """Normalized multipart body for POST /transactions/deposit/"""

    amount: Decimal
    method: PaymentMethod
    transaction_id: str
    account_owner: str
    bank_account: str
    screenshot: ProofAttachment
    bank_name: Optional[str] = None

    def as_form(self) -> Dict[str, str]:
        data = {
            "amount": format(self.amount, "f"),
            "method": self.method.value,
            "transaction_id": self.transaction_id,
            "account_owner": self.account_owner,
            "bank_account": self.bank_account,
        }
        if self.bank_name is not None:
            data["bank_name"] = self.bank_name
        return data

    def as_files(self) -> Dict[str, Any]:
        proof = self.screenshot
        return {"screenshot": (proof.filename, proof.content, proof.content_type)}


@dataclass
class WithdrawalPayload:
    """Normalized JSON body for POST /transactions/withdraw/"""

    amount: Decimal
    method: PaymentMethod
    account_owner: str
    bank_account: str
    bank_name: Optional[str] = None

    def as_json(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "amount": format(self.amount, "f"),
            "method": self.method.value,
            "account_owner": self.account_owner,
            "bank_account": self.bank_account,
        }
        # bank_name only travels with bank transfers
        if self.bank_name is not None:
            body["bank_name"] = self.bank_name
        return body


def check_proof(proof: Optional[ProofAttachment], max_bytes: int) -> ProofAttachment:
    """
    Raises:
        ProofError: Missing, larger than max_bytes, or not an image
    """
    if proof is None or not proof.content:
        raise ProofError("Payment screenshot is required")
    if proof.size > max_bytes:
        raise ProofError(f"Image size should be less than {max_bytes // (1024 * 1024)}MB")
    if not (proof.content_type or "").lower().startswith("image/"):
        raise ProofError("Please upload an image file")
    return proof


def require_method(draft: TransactionDraft) -> PaymentMethod:
    if draft.method is None:
        raise MissingFieldError("Select a payment method", field="method")
    return draft.method


def require_reference(draft: TransactionDraft) -> str:
    reference = (draft.reference_id or "").strip()
    if not reference:
        raise MissingFieldError("Transaction ID is required", field="transaction_id")
    return reference


def _bank_name(method: PaymentMethod, draft: TransactionDraft) -> Optional[str]:
    if method is PaymentMethod.BANK_TRANSFER:
        return draft.method_fields[FieldName.BANK_NAME].strip()
    return None


# --- Deposit ---


def deposit_validators(
    selector: AmountSelector,
    max_proof_bytes: int,
) -> Dict[DepositStep, Callable[[TransactionDraft], None]]:
    def amount_step(draft: TransactionDraft) -> None:
        selector.validate(draft.amount)

    def method_step(draft: TransactionDraft) -> None:
        require_method(draft)

    def proof_and_details_step(draft: TransactionDraft) -> None:
        method = require_method(draft)
        validate_method_fields(method, draft.method_fields)
        require_reference(draft)
        check_proof(draft.proof, max_proof_bytes)

    return {
        DepositStep.AMOUNT: amount_step,
        DepositStep.METHOD: method_step,
        DepositStep.PROOF_AND_DETAILS: proof_and_details_step,
    }


def build_deposit_payload(
    draft: TransactionDraft,
    selector: AmountSelector,
    max_proof_bytes: int,
) -> DepositPayload:
    """Re-validate the whole draft and normalize it for the backend"""
    amount = selector.validate(draft.amount).value
    method = require_method(draft)
    validate_method_fields(method, draft.method_fields)

    return DepositPayload(
        amount=amount,
        method=method,
        transaction_id=require_reference(draft),
        account_owner=draft.method_fields[FieldName.ACCOUNT_OWNER].strip(),
        bank_account=account_identifier(method, draft.method_fields),
        screenshot=check_proof(draft.proof, max_proof_bytes),
        bank_name=_bank_name(method, draft),
    )


def new_deposit_draft() -> TransactionDraft:
    return TransactionDraft()


# --- Withdrawal ---


def withdrawal_validators(
    selector: AmountSelector,
) -> Dict[WithdrawalStep, Callable[[TransactionDraft], None]]:
    def method_step(draft: TransactionDraft) -> None:
        require_method(draft)

    def details_step(draft: TransactionDraft) -> None:
        selector.validate(draft.amount)
        validate_method_fields(require_method(draft), draft.method_fields)

    return {
        WithdrawalStep.METHOD: method_step,
        WithdrawalStep.DETAILS: details_step,
    }


def build_withdrawal_payload(draft: TransactionDraft, selector: AmountSelector) -> WithdrawalPayload:
    amount = selector.validate(draft.amount).value
    method = require_method(draft)
    validate_method_fields(method, draft.method_fields)

    return WithdrawalPayload(
        amount=amount,
        method=method,
        account_owner=draft.method_fields[FieldName.ACCOUNT_OWNER].strip(),
        bank_account=account_identifier(method, draft.method_fields),
        bank_name=_bank_name(method, draft),
    )


def new_withdrawal_draft() -> TransactionDraft:
    """Withdrawals start with bank transfer preselected"""
    return TransactionDraft(method=PaymentMethod.BANK_TRANSFER)
