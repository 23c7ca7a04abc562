"""Unit tests for deposit and withdrawal step validators and payload building"""

import pytest
from decimal import Decimal

from invest_client.domain.amounts import AmountSelector
from invest_client.domain.exceptions import AmountError, MissingFieldError, ProofError
from invest_client.domain.flows import (
    DepositStep,
    WithdrawalStep,
    build_deposit_payload,
    build_withdrawal_payload,
    check_proof,
    deposit_validators,
    new_withdrawal_draft,
    withdrawal_validators,
)
from invest_client.domain.methods import FieldName, PaymentMethod
from invest_client.domain.models import ProofAttachment, TransactionDraft

MAX_PROOF = 5 * 1024 * 1024
DEPOSIT_SELECTOR = AmountSelector(Decimal("3000"), [Decimal("3000"), Decimal("5000")])
WITHDRAWAL_SELECTOR = AmountSelector(Decimal("100"))


def _bank_draft(proof: ProofAttachment) -> TransactionDraft:
    draft = TransactionDraft()
    draft.set_amount("3000")
    draft.select_method(PaymentMethod.BANK_TRANSFER)
    draft.set_field(FieldName.BANK_NAME, "Meezan Bank")
    draft.set_field(FieldName.ACCOUNT_OWNER, " Ali Raza ")
    draft.set_field(FieldName.ACCOUNT_NUMBER, "PK36MEZN0000001123456702")
    draft.set_reference("TXN-001")
    draft.attach_proof(proof)
    return draft


def test_check_proof_size_cap(png_proof):
    """Exactly 5MB passes, one byte more fails"""
    at_cap = ProofAttachment("big.jpg", "image/jpeg", b"\0" * MAX_PROOF)
    over_cap = ProofAttachment("bigger.jpg", "image/jpeg", b"\0" * (MAX_PROOF + 1))

    assert check_proof(at_cap, MAX_PROOF) is at_cap
    with pytest.raises(ProofError, match="less than 5MB"):
        check_proof(over_cap, MAX_PROOF)


@pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", ""])
def test_check_proof_requires_image(content_type):
    with pytest.raises(ProofError, match="image"):
        check_proof(ProofAttachment("receipt", content_type, b"data"), MAX_PROOF)


def test_check_proof_missing():
    with pytest.raises(ProofError):
        check_proof(None, MAX_PROOF)
    with pytest.raises(ProofError):
        check_proof(ProofAttachment("empty.png", "image/png", b""), MAX_PROOF)


def test_deposit_validators_per_step(png_proof):
    validators = deposit_validators(DEPOSIT_SELECTOR, MAX_PROOF)
    draft = TransactionDraft()

    with pytest.raises(AmountError):
        validators[DepositStep.AMOUNT](draft)
    draft.set_amount("3000")
    validators[DepositStep.AMOUNT](draft)

    with pytest.raises(MissingFieldError):
        validators[DepositStep.METHOD](draft)
    draft.select_method(PaymentMethod.MOBILE_WALLET_A)
    validators[DepositStep.METHOD](draft)

    draft.set_field(FieldName.ACCOUNT_OWNER, "Ali")
    draft.set_field(FieldName.PHONE_NUMBER, "03001234567")
    with pytest.raises(MissingFieldError) as exc_info:
        validators[DepositStep.PROOF_AND_DETAILS](draft)
    assert exc_info.value.field == "transaction_id"

    draft.set_reference("TXN-9")
    with pytest.raises(ProofError):
        validators[DepositStep.PROOF_AND_DETAILS](draft)

    draft.attach_proof(png_proof)
    validators[DepositStep.PROOF_AND_DETAILS](draft)


def test_build_deposit_payload_bank_transfer(png_proof):
    payload = build_deposit_payload(_bank_draft(png_proof), DEPOSIT_SELECTOR, MAX_PROOF)

    assert payload.as_form() == {
        "amount": "3000",
        "method": "BankTransfer",
        "transaction_id": "TXN-001",
        "account_owner": "Ali Raza",
        "bank_account": "PK36MEZN0000001123456702",
        "bank_name": "Meezan Bank",
    }
    filename, content, content_type = payload.as_files()["screenshot"]
    assert (filename, content_type) == ("receipt.png", "image/png")
    assert content == png_proof.content


def test_build_deposit_payload_wallet_has_no_bank_name(png_proof):
    draft = TransactionDraft()
    draft.set_amount(5000)
    draft.select_method(PaymentMethod.MOBILE_WALLET_B)
    draft.set_field(FieldName.ACCOUNT_OWNER, "Sara")
    draft.set_field(FieldName.PHONE_NUMBER, "03121234567")
    draft.set_reference("EP-77")
    draft.attach_proof(png_proof)

    form = build_deposit_payload(draft, DEPOSIT_SELECTOR, MAX_PROOF).as_form()

    assert "bank_name" not in form
    assert form["method"] == "EasyPaisa"
    assert form["bank_account"] == "03121234567"


def test_withdrawal_draft_starts_on_bank_transfer():
    assert new_withdrawal_draft().method is PaymentMethod.BANK_TRANSFER


def test_withdrawal_details_requires_minimum_and_fields():
    validators = withdrawal_validators(WITHDRAWAL_SELECTOR)
    draft = new_withdrawal_draft()
    validators[WithdrawalStep.METHOD](draft)

    draft.set_amount("99")
    with pytest.raises(AmountError):
        validators[WithdrawalStep.DETAILS](draft)

    draft.set_amount("100")
    with pytest.raises(MissingFieldError):
        validators[WithdrawalStep.DETAILS](draft)

    draft.set_field(FieldName.BANK_NAME, "HBL")
    draft.set_field(FieldName.ACCOUNT_OWNER, "Ali")
    draft.set_field(FieldName.ACCOUNT_NUMBER, "PKR1234567890")
    validators[WithdrawalStep.DETAILS](draft)


def test_build_withdrawal_payload_only_sends_bank_name_for_bank_transfer():
    draft = new_withdrawal_draft()
    draft.select_method(PaymentMethod.MOBILE_WALLET_A)
    draft.set_amount("250.50")
    draft.set_field(FieldName.ACCOUNT_OWNER, "Ali")
    draft.set_field(FieldName.PHONE_NUMBER, "03001234567")

    body = build_withdrawal_payload(draft, WITHDRAWAL_SELECTOR).as_json()

    assert body == {
        "amount": "250.50",
        "method": "JazzCash",
        "account_owner": "Ali",
        "bank_account": "03001234567",
    }
