"""Payment and payout channels and the form fields each one requires"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional

from invest_client.domain.exceptions import InvalidFieldError, MissingFieldError


class PaymentMethod(str, Enum):
    """Channel used to move money in or out; values are the backend's wire names"""

    BANK_TRANSFER = "BankTransfer"
    MOBILE_WALLET_A = "JazzCash"
    MOBILE_WALLET_B = "EasyPaisa"


class FieldName(str, Enum):
    BANK_NAME = "bank_name"
    ACCOUNT_OWNER = "account_owner"
    ACCOUNT_NUMBER = "account_number"
    PHONE_NUMBER = "phone_number"


@dataclass(frozen=True)
class MethodSpec:
    """Catalog entry for one channel"""

    method: PaymentMethod
    label: str
    required_fields: FrozenSet[FieldName]
    account_field: FieldName  # sent to the backend as bank_account


@dataclass(frozen=True)
class DepositInstructions:
    """Platform account a deposit has to be paid into"""

    method: PaymentMethod
    account_title: str
    account_identifier: str
    bank_name: Optional[str] = None


_CATALOG: Dict[PaymentMethod, MethodSpec] = {
    PaymentMethod.BANK_TRANSFER: MethodSpec(
        method=PaymentMethod.BANK_TRANSFER,
        label="Bank Transfer",
        required_fields=frozenset(
            {FieldName.BANK_NAME, FieldName.ACCOUNT_OWNER, FieldName.ACCOUNT_NUMBER}
        ),
        account_field=FieldName.ACCOUNT_NUMBER,
    ),
    PaymentMethod.MOBILE_WALLET_A: MethodSpec(
        method=PaymentMethod.MOBILE_WALLET_A,
        label="JazzCash",
        required_fields=frozenset({FieldName.ACCOUNT_OWNER, FieldName.PHONE_NUMBER}),
        account_field=FieldName.PHONE_NUMBER,
    ),
    PaymentMethod.MOBILE_WALLET_B: MethodSpec(
        method=PaymentMethod.MOBILE_WALLET_B,
        label="EasyPaisa",
        required_fields=frozenset({FieldName.ACCOUNT_OWNER, FieldName.PHONE_NUMBER}),
        account_field=FieldName.PHONE_NUMBER,
    ),
}

# Fields that describe the account holder rather than the channel
COMMON_FIELDS: FrozenSet[FieldName] = frozenset.intersection(
    *(spec.required_fields for spec in _CATALOG.values())
)

_FIELD_LABELS = {
    FieldName.BANK_NAME: "Bank name",
    FieldName.ACCOUNT_OWNER: "Account holder name",
    FieldName.ACCOUNT_NUMBER: "Bank account / IBAN",
    FieldName.PHONE_NUMBER: "Phone number",
}

_PHONE_RE = re.compile(r"^\+?[0-9][0-9 \-]*[0-9]$")


def list_methods() -> List[MethodSpec]:
    """All channels in display order"""
    return list(_CATALOG.values())


def get_method_spec(method: PaymentMethod) -> MethodSpec:
    return _CATALOG[method]


def parse_method(value: str) -> PaymentMethod:
    """Resolve a wire or display name, case-insensitively ("Easypaisa" included)"""
    normalized = value.strip().lower().replace(" ", "")
    for method in PaymentMethod:
        if normalized in (method.value.lower(), method.name.lower()):
            return method
    raise InvalidFieldError(f"Unknown payment method: {value}", field="method")


def fields_required_for(method: PaymentMethod) -> FrozenSet[FieldName]:
    return _CATALOG[method].required_fields


def field_label(field: FieldName) -> str:
    return _FIELD_LABELS[field]


def carry_over_fields(
    fields: Mapping[FieldName, str],
    previous: Optional[PaymentMethod],
    new: PaymentMethod,
) -> Dict[FieldName, str]:
    """
    Fields that survive a switch from `previous` to `new`.

    Re-selecting the same method keeps everything. A real switch keeps only
    account-holder fields that the new method also requires, so no channel
    specific value (bank, IBAN, wallet number) leaks into the other channel.
    """
    if previous == new:
        return dict(fields)

    keep = COMMON_FIELDS & fields_required_for(new)
    return {name: value for name, value in fields.items() if name in keep}


def missing_fields(method: PaymentMethod, fields: Mapping[FieldName, str]) -> List[FieldName]:
    """Required fields that are absent or blank, in a stable order"""
    required = fields_required_for(method)
    return [
        name
        for name in FieldName
        if name in required and not (fields.get(name) or "").strip()
    ]


def validate_method_fields(method: PaymentMethod, fields: Mapping[FieldName, str]) -> None:
    """
    Raises:
        MissingFieldError: A required field is blank
        InvalidFieldError: A wallet phone number is malformed
    """
    missing = missing_fields(method, fields)
    if missing:
        first = missing[0]
        raise MissingFieldError(f"{field_label(first)} is required", field=first.value)

    if FieldName.PHONE_NUMBER in fields_required_for(method):
        phone = fields[FieldName.PHONE_NUMBER].strip()
        digits = sum(ch.isdigit() for ch in phone)
        if not _PHONE_RE.match(phone) or not 10 <= digits <= 15:
            raise InvalidFieldError(
                "Enter a valid phone number, e.g. 03XXXXXXXXX",
                field=FieldName.PHONE_NUMBER.value,
            )


def account_identifier(method: PaymentMethod, fields: Mapping[FieldName, str]) -> str:
    """Value the backend expects in bank_account for this channel"""
    return (fields.get(_CATALOG[method].account_field) or "").strip()


def deposit_instructions(method: PaymentMethod, settings) -> DepositInstructions:
    """Where the user should send money before uploading the payment proof"""
    if method is PaymentMethod.BANK_TRANSFER:
        return DepositInstructions(
            method=method,
            account_title=settings.receiving_account_name,
            account_identifier=settings.receiving_bank_account,
            bank_name=settings.receiving_bank_name,
        )
    if method is PaymentMethod.MOBILE_WALLET_A:
        number = settings.receiving_jazzcash_number
    else:
        number = settings.receiving_easypaisa_number
    return DepositInstructions(
        method=method,
        account_title=settings.receiving_account_name,
        account_identifier=number,
    )
