"""Transaction amount validation against a minimum and a preset list"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Tuple

from invest_client.domain.exceptions import AmountError, AmountErrorCode
from invest_client.domain.models import RawAmount


@dataclass(frozen=True)
class ValidAmount:
    value: Decimal
    from_preset: bool = False


def parse_amount(raw: RawAmount) -> Decimal:
    """
    Parse user input into a positive Decimal.

    Raises:
        AmountError: EMPTY, NOT_A_NUMBER or NOT_POSITIVE
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise AmountError(AmountErrorCode.EMPTY, "Amount is required")

    # bool is an int subclass; a checkbox value is not an amount
    if isinstance(raw, bool):
        raise AmountError(AmountErrorCode.NOT_A_NUMBER, "Amount must be a number")

    try:
        value = Decimal(raw.strip()) if isinstance(raw, str) else Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        raise AmountError(AmountErrorCode.NOT_A_NUMBER, "Amount must be a number")

    if not value.is_finite():
        raise AmountError(AmountErrorCode.NOT_A_NUMBER, "Amount must be a number")

    if value <= 0:
        raise AmountError(AmountErrorCode.NOT_POSITIVE, "Amount must be greater than 0")

    return value


def validate_amount(
    raw: RawAmount,
    minimum: Decimal,
    presets: Iterable[Decimal] = (),
) -> ValidAmount:
    """
    Validate a preset or free-typed amount. No upper bound: balance
    sufficiency is decided by the backend.

    Raises:
        AmountError: Input is empty, malformed, non-positive or below minimum
    """
    value = parse_amount(raw)

    if value < minimum:
        raise AmountError(
            AmountErrorCode.BELOW_MINIMUM,
            f"Minimum amount is {minimum:,}",
        )

    return ValidAmount(value=value, from_preset=value in set(presets))


class AmountSelector:
    """Amount rules for one flow (deposit or withdrawal)"""

    def __init__(self, minimum: Decimal, presets: Iterable[Decimal] = ()):
        self.minimum = Decimal(minimum)
        self.presets: Tuple[Decimal, ...] = tuple(Decimal(p) for p in presets)

    def validate(self, raw: RawAmount) -> ValidAmount:
        return validate_amount(raw, self.minimum, self.presets)
