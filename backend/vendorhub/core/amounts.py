"""Fixed-point helpers for kg quantities and rupee prices"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from vendorhub.core.errors import ValidationError

# Quantities and prices are stored as Numeric(10, 2)
CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")


def to_amount(value, label: str) -> Decimal:
    """
    Round `value` to two decimal places, the precision the database keeps.

    Callers validate the rounded value, so 0.004 kg is rejected as zero
    rather than stored as 0.00.
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{label} must be a number")

    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{label} is out of range")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
