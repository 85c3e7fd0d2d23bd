from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ipro.domain.errors import ValidationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_amount(value: object) -> Decimal:
    """Convert a raw numeric value to an exact Decimal.

    Floats go through their shortest repr so 0.18 stays 0.18.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Amount must be numeric. Received: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip().replace(",", ""))
        except InvalidOperation as e:
            raise ValidationError(f"Amount must be numeric. Received: {value!r}") from e
    else:
        raise ValidationError(f"Amount must be numeric. Received: {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"Amount must be finite. Received: {value!r}")
    return amount


def quantize_amount(value: Decimal, minor_digits: int = 0) -> Decimal:
    exp = Decimal(1).scaleb(-int(minor_digits))
    return value.quantize(exp, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | int, currency: str = "RWF", minor_digits: int = 0) -> str:
    value = quantize_amount(to_amount(amount), minor_digits)
    sign = "-" if value < 0 else ""
    return f"{sign}{currency} {abs(value):,.{int(minor_digits)}f}"
