"""Amount helpers for UPI links."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

_CENTS = Decimal("0.01")


def _to_decimal(value: object) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _to_cents(value: object) -> Decimal:
    number = _to_decimal(value)
    if number is None:
        raise ValueError(f"amount {value!r} is not a finite number")
    try:
        return number.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # More digits than the decimal context can hold at two places.
        raise ValueError(f"amount {value!r} is too large") from exc


def normalize_amount(value: object) -> str:
    """Format *value* with exactly two decimals, rounding half away from zero.

    Raises ``ValueError`` when the value is not a finite number or is too
    large to represent in cents; callers are expected to check
    :func:`is_payable_amount` first.
    """

    return str(_to_cents(value))


def is_payable_amount(value: object) -> bool:
    """Return True when *value* is present, numeric and strictly positive."""

    try:
        return _to_cents(value) > 0
    except ValueError:
        return False
