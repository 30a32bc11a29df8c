"""Decimal money helpers shared by upstream payload models and price quotes."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, PlainSerializer

CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert an upstream JSON number/string to Decimal without float artifacts. None/blank -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return Decimal(s)
        except InvalidOperation:
            return None
    return None


def quantize_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# Decimal in Python, JSON number on the wire (storefront widget expects numbers).
Money = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]

OptionalMoney = Annotated[
    Optional[Decimal],
    BeforeValidator(to_decimal),
    PlainSerializer(lambda v: float(v) if v is not None else None, return_type=Optional[float], when_used="json"),
]
