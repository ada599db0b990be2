"""
Fallback reasons, default payout percentages and the error responder.

Whenever a normal bracket match is not possible the service still
answers with default-percentage values.  This module holds the reason
codes attached to such answers, the canonical user-facing messages,
and the cent rounding shared by every payout calculation.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from enum import Enum
from typing import Dict, Tuple, Union

from .result import CalculationResult

DEFAULT_FALLBACK_CASH_PERCENTAGE = 35
DEFAULT_FALLBACK_TRADE_PERCENTAGE = 50

_CENTS = Decimal("0.01")

# Wide enough for every finite float plus cents, so quantize never overflows
_MONEY_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


class FallbackReason(str, Enum):
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INVALID_INPUT = "INVALID_INPUT"
    NO_SETTINGS_FOUND = "NO_SETTINGS_FOUND"
    NO_PRICE_RANGE_MATCH = "NO_PRICE_RANGE_MATCH"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    # Only used by display layers
    CALCULATION_FAILED = "CALCULATION_FAILED"
    API_ERROR = "API_ERROR"


ERROR_MESSAGES: Dict[FallbackReason, str] = {
    FallbackReason.CALCULATION_FAILED: "Trade value calculation failed. Using default values.",
    FallbackReason.NO_SETTINGS_FOUND: "No trade settings found for this game. Using default values.",
    FallbackReason.NO_PRICE_RANGE_MATCH: "No price range found for this value. Using default values.",
    FallbackReason.DATABASE_ERROR: "Database error occurred. Using default values.",
}


def _to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() gives the shortest repr, so 1.39 stays 1.39 rather than 1.3899999...
    return Decimal(str(value))


def percent_of(base_value: Union[int, float], percentage: Union[int, float]) -> Decimal:
    """Return ``base_value * percentage / 100`` without binary float error."""
    with localcontext(_MONEY_CONTEXT):
        return _to_decimal(base_value) * _to_decimal(percentage) / 100


def round2(value: Union[int, float, Decimal]) -> float:
    """Round half-up to exactly two decimal places.

    >>> round2(percent_of(1.39, 45))
    0.63
    """
    with localcontext(_MONEY_CONTEXT):
        return float(_to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def default_values(base_value: float) -> Tuple[Decimal, Decimal]:
    """Cash and trade values at the default fallback percentages, unrounded."""
    return (
        percent_of(base_value, DEFAULT_FALLBACK_CASH_PERCENTAGE),
        percent_of(base_value, DEFAULT_FALLBACK_TRADE_PERCENTAGE),
    )


def build_error_result(
    base_value: float, error_message: str, reason: Union[FallbackReason, str]
) -> CalculationResult:
    """Build a fallback result carrying an error message.

    The message is the canonical one for ``reason`` when the reason has
    an entry in :data:`ERROR_MESSAGES`; otherwise ``error_message`` is
    passed through unchanged.
    """
    try:
        reason = FallbackReason(reason)
    except ValueError:
        pass
    cash_value, trade_value = default_values(base_value)
    return CalculationResult(
        cash_value=round2(cash_value),
        trade_value=round2(trade_value),
        used_fallback=True,
        fallback_reason=reason.value if isinstance(reason, FallbackReason) else str(reason),
        error=ERROR_MESSAGES.get(reason, error_message),
    )
