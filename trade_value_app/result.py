"""Calculation result returned by the valuation engine and the API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CalculationResult:
    """Cash and trade offer for one card, plus how it was reached."""

    cash_value: float
    trade_value: float
    used_fallback: bool = False
    fallback_reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the camelCase JSON body the UI expects.

        ``fallbackReason`` is only present for fallback results and
        ``error`` only when a message was attached.
        """
        payload: Dict[str, Any] = {
            "cashValue": self.cash_value,
            "tradeValue": self.trade_value,
            "usedFallback": self.used_fallback,
        }
        if self.used_fallback and self.fallback_reason:
            payload["fallbackReason"] = self.fallback_reason
        if self.error:
            payload["error"] = self.error
        return payload
