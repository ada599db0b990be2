"""
Trade-in valuation logic.

This module turns a card's base market value into a cash offer and a
trade-credit offer using the brackets configured for its game.  A fixed
bracket takes priority over ranged brackets; otherwise the first ranged
bracket covering the base value applies.  When nothing matches, or the
settings cannot be read, default percentages are used and the result is
flagged as a fallback.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .brackets import Bracket, FixedBracket, RangedBracket
from .cache import SettingsCache
from .fallback import (
    FallbackReason,
    build_error_result,
    default_values,
    percent_of,
    round2,
)
from .fallback_logger import FallbackLogger
from .result import CalculationResult

logger = logging.getLogger(__name__)


def select_bracket(brackets: List[Bracket], base_value: float) -> Optional[Bracket]:
    """Pick the bracket that applies to ``base_value``.

    The first fixed bracket wins outright.  Failing that, the first
    ranged bracket whose inclusive range covers ``base_value`` is used,
    in the order the store returned them.
    """
    for bracket in brackets:
        if isinstance(bracket, FixedBracket):
            return bracket
    for bracket in brackets:
        if isinstance(bracket, RangedBracket) and bracket.covers(base_value):
            return bracket
    return None


class ValuationEngine:
    """Compute cash and trade values for a game and base value."""

    def __init__(self, cache: SettingsCache, fallback_logger: FallbackLogger) -> None:
        self.cache = cache
        self.fallback_logger = fallback_logger

    def calculate(self, game: str, base_value: float, user_id: Optional[str] = None) -> CalculationResult:
        """Calculate the cash and trade offer.

        Parameters
        ----------
        game: str
            Normalised game identifier.
        base_value: float
            Market value of the card.  Zero short-circuits to a zero offer.
        user_id: str, optional
            Recorded with any fallback log entry.

        Returns
        -------
        CalculationResult
            Values rounded to cents.  Never raises: failures reading or
            interpreting the settings produce a ``DATABASE_ERROR`` fallback.
        """
        if base_value == 0:
            return CalculationResult(cash_value=0, trade_value=0, used_fallback=False)

        try:
            return self._calculate(game, base_value, user_id)
        except Exception as exc:
            logger.error("Error in calculation logic for %s: %s", game, exc)
            self._log_fallback(game, base_value, f"Database error: {exc}", user_id)
            return build_error_result(base_value, f"Calculation error: {exc}", FallbackReason.DATABASE_ERROR)

    def _calculate(self, game: str, base_value: float, user_id: Optional[str]) -> CalculationResult:
        brackets = self.cache.get(game)
        cash_value, trade_value = default_values(base_value)
        fallback_reason: Optional[FallbackReason] = None

        if brackets:
            logger.debug("Found %d setting(s) for game %s", len(brackets), game)
            bracket = select_bracket(brackets, base_value)
            if isinstance(bracket, FixedBracket):
                cash_value, trade_value = bracket.cash_value, bracket.trade_value
                method = "fixed"
            elif isinstance(bracket, RangedBracket):
                cash_value = percent_of(base_value, bracket.cash_percentage)
                trade_value = percent_of(base_value, bracket.trade_percentage)
                method = "percentage"
            else:
                fallback_reason = FallbackReason.NO_PRICE_RANGE_MATCH
                method = "default"
                self._log_fallback(
                    game,
                    base_value,
                    f"No price range match found for game {game} and value {base_value}",
                    user_id,
                )
        else:
            fallback_reason = FallbackReason.NO_SETTINGS_FOUND
            method = "default"
            self._log_fallback(game, base_value, f"No settings found for game {game}", user_id)

        result = CalculationResult(
            cash_value=round2(cash_value),
            trade_value=round2(trade_value),
            used_fallback=fallback_reason is not None,
            fallback_reason=fallback_reason.value if fallback_reason else None,
        )
        logger.info(
            "Calculated %s at %s: cash=%.2f trade=%.2f method=%s fallback=%s",
            game,
            base_value,
            result.cash_value,
            result.trade_value,
            method,
            result.used_fallback,
        )
        return result

    def _log_fallback(self, game: str, base_value: float, reason: str, user_id: Optional[str]) -> None:
        # The result must not depend on whether the audit write can be queued.
        try:
            self.fallback_logger.log_event(game, base_value, reason, user_id)
        except Exception as exc:
            logger.error("Failed to log fallback event: %s", exc)
