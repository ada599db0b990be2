"""
Valuation bracket model.

A bracket is one configurable valuation rule for a game.  Rows coming
out of the settings table carry nullable fixed-value columns; this
module turns each row into either a :class:`FixedBracket` or a
:class:`RangedBracket` so the rest of the code never has to inspect
the nullable columns again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union


@dataclass(frozen=True)
class FixedBracket:
    """Pays exactly these amounts whatever the base value."""

    cash_value: float
    trade_value: float


@dataclass(frozen=True)
class RangedBracket:
    """Pays a percentage of the base value within an inclusive range."""

    min_value: float
    max_value: float
    cash_percentage: float
    trade_percentage: float

    def covers(self, base_value: float) -> bool:
        return self.min_value <= base_value <= self.max_value


Bracket = Union[FixedBracket, RangedBracket]


def _number(row: Dict[str, Any], field: str) -> float:
    value = row.get(field)
    if value is None or isinstance(value, bool):
        raise ValueError(f"Bracket field '{field}' is missing or not a number: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Bracket field '{field}' is not a number: {value!r}") from exc


def _percentage(row: Dict[str, Any], field: str) -> float:
    value = _number(row, field)
    if not 0 <= value <= 100:
        raise ValueError(f"Bracket field '{field}' must be between 0 and 100, got {value}")
    return value


def parse_bracket(row: Dict[str, Any]) -> Bracket:
    """Build a bracket from a settings row.

    A row is fixed when both ``fixed_cash_value`` and ``fixed_trade_value``
    are present; the range and percentage columns are then ignored.
    Otherwise the range and both percentages are required.

    Raises
    ------
    ValueError
        If the row is not a mapping or a required field is missing or
        out of bounds.
    """
    if not isinstance(row, dict):
        raise ValueError(f"Bracket row must be an object, got {type(row).__name__}")
    if row.get("fixed_cash_value") is not None and row.get("fixed_trade_value") is not None:
        cash_value = _number(row, "fixed_cash_value")
        trade_value = _number(row, "fixed_trade_value")
        if cash_value < 0 or trade_value < 0:
            raise ValueError("Fixed bracket values must not be negative")
        return FixedBracket(cash_value=cash_value, trade_value=trade_value)

    min_value = _number(row, "min_value")
    max_value = _number(row, "max_value")
    if min_value > max_value:
        raise ValueError(f"Bracket min_value {min_value} exceeds max_value {max_value}")
    return RangedBracket(
        min_value=min_value,
        max_value=max_value,
        cash_percentage=_percentage(row, "cash_percentage"),
        trade_percentage=_percentage(row, "trade_percentage"),
    )


def parse_brackets(rows: Optional[Iterable[Dict[str, Any]]]) -> List[Bracket]:
    """Parse rows in the order the store returned them."""
    return [parse_bracket(row) for row in rows or []]


def bracket_to_row(game: str, bracket: Bracket) -> Dict[str, Any]:
    """Serialise a bracket into a settings table row for ``game``."""
    if isinstance(bracket, FixedBracket):
        return {
            "game": game,
            "min_value": 0,
            "max_value": 0,
            "cash_percentage": 0,
            "trade_percentage": 0,
            "fixed_cash_value": bracket.cash_value,
            "fixed_trade_value": bracket.trade_value,
        }
    return {
        "game": game,
        "min_value": bracket.min_value,
        "max_value": bracket.max_value,
        "cash_percentage": bracket.cash_percentage,
        "trade_percentage": bracket.trade_percentage,
        "fixed_cash_value": None,
        "fixed_trade_value": None,
    }
