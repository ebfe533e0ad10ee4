"""
garage_engines.valuation.weighted_average -- Weighted-average cost valuation.

Responsibility:
    Derive a part's average purchase cost from its purchase history and
    value current stock at that cost.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import garage_kernel domain values and db.types rounding.

Invariants enforced:
    - average_cost = total_value / total_quantity when total_quantity
      exceeds epsilon, otherwise the part's standard cost.  Rounded to 4
      places (ROUND_HALF_UP) and clamped to >= 0.
    - weighted_value = round(stock_quantity * average_cost, 2).  The
      identity holds exactly for every row, so reports can be re-derived.
    - Never raises on data: negative or missing inputs clamp to zero.

Usage:
    from garage_engines.valuation import WeightedAverageCalculator

    result = WeightedAverageCalculator().calculate(
        history=history,
        stock_quantity=Decimal("3"),
        standard_cost=Decimal("95"),
    )
    result.average_cost    # Decimal("106.6667")
    result.weighted_value  # Decimal("320.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from garage_engines.tracer import traced_engine
from garage_kernel.db.types import (
    COST_DECIMAL_PLACES,
    MONEY_DECIMAL_PLACES,
    ZERO,
    round_cost,
    round_money,
)
from garage_kernel.domain.lots import PurchaseHistory
from garage_kernel.logging_config import get_logger

logger = get_logger("engines.weighted_average")

DEFAULT_COST_EPSILON = Decimal("0.0001")


@dataclass(frozen=True)
class WeightedAverageResult:
    """Average unit cost and the stock value it implies."""

    average_cost: Decimal
    weighted_value: Decimal
    used_fallback: bool


class WeightedAverageCalculator:
    """
    Pure function calculator for weighted-average cost.

    Contract:
        No I/O, no database access, fully deterministic.
    Non-goals:
        - Does not decide which lots count; the caller passes a history
          already cut off at the report date.
    """

    def __init__(
        self,
        cost_epsilon: Decimal = DEFAULT_COST_EPSILON,
        cost_decimal_places: int = COST_DECIMAL_PLACES,
        money_decimal_places: int = MONEY_DECIMAL_PLACES,
    ):
        self.cost_epsilon = cost_epsilon
        self.cost_decimal_places = cost_decimal_places
        self.money_decimal_places = money_decimal_places

    def average_cost(
        self,
        total_quantity: Decimal,
        total_value: Decimal,
        standard_cost: Decimal,
    ) -> Decimal:
        """
        Average unit cost, falling back to the standard cost.

        Postconditions:
            Result is >= 0 and carries ``cost_decimal_places`` places.
        """
        if total_quantity > self.cost_epsilon:
            raw = total_value / total_quantity
        else:
            raw = standard_cost
        return max(ZERO, round_cost(raw, self.cost_decimal_places))

    def weighted_value(self, stock_quantity: Decimal, average_cost: Decimal) -> Decimal:
        """Stock valued at the average cost, rounded to money places."""
        return round_money(max(ZERO, stock_quantity) * average_cost, self.money_decimal_places)

    @traced_engine(
        "weighted_average",
        "1.0",
        fingerprint_fields=("history", "stock_quantity", "standard_cost"),
    )
    def calculate(
        self,
        *,
        history: PurchaseHistory,
        stock_quantity: Decimal,
        standard_cost: Decimal,
    ) -> WeightedAverageResult:
        """
        Average cost and weighted value for one part.

        Args:
            history: Purchase lots up to the report cutoff.
            stock_quantity: Stock on hand (already rounded to report places).
            standard_cost: Reference cost used when the history is empty.
        """
        used_fallback = history.total_quantity <= self.cost_epsilon
        avg = self.average_cost(history.total_quantity, history.total_value, standard_cost)
        value = self.weighted_value(stock_quantity, avg)

        if used_fallback:
            logger.debug("weighted_average_fallback", extra={
                "standard_cost": standard_cost,
                "average_cost": avg,
            })

        return WeightedAverageResult(
            average_cost=avg,
            weighted_value=value,
            used_fallback=used_fallback,
        )
