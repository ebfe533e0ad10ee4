"""
garage_engines.valuation.fifo -- FIFO lot-consumption valuation.

Responsibility:
    Value current stock by replaying cumulative outbound quantity against
    purchase lots oldest first, then pricing what is left of each lot at
    that lot's own unit cost.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by the inventory valuation report assembler.

Algorithm:
    1. to_consume = max(0, outbound_quantity)
    2. For each lot oldest -> newest (lots with quantity <= 0 skipped):
         to_consume >= lot.quantity -> lot fully consumed
         otherwise                  -> left = lot.quantity - to_consume,
                                       to_consume = 0, left is valued at
                                       the lot's unit cost
    3. If stock_quantity exceeds what is left of the lots, the difference
       (the gap) is valued by the configured GapFillMethod.
    4. fifo_value = max(0, round(remaining_value + gap_value, 2))

Invariants enforced:
    - Conservation: remaining_lot_quantity ==
      max(0, sum(lot quantities) - outbound_quantity).
    - Non-negativity: every intermediate and the result are >= 0; negative
      inputs are clamped rather than rejected.
    - Determinism: the same ordered lots and quantities give the same value.

Failure modes:
    - None.  Stock not backed by lots (drift between the purchase and
      movement stores) is absorbed by gap-fill and logged at WARNING as
      ``fifo_gap_filled``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID

from garage_engines.tracer import traced_engine
from garage_kernel.db.types import MONEY_DECIMAL_PLACES, ZERO, round_money
from garage_kernel.domain.lots import PurchaseLot
from garage_kernel.logging_config import get_logger

logger = get_logger("engines.fifo")


class GapFillMethod(str, Enum):
    """How stock not covered by remaining lots is valued."""

    AVERAGE_COST = "average_cost"  # gap x weighted-average cost
    STANDARD_COST = "standard_cost"  # gap x part's reference cost
    NONE = "none"  # gap contributes nothing


@dataclass(frozen=True)
class FifoResult:
    """
    Outcome of one FIFO replay.

    remaining_lot_value is unrounded; fifo_value is the displayed figure.
    """

    remaining_lot_quantity: Decimal
    remaining_lot_value: Decimal
    gap_quantity: Decimal
    gap_value: Decimal
    fifo_value: Decimal
    gap_fill_method: GapFillMethod

    @property
    def is_gap_filled(self) -> bool:
        return self.gap_quantity > ZERO


class FifoValuationCalculator:
    """
    Pure function calculator for FIFO stock value.

    Contract:
        No I/O, no database access, fully deterministic.  Lots must be
        passed oldest first; the calculator does not re-sort them.
    """

    def __init__(
        self,
        gap_fill_method: GapFillMethod = GapFillMethod.AVERAGE_COST,
        money_decimal_places: int = MONEY_DECIMAL_PLACES,
    ):
        self.gap_fill_method = GapFillMethod(gap_fill_method)
        self.money_decimal_places = money_decimal_places

    @staticmethod
    def consume(
        lots: Sequence[PurchaseLot],
        outbound_quantity: Decimal,
    ) -> tuple[Decimal, Decimal]:
        """
        Replay outbound quantity against lots.

        Returns:
            (remaining quantity, remaining value at lot costs), both >= 0.
        """
        to_consume = max(ZERO, outbound_quantity)
        remaining_qty = ZERO
        remaining_value = ZERO

        for lot in lots:
            if lot.quantity <= ZERO:
                continue
            if to_consume >= lot.quantity:
                to_consume -= lot.quantity
                continue
            left = lot.quantity - to_consume
            to_consume = ZERO
            remaining_qty += left
            remaining_value += left * max(ZERO, lot.unit_cost)

        return remaining_qty, remaining_value

    def gap_unit_cost(self, average_cost: Decimal, standard_cost: Decimal) -> Decimal:
        if self.gap_fill_method == GapFillMethod.AVERAGE_COST:
            return max(ZERO, average_cost)
        if self.gap_fill_method == GapFillMethod.STANDARD_COST:
            return max(ZERO, standard_cost)
        return ZERO

    @traced_engine(
        "fifo_valuation",
        "1.0",
        fingerprint_fields=("lots", "stock_quantity", "outbound_quantity", "average_cost"),
    )
    def value(
        self,
        *,
        lots: Sequence[PurchaseLot],
        stock_quantity: Decimal,
        outbound_quantity: Decimal,
        average_cost: Decimal,
        standard_cost: Decimal = ZERO,
        part_id: UUID | None = None,
    ) -> FifoResult:
        """
        FIFO value of current stock.

        Args:
            lots: Purchase lots, oldest first.
            stock_quantity: Stock on hand at the cutoff.
            outbound_quantity: Cumulative OUT quantity at the cutoff.
            average_cost: Weighted-average unit cost, used by AVERAGE_COST
                gap-fill.
            standard_cost: Part reference cost, used by STANDARD_COST
                gap-fill.
            part_id: Only used to label the gap warning.
        """
        stock = max(ZERO, stock_quantity)
        remaining_qty, remaining_value = self.consume(lots, outbound_quantity)

        gap_qty = ZERO
        gap_value = ZERO
        if stock > remaining_qty:
            gap_qty = stock - remaining_qty
            gap_value = gap_qty * self.gap_unit_cost(average_cost, standard_cost)
            logger.warning("fifo_gap_filled", extra={
                "part_id": part_id,
                "stock_quantity": stock,
                "remaining_lot_quantity": remaining_qty,
                "gap_quantity": gap_qty,
                "gap_value": gap_value,
                "gap_fill_method": self.gap_fill_method.value,
            })

        fifo_value = max(
            ZERO,
            round_money(remaining_value + gap_value, self.money_decimal_places),
        )

        return FifoResult(
            remaining_lot_quantity=remaining_qty,
            remaining_lot_value=remaining_value,
            gap_quantity=gap_qty,
            gap_value=gap_value,
            fifo_value=fifo_value,
            gap_fill_method=self.gap_fill_method,
        )
