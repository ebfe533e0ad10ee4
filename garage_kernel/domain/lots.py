"""
Purchase lots -- immutable cost layers read from finalized purchases.

Responsibility:
    Value objects shared by the purchase selector (which builds them) and
    the valuation engines (which consume them).  A lot is one purchase line:
    a quantity received at a unit cost on a date.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.

Invariants:
    - PurchaseLot.quantity > 0.  Lines with non-positive quantity never
      become lots.
    - PurchaseHistory.lots are ordered oldest first by
      (lot_date, purchase_seq, line_seq, source id); FIFO replays them in
      this order.
    - total_quantity and total_value are exact sums over lots (no rounding).
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class PurchaseLot:
    """One cost layer: quantity received at unit_cost on lot_date."""

    lot_date: date
    quantity: Decimal
    unit_cost: Decimal
    purchase_seq: int = 0
    line_seq: int = 0
    source_id: UUID | None = None

    @property
    def value(self) -> Decimal:
        return self.quantity * self.unit_cost

    def sort_key(self) -> tuple:
        return (self.lot_date, self.purchase_seq, self.line_seq, str(self.source_id or ""))


@dataclass(frozen=True)
class PurchaseHistory:
    """All lots of one part up to a cutoff, oldest first."""

    lots: tuple[PurchaseLot, ...] = ()
    total_quantity: Decimal = Decimal("0")
    total_value: Decimal = Decimal("0")

    @classmethod
    def from_lots(cls, lots) -> "PurchaseHistory":
        """Build a history from lots in any order; sorts and totals them."""
        ordered = tuple(sorted(lots, key=PurchaseLot.sort_key))
        total_quantity = sum((lot.quantity for lot in ordered), Decimal("0"))
        total_value = sum((lot.value for lot in ordered), Decimal("0"))
        return cls(
            lots=ordered,
            total_quantity=total_quantity,
            total_value=total_value,
        )

    @property
    def is_empty(self) -> bool:
        return not self.lots

    def most_recent(self, count: int) -> tuple[PurchaseLot, ...]:
        """Up to ``count`` lots, newest date first; same-date lots keep replay order."""
        if count <= 0:
            return ()
        newest_first = sorted(self.lots, key=lambda lot: lot.lot_date, reverse=True)
        return tuple(newest_first[:count])


EMPTY_HISTORY = PurchaseHistory()
