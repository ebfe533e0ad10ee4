"""
Purchase lot loader.

Reads finalized purchase lines as cost lots for valuation.  Lots are
grouped per part and ordered oldest first so FIFO replay is
deterministic:

    ORDER BY purchase_date, purchase.seq, line_seq, purchase_item.id

purchase.seq is store-wide, so on one date every line of an earlier
purchase replays before any line of a later one.

Invariants:
- Only FINALIZED purchases at active garages in scope with
  purchase_date <= as_on count.
- Lines with quantity <= 0 never become lots.
- A requested part with no lines maps to an empty history, never to a
  missing key.
"""

from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from garage_kernel.db.types import ZERO, to_decimal
from garage_kernel.domain.lots import EMPTY_HISTORY, PurchaseHistory, PurchaseLot
from garage_kernel.domain.scope import ScopeFilter
from garage_kernel.logging_config import get_logger
from garage_kernel.models.purchase import Purchase, PurchaseItem, PurchaseStatus
from garage_kernel.selectors.base import BaseSelector, scope_predicate

logger = get_logger("selectors.purchase")


class PurchaseSelector(BaseSelector[PurchaseItem]):
    """Selector for purchase lot history."""

    def __init__(self, session: Session):
        super().__init__(session)

    def load_histories(
        self,
        part_ids: Iterable[UUID],
        scope: ScopeFilter,
        as_on: date,
    ) -> Mapping[UUID, PurchaseHistory]:
        """
        Purchase history for each requested part up to ``as_on`` inclusive.

        Returns:
            Read-only mapping with one entry per requested part id.
        """
        ids = list(dict.fromkeys(part_ids))
        if not ids:
            return MappingProxyType({})
        if scope.is_empty:
            return MappingProxyType({part_id: EMPTY_HISTORY for part_id in ids})

        stmt = (
            select(
                PurchaseItem.id,
                PurchaseItem.part_id,
                Purchase.seq.label("purchase_seq"),
                PurchaseItem.line_seq,
                PurchaseItem.quantity,
                PurchaseItem.unit_cost,
                Purchase.purchase_date,
            )
            .join(Purchase, Purchase.id == PurchaseItem.purchase_id)
            .where(scope_predicate(Purchase.tenant_id, Purchase.garage_id, scope))
            .where(Purchase.status == PurchaseStatus.FINALIZED.value)
            .where(Purchase.purchase_date <= as_on)
            .where(PurchaseItem.part_id.in_(ids))
            .order_by(
                PurchaseItem.part_id,
                Purchase.purchase_date,
                Purchase.seq,
                PurchaseItem.line_seq,
                PurchaseItem.id,
            )
        )

        lots_by_part: dict[UUID, list[PurchaseLot]] = {part_id: [] for part_id in ids}
        skipped = 0
        for row in self.session.execute(stmt):
            quantity = to_decimal(row.quantity)
            if quantity <= ZERO:
                skipped += 1
                continue
            lots_by_part[row.part_id].append(
                PurchaseLot(
                    lot_date=row.purchase_date,
                    quantity=quantity,
                    unit_cost=to_decimal(row.unit_cost),
                    purchase_seq=row.purchase_seq,
                    line_seq=row.line_seq,
                    source_id=row.id,
                )
            )

        histories = {
            part_id: PurchaseHistory.from_lots(lots) if lots else EMPTY_HISTORY
            for part_id, lots in lots_by_part.items()
        }

        logger.debug(
            "purchase_histories_loaded",
            extra={
                "as_on": as_on,
                "part_count": len(ids),
                "lot_count": sum(len(h.lots) for h in histories.values()),
                "skipped_lines": skipped,
            },
        )
        return MappingProxyType(histories)
