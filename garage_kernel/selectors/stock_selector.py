"""
Stock movement aggregation.

Derives stock on hand from the append-only movement stream; there are no
stored balances.  Every query here is restricted to one tenant/garage
scope (active garages only), to ACTIVE parts, and to movements at or
before the end of the report date.

Sign convention (applied in SQL):
    IN      -> +|quantity|
    OUT     -> -|quantity|
    ADJUST  -> quantity as recorded

Invariants:
- Uses the caller's Session; the stock, outbound and purchase reads of one
  report must share a transaction to see one snapshot.
- Net quantities are rounded to 2 places (ROUND_HALF_UP) before they are
  compared with zero, so floating noise from SQLite sums never produces a
  0.00 stock row.
"""

from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping
from uuid import UUID

from sqlalchemy import Numeric, case, func, select
from sqlalchemy.orm import Session

from garage_kernel.db.types import ZERO, round_quantity, to_decimal
from garage_kernel.domain.scope import ScopeFilter
from garage_kernel.logging_config import get_logger
from garage_kernel.models.inventory_movement import InventoryMovement, MovementType
from garage_kernel.models.part import Part, PartStatus
from garage_kernel.selectors.base import BaseSelector, end_of_day, scope_predicate
from garage_kernel.selectors.part_selector import search_predicate

logger = get_logger("selectors.stock")


def absolute_quantity():
    return func.abs(InventoryMovement.quantity, type_=Numeric(38, 9))


def signed_quantity():
    """SQL expression for a movement's signed contribution to stock."""
    return case(
        (InventoryMovement.movement_type == MovementType.IN.value, absolute_quantity()),
        (InventoryMovement.movement_type == MovementType.OUT.value, -absolute_quantity()),
        else_=InventoryMovement.quantity,
    )


class StockSelector(BaseSelector[InventoryMovement]):
    """
    Selector for stock-on-hand queries.

    Returns read-only mappings keyed by part id rather than ORM rows.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def net_quantities(
        self,
        part_ids: Iterable[UUID] | None,
        scope: ScopeFilter,
        as_on: date,
        search: str | None = None,
    ) -> Mapping[UUID, Decimal]:
        """
        Net stock per part at the end of ``as_on``.

        Args:
            part_ids: Restrict to these parts; None means every part with
                movements in scope.
            scope: Tenant/garage restriction.
            as_on: Report date; movements up to 23:59:59.999999 count.
            search: Optional case-insensitive match on part name or SKU.

        Returns:
            Read-only mapping part id -> quantity rounded to 2 places,
            ordered by part name.  Parts netting to zero are omitted;
            negative positions are kept.
        """
        ids = None if part_ids is None else list(dict.fromkeys(part_ids))
        if scope.is_empty or (ids is not None and not ids):
            return MappingProxyType({})

        net = func.sum(signed_quantity()).label("net_qty")
        stmt = (
            select(Part.id, Part.name, net)
            .select_from(InventoryMovement)
            .join(Part, Part.id == InventoryMovement.part_id)
            .where(scope_predicate(InventoryMovement.tenant_id, InventoryMovement.garage_id, scope))
            .where(InventoryMovement.moved_at <= end_of_day(as_on))
            .where(Part.tenant_id == scope.tenant_id)
            .where(Part.status == PartStatus.ACTIVE.value)
            .group_by(Part.id, Part.name)
            .order_by(Part.name, Part.id)
        )
        if ids is not None:
            stmt = stmt.where(Part.id.in_(ids))
        matcher = search_predicate(search)
        if matcher is not None:
            stmt = stmt.where(matcher)

        quantities: dict[UUID, Decimal] = {}
        for row in self.session.execute(stmt):
            qty = round_quantity(to_decimal(row.net_qty))
            if qty != ZERO:
                quantities[row.id] = qty

        logger.debug(
            "net_quantities_loaded",
            extra={
                "as_on": as_on,
                "part_count": len(quantities),
                "searched": matcher is not None,
            },
        )
        return MappingProxyType(quantities)

    def parts_in_stock(
        self,
        scope: ScopeFilter,
        as_on: date,
        search: str | None = None,
    ) -> Mapping[UUID, Decimal]:
        """
        Parts with positive stock at the end of ``as_on``.

        Returns:
            Read-only mapping part id -> positive quantity (2 places),
            ordered by part name.
        """
        net = self.net_quantities(None, scope, as_on, search=search)
        return MappingProxyType({
            part_id: qty for part_id, qty in net.items() if qty > ZERO
        })

    def outbound_quantities(
        self,
        part_ids: Iterable[UUID],
        scope: ScopeFilter,
        as_on: date,
    ) -> Mapping[UUID, Decimal]:
        """
        Total absolute OUT quantity per part up to the end of ``as_on``.

        Only OUT movements count; ADJUST reductions are not consumption.
        Parts with no OUT movements are absent from the mapping.
        """
        ids = list(dict.fromkeys(part_ids))
        if scope.is_empty or not ids:
            return MappingProxyType({})

        stmt = (
            select(
                InventoryMovement.part_id,
                func.sum(absolute_quantity()).label("out_qty"),
            )
            .where(scope_predicate(InventoryMovement.tenant_id, InventoryMovement.garage_id, scope))
            .where(InventoryMovement.moved_at <= end_of_day(as_on))
            .where(InventoryMovement.movement_type == MovementType.OUT.value)
            .where(InventoryMovement.part_id.in_(ids))
            .group_by(InventoryMovement.part_id)
        )

        return MappingProxyType({
            row.part_id: to_decimal(row.out_qty)
            for row in self.session.execute(stmt)
        })
