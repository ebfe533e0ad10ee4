"""
Module: garage_kernel.models.purchase
Responsibility: ORM mapping for purchase headers and their line items.
    Each line of a FINALIZED purchase is one cost lot for valuation.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants relied on by valuation:
    - Only FINALIZED purchases contribute lots.  DRAFT and CANCELLED
      purchases are invisible to reports.
    - purchase_date is a calendar date; the report cutoff is inclusive.
    - Purchase.seq is a store-wide monotonic sequence assigned by the writer
      when the purchase is recorded.  Lots on the same date are replayed in
      (seq, line_seq, id) order, so every line of an earlier purchase goes
      before any line of a later one.
    - line_seq orders lines within one purchase and restarts at 1 for each
      purchase.
    - unit_cost >= 0.  Lines with quantity <= 0 are ignored by the loader
      rather than rejected here.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import BigInteger, Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from garage_kernel.db.base import TrackedBase, UUIDString


class PurchaseStatus(str, Enum):
    """Lifecycle status of a purchase document."""

    DRAFT = "DRAFT"
    FINALIZED = "FINALIZED"
    CANCELLED = "CANCELLED"


class Purchase(TrackedBase):
    """A supplier purchase (goods receipt) recorded at one garage."""

    __tablename__ = "purchases"

    __table_args__ = (
        Index("idx_purchase_scope_date", "tenant_id", "garage_id", "purchase_date"),
        Index("idx_purchase_status", "status"),
        Index("idx_purchase_seq", "seq"),
    )

    tenant_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    garage_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("garages.id"),
        nullable=False,
    )

    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Monotonic store-wide sequence (assigned when the purchase is recorded)
    seq: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)

    status: Mapped[PurchaseStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PurchaseStatus.DRAFT.value,
    )

    invoice_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    items: Mapped[list[PurchaseItem]] = relationship(
        back_populates="purchase",
        order_by="PurchaseItem.line_seq",
    )

    def __repr__(self) -> str:
        return f"<Purchase {self.purchase_date} {self.status}>"


class PurchaseItem(TrackedBase):
    """One purchased line: a quantity of a part at a unit cost."""

    __tablename__ = "purchase_items"

    __table_args__ = (
        Index("idx_purchase_item_part", "part_id"),
        Index("idx_purchase_item_purchase_seq", "purchase_id", "line_seq"),
    )

    purchase_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("purchases.id"),
        nullable=False,
    )

    part_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("parts.id"),
        nullable=False,
    )

    line_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    quantity: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    unit_cost: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    purchase: Mapped[Purchase] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<PurchaseItem {self.part_id} {self.quantity} @ {self.unit_cost}>"
