"""
Module: garage_kernel.models.part
Responsibility: ORM mapping for the part master and part categories.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from selectors/, domain/, or outer layers.

Invariants relied on by valuation:
    - purchase_price is the part's reference (standard) unit cost.  It is
      the weighted-average fallback when a part has no purchase lots.
    - category_id is nullable; reports label such parts "Uncategorized".
    - Only ACTIVE parts appear on inventory reports.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from garage_kernel.db.base import TrackedBase, UUIDString


class PartStatus(str, Enum):
    """Lifecycle status of a part in the master list."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class PartCategory(TrackedBase):
    """Grouping label for parts (e.g. Filters, Brakes, Lubricants)."""

    __tablename__ = "part_categories"

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_part_category_tenant_name"),
    )

    tenant_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<PartCategory {self.name}>"


class Part(TrackedBase):
    """
    A stocked part in the tenant's master list.

    Contract:
        Part rows are maintained by the inventory module of the host
        application.  The reporting kernel only reads them.

    Non-goals:
        - Stock on hand is NOT stored here; it is derived from
          InventoryMovement rows at query time.
    """

    __tablename__ = "parts"

    __table_args__ = (
        UniqueConstraint("tenant_id", "sku", name="uq_part_tenant_sku"),
        Index("idx_part_tenant_status", "tenant_id", "status"),
        Index("idx_part_name", "name"),
    )

    tenant_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    sku: Mapped[str] = mapped_column(String(100), nullable=False)

    # Unit of measure (PCS, LTR, SET, ...)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="PCS")

    category_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("part_categories.id"),
        nullable=True,
    )

    # Reference unit cost; fallback for parts with no purchase history
    purchase_price: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    status: Mapped[PartStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PartStatus.ACTIVE.value,
    )

    category: Mapped[PartCategory | None] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<Part {self.sku}: {self.name}>"

    @property
    def is_active(self) -> bool:
        return self.status == PartStatus.ACTIVE
