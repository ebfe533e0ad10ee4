"""
Module: garage_kernel.models.inventory_movement
Responsibility: ORM mapping for the append-only stock movement stream.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants relied on by valuation:
    - Movements are append-only.  Stock on hand is never stored; it is the
      signed sum of movements up to a cutoff.
    - Sign convention by movement_type:
        IN      contributes +|quantity|
        OUT     contributes -|quantity|
        ADJUST  contributes quantity as recorded (may be negative)
    - moved_at is naive shop-local time, compared against an end-of-day
      cutoff.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from garage_kernel.db.base import Base, UUIDString


class MovementType(str, Enum):
    """Kind of stock movement."""

    IN = "IN"
    OUT = "OUT"
    ADJUST = "ADJUST"


class InventoryMovement(Base):
    """One stock movement of a part at a garage."""

    __tablename__ = "inventory_movements"

    __table_args__ = (
        Index("idx_movement_part_time", "part_id", "moved_at"),
        Index("idx_movement_scope", "tenant_id", "garage_id"),
    )

    tenant_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    garage_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("garages.id"),
        nullable=False,
    )

    part_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("parts.id"),
        nullable=False,
    )

    movement_type: Mapped[MovementType] = mapped_column(String(10), nullable=False)

    quantity: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    moved_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    # Free-form source reference (job card, purchase, transfer, ...)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<InventoryMovement {self.movement_type} {self.quantity} part={self.part_id}>"
