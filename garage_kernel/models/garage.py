"""
Module: garage_kernel.models.garage
Responsibility: ORM mapping for garages (service locations) within a tenant.
Architecture position: Kernel > Models.  May import from db/base.py only.

Garages are master data owned by the host application.  The reporting
kernel reads them to build a default scope (all active garages of a
tenant) and never writes them outside test fixtures.
"""

from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from garage_kernel.db.base import TrackedBase, UUIDString


class Garage(TrackedBase):
    """A single service location belonging to a tenant."""

    __tablename__ = "garages"

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_garage_tenant_code"),
        Index("idx_garage_tenant_active", "tenant_id", "is_active"),
    )

    tenant_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Short code shown next to the name in scope pickers
    code: Mapped[str] = mapped_column(String(50), nullable=False)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Garage {self.code}: {self.name}>"
