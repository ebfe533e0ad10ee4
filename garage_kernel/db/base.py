"""
Module: garage_kernel.db.base
Responsibility: Declarative bases for the kernel's ORM models.  The kernel
    only reads these tables (parts, garages, purchases, movements); the
    models describe the shared schema so selectors can build typed queries.
Architecture position: Kernel > DB.  ALL model files import from here.
    MUST NOT import from models/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Every row is keyed by a uuid4 stored as a 36-char string, so tenant,
      garage and part ids compare identically on PostgreSQL and SQLite.
    - Quantities and costs map to Numeric(38, 9) and load as Decimal,
      never float.
    - Timestamps are naive: movement times are recorded in shop-local
      time, and report cutoffs are local end-of-day.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID column stored as String(36).

    Binds accept a UUID or its string form; anything else is rejected at
    bind time instead of silently matching no rows.  Loads return UUID.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, UUID):
            value = UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return UUID(value)


class Base(DeclarativeBase):
    """Declarative base: uuid4 ``id`` plus the column type conventions."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=False),
        UUID: UUIDString(),
        int: Integer,
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base for master data and purchase documents, which carry
    created/updated timestamps.  Movements are append-only and use Base.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )
