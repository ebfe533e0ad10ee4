"""Garage lookups used to build a default report scope."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from garage_kernel.models.garage import Garage
from garage_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class GarageDTO:
    id: UUID
    name: str
    code: str


class GarageSelector(BaseSelector[Garage]):
    """Selector for garage master data."""

    def __init__(self, session: Session):
        super().__init__(session)

    def active_garages(self, tenant_id: UUID) -> list[GarageDTO]:
        """Active garages of a tenant, ordered by name."""
        stmt = (
            select(Garage.id, Garage.name, Garage.code)
            .where(Garage.tenant_id == tenant_id)
            .where(Garage.is_active.is_(True))
            .order_by(Garage.name, Garage.code)
        )
        return [
            GarageDTO(id=row.id, name=row.name, code=row.code)
            for row in self.session.execute(stmt)
        ]
