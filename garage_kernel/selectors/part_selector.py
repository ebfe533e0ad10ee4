"""
Part master queries.

Reads display attributes (name, SKU, unit, category) and the reference
unit cost for a set of parts.  Category is outer-joined: a part without a
category comes back with category_name=None and the report decides the
label.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping
from uuid import UUID

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.orm import Session

from garage_kernel.db.types import to_decimal
from garage_kernel.models.part import Part, PartCategory
from garage_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class PartDTO:
    """Display and costing attributes of one part."""

    id: UUID
    name: str
    sku: str
    unit: str
    category_name: str | None
    standard_cost: Decimal


def search_predicate(search: str | None) -> ColumnElement[bool] | None:
    """Case-insensitive substring match on part name or SKU; None if blank."""
    if search is None:
        return None
    term = search.strip()
    if not term:
        return None
    return or_(
        Part.name.icontains(term, autoescape=True),
        Part.sku.icontains(term, autoescape=True),
    )


class PartSelector(BaseSelector[Part]):
    """Selector for part master data."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get_parts(self, part_ids: Iterable[UUID]) -> Mapping[UUID, PartDTO]:
        """
        Load parts by id.

        Returns:
            Read-only mapping part id -> PartDTO, ordered by part name.
            Unknown ids are simply absent.
        """
        ids = list(dict.fromkeys(part_ids))
        if not ids:
            return MappingProxyType({})

        stmt = (
            select(
                Part.id,
                Part.name,
                Part.sku,
                Part.unit,
                Part.purchase_price,
                PartCategory.name.label("category_name"),
            )
            .outerjoin(PartCategory, PartCategory.id == Part.category_id)
            .where(Part.id.in_(ids))
            .order_by(Part.name, Part.id)
        )

        parts: dict[UUID, PartDTO] = {}
        for row in self.session.execute(stmt):
            parts[row.id] = PartDTO(
                id=row.id,
                name=row.name,
                sku=row.sku,
                unit=row.unit,
                category_name=row.category_name,
                standard_cost=to_decimal(row.purchase_price),
            )
        return MappingProxyType(parts)
