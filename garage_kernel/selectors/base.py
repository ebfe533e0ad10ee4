"""
Module: garage_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors, plus
    the shared tenant/garage scope predicate and the end-of-day cutoff.
Architecture position: Kernel > Selectors.  May import from db/, domain/ and
    models/.  MUST NOT import from engines or modules.
    Selectors NEVER create, modify, or delete data.

Invariants enforced:
    - Read-only access: Selectors accept a Session from the caller but MUST NOT
      call session.add(), session.delete(), session.commit(), or session.flush().
    - DTO return convention: Selectors return frozen dataclasses or read-only
      mappings, NOT raw ORM model instances.
    - Session ownership: the caller owns the session and its transaction, so
      several selectors can read one consistent snapshot.
    - Scope: a selected garage narrows to that garage; an empty garage set
      matches no rows.  Garages flagged inactive never contribute rows, even
      when named in the scope.
"""

from abc import ABC
from datetime import date, datetime, time
from typing import Generic, TypeVar

from sqlalchemy import ColumnElement, and_, false, select
from sqlalchemy.orm import Session

from garage_kernel.db.base import Base
from garage_kernel.domain.scope import ScopeFilter
from garage_kernel.models.garage import Garage

ModelType = TypeVar("ModelType", bound=Base)


def end_of_day(as_on: date) -> datetime:
    """Inclusive timestamp cutoff for a report date (as_on 23:59:59.999999)."""
    return datetime.combine(as_on, time.max)


def scope_predicate(tenant_column, garage_column, scope: ScopeFilter) -> ColumnElement[bool]:
    """
    Tenant plus garage restriction for one table.

    Postconditions:
        - selected garage  -> garage_column = selected id
        - empty garage set -> a predicate that is always false
        - otherwise        -> garage_column IN (garage ids)
        - in every non-empty case the garage must also be active
    """
    if scope.is_empty:
        return false()
    if scope.selected_garage_id is not None:
        garage_clause = garage_column == scope.selected_garage_id
    else:
        garage_clause = garage_column.in_(sorted(scope.garage_ids, key=str))
    active_garages = select(Garage.id).where(
        Garage.tenant_id == scope.tenant_id,
        Garage.is_active.is_(True),
    )
    return and_(
        tenant_column == scope.tenant_id,
        garage_clause,
        garage_column.in_(active_garages),
    )


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return DTOs or computed results.  They MUST NOT mutate any data.

    Non-goals:
        - BaseSelector does NOT define any query methods; subclasses implement
          the stock, purchase, part and garage queries.
    """

    def __init__(self, session: Session):
        """
        Initialize the selector.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session
