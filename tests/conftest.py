"""
Pytest fixtures for the garage kernel test suite.

Provides:
- A database session per test, rolled back at teardown
- An ``inventory`` builder for parts, garages, purchases and movements
- Structured-log capture and a deterministic clock

Environment Variables:
- DATABASE_URL: connection URL.  Defaults to in-memory SQLite, which is
  enough for every test here; point it at PostgreSQL to exercise the
  production dialect.
"""

import itertools
import json
import logging
import os
from datetime import UTC, date, datetime, time
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from garage_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from garage_kernel.domain.clock import DeterministicClock
from garage_kernel.domain.scope import ScopeFilter
from garage_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from garage_kernel.models import (
    Garage,
    InventoryMovement,
    MovementType,
    Part,
    PartCategory,
    PartStatus,
    Purchase,
    PurchaseItem,
    PurchaseStatus,
)

DEFAULT_DATABASE_URL = "sqlite://"


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture garage_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.valuation_report(...)
            logs = captured_logs()
            assert any(r["message"] == "inventory_valuation_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("garage_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Session-scoped DB infrastructure (create engine + tables ONCE per suite)
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    """Single engine for the entire test session."""
    eng = init_engine_from_url(get_database_url(), echo=False)
    yield eng
    reset_engine()


@pytest.fixture(scope="session")
def db_tables(db_engine):
    """Create all tables once per session, drop once at end."""
    drop_tables()
    create_tables()
    yield
    drop_tables()


# =============================================================================
# Per-test session with automatic rollback
# =============================================================================


@pytest.fixture(scope="function")
def session(db_tables, db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    Opens a dedicated connection with an outer transaction and a session
    that joins it.  At teardown the outer transaction is rolled back,
    undoing every row the test created.
    """
    conn = db_engine.connect()
    trans = conn.begin()
    sess = Session(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
    yield sess
    try:
        sess.close()
    finally:
        try:
            trans.rollback()
        finally:
            conn.close()


# =============================================================================
# Test data builder
# =============================================================================


class InventoryBuilder:
    """
    Writes master data, purchases and movements for one tenant.

    Every method flushes so that ids are available immediately; nothing is
    committed.
    """

    # Store-wide purchase sequence, shared by every builder in the run
    _purchase_seqs = itertools.count(1)

    def __init__(self, session: Session, tenant_id: UUID | None = None):
        self.session = session
        self.tenant_id = tenant_id or uuid4()

    def _add(self, obj):
        self.session.add(obj)
        self.session.flush()
        return obj

    def garage(self, code: str = "MAIN", name: str | None = None, is_active: bool = True) -> Garage:
        return self._add(Garage(
            tenant_id=self.tenant_id,
            code=code,
            name=name or f"Garage {code}",
            is_active=is_active,
        ))

    def category(self, name: str) -> PartCategory:
        return self._add(PartCategory(tenant_id=self.tenant_id, name=name))

    def part(
        self,
        name: str,
        sku: str | None = None,
        purchase_price: str | Decimal = "0",
        category: PartCategory | None = None,
        unit: str = "PCS",
        status: PartStatus = PartStatus.ACTIVE,
    ) -> Part:
        return self._add(Part(
            tenant_id=self.tenant_id,
            name=name,
            sku=sku or name.upper().replace(" ", "-"),
            unit=unit,
            purchase_price=Decimal(str(purchase_price)),
            category_id=category.id if category is not None else None,
            status=status.value,
        ))

    def purchase(
        self,
        garage: Garage,
        purchase_date: date,
        lines: list[tuple[Part, str | Decimal, str | Decimal]],
        status: PurchaseStatus = PurchaseStatus.FINALIZED,
    ) -> Purchase:
        """
        Purchase with one item per (part, quantity, unit_cost) line.

        Lines are numbered from 1 within the purchase; the purchase takes
        the next store-wide seq.
        """
        purchase = self._add(Purchase(
            tenant_id=self.tenant_id,
            garage_id=garage.id,
            purchase_date=purchase_date,
            seq=next(self._purchase_seqs),
            status=status.value,
        ))
        for line_seq, (part, qty, cost) in enumerate(lines, start=1):
            self._add(PurchaseItem(
                purchase_id=purchase.id,
                part_id=part.id,
                line_seq=line_seq,
                quantity=Decimal(str(qty)),
                unit_cost=Decimal(str(cost)),
            ))
        return purchase

    def movement(
        self,
        garage: Garage,
        part: Part,
        movement_type: MovementType,
        quantity: str | Decimal,
        moved_at: datetime | date,
    ) -> InventoryMovement:
        if not isinstance(moved_at, datetime):
            moved_at = datetime.combine(moved_at, time(10, 0))
        return self._add(InventoryMovement(
            tenant_id=self.tenant_id,
            garage_id=garage.id,
            part_id=part.id,
            movement_type=movement_type.value,
            quantity=Decimal(str(quantity)),
            moved_at=moved_at,
        ))

    def receive(self, garage: Garage, part: Part, on: date, qty: str, cost: str) -> Purchase:
        """Finalized purchase plus its matching IN movement."""
        purchase = self.purchase(garage, on, [(part, qty, cost)])
        self.movement(garage, part, MovementType.IN, qty, on)
        return purchase

    def scope(self, *garages: Garage, can_export_data: bool = False) -> ScopeFilter:
        return ScopeFilter(
            tenant_id=self.tenant_id,
            garage_ids=frozenset(g.id for g in garages),
            can_export_data=can_export_data,
            actor_id="test-user",
        )


@pytest.fixture
def inventory(session) -> InventoryBuilder:
    return InventoryBuilder(session)


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock(datetime(2025, 3, 31, 17, 45, 12, tzinfo=UTC))
