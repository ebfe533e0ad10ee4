"""
Module: garage_kernel.db.engine
Responsibility: One process-wide engine and session factory, plus the
    read-only snapshot that every valuation report runs inside.
Architecture position: Kernel > DB.  May import from db/base.py.  MUST NOT
    import from selectors/, domain/, or outer layers (create_tables imports
    models lazily).

Invariants enforced:
    - A report's stock, outbound and purchase queries share one transaction
      (snapshot_scope).  On PostgreSQL it runs at REPEATABLE READ and
      read-only, so all three aggregates see the same committed state.
    - snapshot_scope never commits.
    - SQLite (tests, local runs) uses one static connection so an in-memory
      database survives across sessions.

Failure modes:
    - RuntimeError from any accessor called before init_engine_from_url().
"""

import atexit
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from garage_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

SNAPSHOT_ISOLATION = "REPEATABLE READ"

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 5,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the engine and session factory.  A second call replaces both.

    Args:
        database_url: ``postgresql://...`` for production, ``sqlite://``
            for tests.
        echo: Log every SQL statement.
        pool_size, max_overflow, pool_timeout, pool_recycle: QueuePool
            settings; ignored for SQLite.
    """
    global _engine, _SessionFactory

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            isolation_level="READ COMMITTED",
        )

    _engine = engine
    _SessionFactory = sessionmaker(bind=engine, expire_on_commit=False)

    configure_logging()
    logger.info("engine_initialized", extra={"dialect": engine.dialect.name, "echo": echo})
    return engine


def _require_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session() -> Session:
    """New session bound to the engine; the caller closes it."""
    return _require_factory()()


def get_session_factory() -> sessionmaker[Session]:
    return _require_factory()


def is_postgres() -> bool:
    return _engine is not None and _engine.dialect.name == "postgresql"


@contextmanager
def snapshot_scope() -> Generator[Session, None, None]:
    """
    Read-only session over one consistent snapshot.

    On exit, normal or not, the transaction is rolled back and the session
    closed.

    Usage:
        with snapshot_scope() as session:
            report = InventoryValuationService(session).valuation_report(request, scope)
    """
    session = get_session()
    if is_postgres():
        # Pins the isolation level before the first query opens the transaction
        session.connection(
            execution_options={
                "isolation_level": SNAPSHOT_ISOLATION,
                "postgresql_readonly": True,
            }
        )
    logger.debug("snapshot_started", extra={"postgres": is_postgres()})
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        logger.debug("snapshot_released")


def create_tables() -> None:
    """
    Create the kernel tables.

    Production schemas are owned by the shop application; this exists for
    local databases and the test suite.
    """
    from garage_kernel.db.base import Base
    import garage_kernel.models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop the kernel tables. Test suite only."""
    from garage_kernel.db.base import Base
    import garage_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


atexit.register(reset_engine)
