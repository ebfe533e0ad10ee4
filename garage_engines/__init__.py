"""
Module: garage_engines
Responsibility:
    Package entrypoint for the pure calculation engines used by garage
    reports.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import garage_kernel domain values, rounding helpers and
    logging.  MUST NOT import garage_modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic: quantities and costs use ``Decimal``;
      floats are forbidden.
    - Determinism: identical inputs always produce identical outputs.

Every engine invocation is traced via the ``@traced_engine`` decorator
(see ``garage_engines.tracer``), emitting GARAGE_ENGINE_TRACE log records.

Usage:
    from garage_engines.valuation import FifoValuationCalculator
    from garage_engines.valuation import WeightedAverageCalculator
"""
