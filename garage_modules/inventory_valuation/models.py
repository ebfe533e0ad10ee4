"""
Inventory Valuation Domain Models (``garage_modules.inventory_valuation.models``).

Responsibility
--------------
Frozen dataclass value objects for the valuation request, each report
row, the report totals, and the CSV export payload.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* Quantities, costs and values are ``Decimal`` -- NEVER ``float``.
* For every row, ``weighted_value == round(stock_qty * avg_cost, 2)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from garage_kernel.logging_config import get_logger

logger = get_logger("modules.inventory_valuation.models")

REPORT_TYPE = "inventory_valuation"

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_report_date(value: str | None, default: date) -> date:
    """Parse a ``YYYY-MM-DD`` date; anything else yields ``default``."""
    if value is None:
        return default
    text = str(value).strip()
    if not _ISO_DATE.match(text):
        if text:
            logger.debug("report_date_rejected", extra={"value": text, "default": default})
        return default
    try:
        return date.fromisoformat(text)
    except ValueError:
        logger.debug("report_date_rejected", extra={"value": text, "default": default})
        return default


@dataclass(frozen=True)
class ValuationRequest:
    """Cutoff date and optional part search for one valuation run."""

    as_on: date
    search: str | None = None

    @classmethod
    def from_params(
        cls,
        as_on: str | None,
        search: str | None,
        default_date: date,
    ) -> ValuationRequest:
        """
        Build a request from raw query parameters.

        A missing or malformed ``as_on`` falls back to ``default_date``
        (the report's "to" date).  A blank search means no search.
        """
        term = (search or "").strip()
        return cls(
            as_on=parse_report_date(as_on, default_date),
            search=term or None,
        )


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every valuation report."""

    report_type: str
    as_on_date: date
    generated_at: str  # ISO format timestamp from injected clock
    tenant_id: UUID
    garage_scope: str
    search: str | None
    gap_fill_method: str


@dataclass(frozen=True)
class ValuationRow:
    """Valuation of one stocked part."""

    part_id: UUID
    part_name: str
    sku: str
    category_name: str
    unit: str
    stock_qty: Decimal
    avg_cost: Decimal
    weighted_value: Decimal
    fifo_value: Decimal
    purchase_qty: Decimal
    history_summary: str
    # Stock valued by gap-fill rather than by lots (0 when fully backed)
    gap_qty: Decimal = Decimal("0")


@dataclass(frozen=True)
class ValuationTotals:
    """Report footer; sums over the returned rows."""

    product_count: int
    total_stock_qty: Decimal
    total_weighted_value: Decimal
    total_fifo_value: Decimal


@dataclass(frozen=True)
class ValuationReport:
    """Complete inventory valuation report."""

    metadata: ReportMetadata
    rows: tuple[ValuationRow, ...]
    totals: ValuationTotals


@dataclass(frozen=True)
class CsvExport:
    """A rendered CSV download."""

    filename: str
    content: str
    row_count: int
