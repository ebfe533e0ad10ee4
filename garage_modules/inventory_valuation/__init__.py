"""
Inventory Valuation Module (``garage_modules.inventory_valuation``).

Responsibility
--------------
Read-only report that values every stocked part at a cutoff date with
two costing methods -- weighted-average cost and FIFO lot consumption --
and exports the result as CSV.

Architecture position
---------------------
**Modules layer** -- pure read-only service.  Data comes from kernel
selectors, valuation from ``garage_engines.valuation``, and assembly
from the pure functions in ``statements.py``.

Failure modes
-------------
* Export without permission -> ``ExportAccessDeniedError``.
* Stock not backed by purchase lots -> valued by gap-fill, logged.
"""

from garage_modules.inventory_valuation.config import InventoryValuationConfig
from garage_modules.inventory_valuation.export import CSV_HEADERS
from garage_modules.inventory_valuation.models import (
    CsvExport,
    ReportMetadata,
    ValuationReport,
    ValuationRequest,
    ValuationRow,
    ValuationTotals,
)
from garage_modules.inventory_valuation.service import InventoryValuationService

__all__ = [
    # Service
    "InventoryValuationService",
    # Config
    "InventoryValuationConfig",
    # Models
    "CsvExport",
    "ReportMetadata",
    "ValuationReport",
    "ValuationRequest",
    "ValuationRow",
    "ValuationTotals",
    # Export
    "CSV_HEADERS",
]
