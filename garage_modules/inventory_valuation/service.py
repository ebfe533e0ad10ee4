"""
Inventory Valuation Service (``garage_modules.inventory_valuation.service``).

Responsibility
--------------
Orchestrates the inventory valuation report by bridging kernel selectors
(``StockSelector``, ``PartSelector``, ``PurchaseSelector``) to the pure
transformation functions in ``statements.py``, and renders the CSV
export.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config``.  The caller owns the session; pass one from
``garage_kernel.db.snapshot_scope()`` so every query of a report reads the
same snapshot.

Invariants enforced
-------------------
* Read-only -- nothing is added, flushed or committed.
* Idempotent -- the same request against unchanged data yields an equal
  report (only ``generated_at`` follows the clock).
* Export permission is checked before any query runs.

Failure modes
-------------
* ``ExportAccessDeniedError`` -- export requested without permission.
* ``UnknownExportError`` -- export key other than ``valuation``.
* Selector query failure -> exception propagates.
* Malformed dates, empty scope, missing lots or categories never raise.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from garage_kernel.domain.clock import Clock, SystemClock
from garage_kernel.domain.scope import ScopeFilter
from garage_kernel.exceptions import ExportAccessDeniedError, UnknownExportError
from garage_kernel.logging_config import LogContext, get_logger
from garage_kernel.selectors.part_selector import PartSelector
from garage_kernel.selectors.purchase_selector import PurchaseSelector
from garage_kernel.selectors.stock_selector import StockSelector
from garage_modules.inventory_valuation.config import InventoryValuationConfig
from garage_modules.inventory_valuation.export import export_filename, render_csv
from garage_modules.inventory_valuation.models import (
    REPORT_TYPE,
    CsvExport,
    ReportMetadata,
    ValuationReport,
    ValuationRequest,
)
from garage_modules.inventory_valuation.statements import (
    build_valuation_report,
    render_to_dict,
)

logger = get_logger("modules.inventory_valuation.service")

VALUATION_EXPORT = "valuation"


class InventoryValuationService:
    """
    Inventory valuation report service.

    Contract
    --------
    * ``valuation_report`` returns a ``ValuationReport``.
    * ``export_csv`` returns a ``CsvExport`` or raises an ``ExportError``.

    Guarantees
    ----------
    * Valuation logic lives in the engines and ``statements.py``; this
      class only loads data and builds metadata.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT resolve the caller's scope or permissions; it receives a
      ``ScopeFilter``.
    * Does NOT render HTML.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: InventoryValuationConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or InventoryValuationConfig.with_defaults()
        self._stock = StockSelector(session)
        self._parts = PartSelector(session)
        self._purchases = PurchaseSelector(session)

        logger.info(
            "inventory_valuation_service_initialized",
            extra={
                "gap_fill_method": self._config.gap_fill_method.value,
                "history_entries": self._config.history_entries,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _build_metadata(
        self,
        request: ValuationRequest,
        scope: ScopeFilter,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=REPORT_TYPE,
            as_on_date=request.as_on,
            generated_at=self._clock.now().isoformat(),
            tenant_id=scope.tenant_id,
            garage_scope=scope.describe(),
            search=request.search,
            gap_fill_method=self._config.gap_fill_method.value,
        )

    def _log_context(self, request: ValuationRequest, scope: ScopeFilter):
        return LogContext.bind(
            tenant_id=str(scope.tenant_id),
            actor_id=scope.actor_id,
            garage_scope=scope.describe(),
            as_on_date=request.as_on.isoformat(),
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def build_request(
        self,
        as_on: str | None = None,
        search: str | None = None,
        default_date: date | None = None,
    ) -> ValuationRequest:
        """
        Request from raw parameters; the default cutoff is today by the
        injected clock unless the caller passes its own "to" date.
        """
        return ValuationRequest.from_params(
            as_on,
            search,
            default_date or self._clock.today(),
        )

    def valuation_report(
        self,
        request: ValuationRequest,
        scope: ScopeFilter,
    ) -> ValuationReport:
        """
        Generate the inventory valuation report.

        Args:
            request: Cutoff date and optional part search.
            scope: Tenant/garage restriction.

        Returns:
            ValuationReport with one row per part in stock, ordered by
            part name, and totals over those rows.
        """
        with self._log_context(request, scope):
            stock = self._stock.parts_in_stock(scope, request.as_on, request.search)
            part_ids = list(stock)
            parts = self._parts.get_parts(part_ids)
            outbound = self._stock.outbound_quantities(part_ids, scope, request.as_on)
            histories = self._purchases.load_histories(part_ids, scope, request.as_on)

            report = build_valuation_report(
                parts,
                stock,
                outbound,
                histories,
                self._config,
                self._build_metadata(request, scope),
            )

            logger.info(
                "inventory_valuation_generated",
                extra={
                    "search": request.search,
                    "product_count": report.totals.product_count,
                    "total_weighted_value": str(report.totals.total_weighted_value),
                    "total_fifo_value": str(report.totals.total_fifo_value),
                    "gap_filled_rows": sum(1 for r in report.rows if r.gap_qty > 0),
                },
            )
            return report

    def export_csv(
        self,
        request: ValuationRequest,
        scope: ScopeFilter,
        export_key: str = VALUATION_EXPORT,
    ) -> CsvExport:
        """
        Render the report as a CSV download.

        Raises:
            ExportAccessDeniedError: scope.can_export_data is False.
            UnknownExportError: export_key is not ``valuation``.
        """
        with self._log_context(request, scope):
            if not scope.can_export_data:
                logger.warning(
                    "inventory_valuation_export_denied",
                    extra={"export_key": export_key},
                )
                raise ExportAccessDeniedError(REPORT_TYPE, actor_id=scope.actor_id)
            if export_key != VALUATION_EXPORT:
                raise UnknownExportError(REPORT_TYPE, export_key)

            report = self.valuation_report(request, scope)
            export = CsvExport(
                filename=export_filename(
                    self._config.export_filename_prefix, self._clock.now()
                ),
                content=render_csv(report),
                row_count=len(report.rows),
            )

            # Data-export audit trail
            logger.info(
                "inventory_valuation_exported",
                extra={
                    "export_key": export_key,
                    "filename": export.filename,
                    "row_count": export.row_count,
                    "search": request.search,
                },
            )
            return export

    def to_dict(self, report: ValuationReport) -> dict:
        """Convert a report to a JSON-serializable dict."""
        return render_to_dict(report)
