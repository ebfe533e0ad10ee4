"""
Pure inventory valuation transformation functions.

These functions turn selector output (parts, stock, outbound quantities,
purchase histories) into the valuation report.  ZERO I/O. ZERO side
effects beyond logging.

- No database access
- No clock access (generated_at arrives in the metadata)
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from garage_engines.valuation import FifoValuationCalculator, WeightedAverageCalculator
from garage_kernel.db.types import ZERO, quantize
from garage_kernel.domain.lots import EMPTY_HISTORY, PurchaseHistory
from garage_kernel.selectors.part_selector import PartDTO
from garage_modules.inventory_valuation.config import InventoryValuationConfig
from garage_modules.inventory_valuation.models import (
    ReportMetadata,
    ValuationReport,
    ValuationRow,
    ValuationTotals,
)


def format_amount(value: Decimal, decimal_places: int = 2) -> str:
    """Thousands-separated amount, e.g. ``1,234.50``."""
    return f"{quantize(value, decimal_places):,.{decimal_places}f}"


def summarize_history(history: PurchaseHistory, config: InventoryValuationConfig) -> str:
    """
    Most recent purchases as ``"YYYY-MM-DD @ 1,234.50 | ..."``.

    Shows up to ``config.history_entries`` lots, newest first.  An empty
    history renders ``config.empty_history_label``.
    """
    recent = history.most_recent(config.history_entries)
    if not recent:
        return config.empty_history_label
    return config.history_separator.join(
        f"{lot.lot_date.isoformat()} @ {format_amount(lot.unit_cost, config.money_decimal_places)}"
        for lot in recent
    )


def build_valuation_row(
    part: PartDTO,
    stock_qty: Decimal,
    outbound_qty: Decimal,
    history: PurchaseHistory,
    config: InventoryValuationConfig,
    wac: WeightedAverageCalculator,
    fifo: FifoValuationCalculator,
) -> ValuationRow:
    """Value one part with both costing methods."""
    qty = quantize(stock_qty, config.quantity_decimal_places)

    average = wac.calculate(
        history=history,
        stock_quantity=qty,
        standard_cost=part.standard_cost,
    )
    fifo_result = fifo.value(
        lots=history.lots,
        stock_quantity=qty,
        outbound_quantity=outbound_qty,
        average_cost=average.average_cost,
        standard_cost=part.standard_cost,
        part_id=part.id,
    )

    return ValuationRow(
        part_id=part.id,
        part_name=part.name,
        sku=part.sku,
        category_name=part.category_name or config.uncategorized_label,
        unit=part.unit,
        stock_qty=qty,
        avg_cost=average.average_cost,
        weighted_value=average.weighted_value,
        fifo_value=fifo_result.fifo_value,
        purchase_qty=quantize(history.total_quantity, config.quantity_decimal_places),
        history_summary=summarize_history(history, config),
        gap_qty=fifo_result.gap_quantity,
    )


def build_totals(
    rows: tuple[ValuationRow, ...],
    config: InventoryValuationConfig,
) -> ValuationTotals:
    """Running sums over the rows, each rounded once at the end."""
    total_qty = sum((r.stock_qty for r in rows), ZERO)
    total_weighted = sum((r.weighted_value for r in rows), ZERO)
    total_fifo = sum((r.fifo_value for r in rows), ZERO)
    return ValuationTotals(
        product_count=len(rows),
        total_stock_qty=quantize(total_qty, config.quantity_decimal_places),
        total_weighted_value=quantize(total_weighted, config.money_decimal_places),
        total_fifo_value=quantize(total_fifo, config.money_decimal_places),
    )


def build_valuation_report(
    parts: Mapping[UUID, PartDTO],
    stock: Mapping[UUID, Decimal],
    outbound: Mapping[UUID, Decimal],
    histories: Mapping[UUID, PurchaseHistory],
    config: InventoryValuationConfig,
    metadata: ReportMetadata,
) -> ValuationReport:
    """
    Assemble the valuation report.

    One row per part with stock > 0, in the order of ``parts`` (part name
    ascending as loaded).  Parts absent from ``stock`` or with
    non-positive stock are skipped.  Missing outbound or history entries
    mean zero outbound and no lots.
    """
    wac = WeightedAverageCalculator(
        cost_epsilon=config.cost_epsilon,
        cost_decimal_places=config.cost_decimal_places,
        money_decimal_places=config.money_decimal_places,
    )
    fifo = FifoValuationCalculator(
        gap_fill_method=config.gap_fill_method,
        money_decimal_places=config.money_decimal_places,
    )

    rows: list[ValuationRow] = []
    for part_id, part in parts.items():
        qty = stock.get(part_id, ZERO)
        if quantize(qty, config.quantity_decimal_places) <= ZERO:
            continue
        rows.append(
            build_valuation_row(
                part,
                qty,
                outbound.get(part_id, ZERO),
                histories.get(part_id, EMPTY_HISTORY),
                config,
                wac,
                fifo,
            )
        )

    row_tuple = tuple(rows)
    return ValuationReport(
        metadata=metadata,
        rows=row_tuple,
        totals=build_totals(row_tuple, config),
    )


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Decimal, UUID and date become strings, Enum becomes its value, and
    tuples become lists.
    """
    if obj is None:
        return None
    if isinstance(obj, (Decimal, UUID)):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
