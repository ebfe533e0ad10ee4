"""
CSV rendering for the inventory valuation report.

The column set and order are fixed; spreadsheets built on top of the
download depend on them.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime

from garage_modules.inventory_valuation.models import ValuationReport, ValuationRow

CSV_HEADERS: tuple[str, ...] = (
    "Part",
    "SKU",
    "Category",
    "Unit",
    "Total Qty",
    "Avg Purchase Cost",
    "Weighted Value",
    "FIFO Value",
    "Total Purchased Qty",
    "Purchase History",
)


def csv_record(row: ValuationRow) -> list[str]:
    return [
        row.part_name,
        row.sku,
        row.category_name,
        row.unit,
        str(row.stock_qty),
        str(row.avg_cost),
        str(row.weighted_value),
        str(row.fifo_value),
        str(row.purchase_qty),
        row.history_summary,
    ]


def render_csv(report: ValuationReport) -> str:
    """Header line plus one line per report row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)
    for row in report.rows:
        writer.writerow(csv_record(row))
    return buffer.getvalue()


def export_filename(prefix: str, generated_at: datetime) -> str:
    """``<prefix>_YYYYMMDD_HHMMSS.csv`` from the generation timestamp."""
    return f"{prefix}_{generated_at:%Y%m%d_%H%M%S}.csv"
