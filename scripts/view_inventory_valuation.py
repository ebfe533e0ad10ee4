#!/usr/bin/env python3
"""
View or export the inventory valuation report from the database.

Connects to DATABASE_URL, values every stocked part of a tenant at the
given date (weighted average and FIFO), and prints the table with totals.
With --csv the same report is written as the CSV download.

Usage:
    DATABASE_URL=postgresql://... python3 scripts/view_inventory_valuation.py \\
        --tenant 6f1c... [--garage 91ab...] [--as-on 2025-06-30] \\
        [--search filter] [--csv out.csv] [--json]
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from uuid import UUID

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 132


def _fmt(v) -> str:
    return f"{v:,.2f}"


def print_report(report) -> None:
    meta = report.metadata
    print("=" * W)
    print(f"  INVENTORY VALUATION  --  as on {meta.as_on_date}  ({meta.garage_scope})")
    if meta.search:
        print(f"  Search: {meta.search}")
    print("=" * W)
    print(
        f"  {'Part':<28}{'SKU':<14}{'Category':<16}{'Unit':<6}"
        f"{'Qty':>10}{'Avg Cost':>12}{'Weighted':>14}{'FIFO':>14}{'Purchased':>12}"
    )
    print(f"  {'-' * (W - 2)}")
    for row in report.rows:
        print(
            f"  {row.part_name[:27]:<28}{row.sku[:13]:<14}{row.category_name[:15]:<16}{row.unit[:5]:<6}"
            f"{row.stock_qty:>10}{row.avg_cost:>12}{_fmt(row.weighted_value):>14}"
            f"{_fmt(row.fifo_value):>14}{row.purchase_qty:>12}"
        )
        print(f"      history: {row.history_summary}")
    print(f"  {'-' * (W - 2)}")
    totals = report.totals
    print(
        f"  {'TOTALS (' + str(totals.product_count) + ' parts)':<64}"
        f"{totals.total_stock_qty:>10}{'':>12}{_fmt(totals.total_weighted_value):>14}"
        f"{_fmt(totals.total_fifo_value):>14}"
    )
    print()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Inventory valuation (weighted average and FIFO) at a cutoff date.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--tenant", type=UUID, required=True, help="Tenant id")
    parser.add_argument(
        "--garage",
        type=UUID,
        default=None,
        help="Restrict to one garage (default: all active garages of the tenant)",
    )
    parser.add_argument(
        "--as-on",
        type=str,
        default=None,
        help="Cutoff date YYYY-MM-DD (default: today; malformed values fall back to today)",
    )
    parser.add_argument("--search", type=str, default=None, help="Part name or SKU filter")
    parser.add_argument("--csv", type=Path, default=None, help="Write the CSV export to this path")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding inventory_valuation.yaml (default: garage_config/sets)",
    )
    parser.add_argument("--verbose", action="store_true", help="Emit JSON logs to stderr")
    args = parser.parse_args()

    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        print("  ERROR: DATABASE_URL is not set.", file=sys.stderr)
        return 1

    if not args.verbose:
        logging.disable(logging.CRITICAL)

    from garage_config import get_module_config
    from garage_kernel.db.engine import init_engine_from_url, snapshot_scope
    from garage_kernel.domain.clock import SystemClock
    from garage_kernel.domain.scope import ScopeFilter
    from garage_kernel.exceptions import ExportError
    from garage_kernel.logging_config import LogContext
    from garage_kernel.selectors.garage_selector import GarageSelector
    from garage_modules.inventory_valuation import (
        InventoryValuationConfig,
        InventoryValuationService,
    )

    config = InventoryValuationConfig.from_dict(get_module_config("inventory_valuation", args.config_dir))

    try:
        init_engine_from_url(database_url, echo=False)
    except Exception as exc:
        print(f"  ERROR: Could not connect: {exc}", file=sys.stderr)
        return 1

    with LogContext.bind(actor_id="cli"), snapshot_scope() as session:
        if args.garage is not None:
            scope = ScopeFilter.for_garage(
                args.tenant, args.garage, can_export_data=True, actor_id="cli"
            )
        else:
            garages = GarageSelector(session).active_garages(args.tenant)
            scope = ScopeFilter(
                tenant_id=args.tenant,
                garage_ids=frozenset(g.id for g in garages),
                can_export_data=True,
                actor_id="cli",
            )

        svc = InventoryValuationService(session=session, clock=SystemClock(), config=config)
        request = svc.build_request(as_on=args.as_on, search=args.search)

        if args.csv is not None:
            try:
                export = svc.export_csv(request, scope)
            except ExportError as exc:
                print(f"  ERROR: {exc}", file=sys.stderr)
                return 2
            args.csv.write_text(export.content, encoding="utf-8")
            print(f"Wrote {export.row_count} rows to {args.csv} ({export.filename})")
            return 0

        report = svc.valuation_report(request, scope)
        if args.json:
            print(json.dumps(svc.to_dict(report), indent=2))
        else:
            print_report(report)

    return 0


if __name__ == "__main__":
    sys.exit(main())
