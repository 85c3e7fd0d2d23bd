from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ipro.application.container import build_container
from ipro.config import get_app_paths, load_settings
from ipro.domain.money import format_currency
from ipro.logging_config import setup_logging

log = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ipro-report", description="Export InventoryPro metrics from a workbook.")
    parser.add_argument("workbook", help="xlsx file with 'Inventory' and 'Transactions' sheets")
    parser.add_argument("-o", "--output", help="report path (default: reports dir)")
    args = parser.parse_args(argv)

    paths = get_app_paths()
    settings = load_settings(paths.settings_path)
    setup_logging(paths.logs_dir, level=settings.log_level, console=True)

    container = build_container(settings)
    items_ok, items_skipped = container.excel.import_inventory_excel(args.workbook)
    txns_ok, txns_skipped = container.excel.import_transactions_excel(args.workbook)

    output = Path(args.output) if args.output else paths.reports_dir / f"{Path(args.workbook).stem}_metrics.xlsx"
    container.reporting.export_metrics_excel(
        str(output),
        container.repo.list_items(),
        container.repo.list_transactions(),
    )

    summary = container.cashflow.summary()
    print(f"Items: {items_ok} loaded, {items_skipped} skipped")
    print(f"Transactions: {txns_ok} loaded, {txns_skipped} skipped")
    print(f"Net cashflow: {format_currency(summary.net, settings.currency, settings.pricing.minor_digits)}")
    print(f"Report: {output}")
    log.info("report_cli_done workbook=%s output=%s", args.workbook, output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
