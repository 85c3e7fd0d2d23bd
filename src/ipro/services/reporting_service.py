from __future__ import annotations

import logging
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from ipro.domain.models import CashTransaction, InventoryItem, PaymentMethod

log = logging.getLogger(__name__)

METHOD_LABELS = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.MOBILE_MONEY: "Mobile Money",
    PaymentMethod.BANK: "Bank Transfer",
}


class ReportingService:
    def __init__(self, stock_service, cashflow_aggregator, currency: str = "RWF"):
        self.stock = stock_service
        self.summarize = cashflow_aggregator
        self.currency = currency

    def export_metrics_excel(
        self,
        path: str,
        items: Iterable[InventoryItem],
        transactions: Iterable[CashTransaction],
    ) -> None:
        items = list(items)
        transactions = list(transactions)
        wb = Workbook()
        money_fmt = "#,##0"

        def money(cell):
            cell.number_format = money_fmt

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, start_col: int, end_row: int, end_col: int):
            ref = f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        summary = self.summarize(transactions)
        inventory = self.stock.inventory_summary(items)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Summary"
        ws["A1"].font = Font(bold=True, size=14)
        ws["A3"] = "Currency"
        ws["B3"] = self.currency

        rows = [
            ("Total inflow", summary.total_inflow, "money"),
            ("Total outflow", summary.total_outflow, "money"),
            ("Net cashflow", summary.net, "money"),
            ("Cashflow", summary.sign, "text"),
        ]
        rows += [(f"{METHOD_LABELS[m]} balance", v, "money") for m, v in summary.balances.items()]
        rows += [
            ("Stock value", inventory.total_stock_value, "money"),
            ("Low stock items", inventory.low_stock_count, "int"),
            ("Out of stock items", inventory.out_of_stock_count, "int"),
            ("Overstock items", inventory.overstock_count, "int"),
        ]

        start_row = 5
        for i, (label, val, kind) in enumerate(rows):
            r = start_row + i
            ws[f"A{r}"] = label
            if kind == "money":
                ws[f"B{r}"] = float(val)
                money(ws[f"B{r}"])
            else:
                ws[f"B{r}"] = val

        set_widths(ws, {"A": 28, "B": 24})

        # -------- 2) Inventory --------
        ws2 = wb.create_sheet("Inventory")
        ws2.append([
            "SKU", "Product", "Variant", "Warehouse",
            "Closing Stock", "Min", "Max", "Fill %", "Status", "Stock Value",
        ])
        bold_row(ws2, 1)

        for out_row, item in enumerate(items, start=2):
            level = self.stock.stock_level(item)
            fill = round(float(level.fill_percent), 1) if level.fill_percent is not None else "n/a"
            ws2.append([
                item.sku, item.product_name, item.variant, item.warehouse or "",
                int(item.closing_stock), int(item.min_stock), int(item.max_stock),
                fill, level.status.value, float(item.stock_value),
            ])
            money(ws2[f"J{out_row}"])

        ws2.freeze_panes = "A2"
        set_widths(ws2, {
            "A": 14, "B": 24, "C": 12, "D": 16, "E": 14,
            "F": 8, "G": 8, "H": 8, "I": 14, "J": 16,
        })
        if ws2.max_row >= 2:
            add_table(ws2, "InventoryLevels", 1, 1, ws2.max_row, 10)

        # -------- 3) Outflow categories --------
        ws3 = wb.create_sheet("Categories")
        ws3.append(["Category", "Total"])
        bold_row(ws3, 1)
        for out_row, (category, total) in enumerate(summary.outflow_by_category.items(), start=2):
            ws3.append([category, float(total)])
            money(ws3[f"B{out_row}"])

        ws3.freeze_panes = "A2"
        set_widths(ws3, {"A": 26, "B": 18})
        if ws3.max_row >= 2:
            add_table(ws3, "OutflowCategories", 1, 1, ws3.max_row, 2)

        wb.save(path)
        log.info("metrics_report_exported path=%s items=%s transactions=%s", path, len(items), len(transactions))
