from __future__ import annotations

import logging
from datetime import datetime

from openpyxl import load_workbook

from ipro.domain.errors import ValidationError
from ipro.domain.models import CashTransaction, InventoryItem

log = logging.getLogger(__name__)

ITEM_COLUMNS = ["id", "product_name", "variant", "sku", "closing_stock", "min_stock", "max_stock", "unit_cost", "unit_price"]
TXN_COLUMNS = ["id", "direction", "amount", "payment_method", "category", "description", "date"]


def _headers(ws, required: list[str]) -> dict[str, int]:
    headers = {}
    for col in range(1, ws.max_column + 1):
        v = ws.cell(row=1, column=col).value
        if isinstance(v, str):
            headers[v.strip().lower()] = col

    for r in required:
        if r not in headers:
            raise ValidationError(f"Missing column header in sheet {ws.title}: {r}")
    return headers


def _cell(ws, row: int, headers: dict[str, int], name: str):
    col = headers.get(name)
    if col is None:
        return None
    v = ws.cell(row=row, column=col).value
    if isinstance(v, datetime):
        return v.date().isoformat()
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class ExcelService:
    def __init__(self, stock_service, cashflow_service):
        self.stock = stock_service
        self.cashflow = cashflow_service

    def _sheet(self, wb, name: str):
        if name not in wb.sheetnames:
            raise ValidationError(f"Workbook has no '{name}' sheet.")
        return wb[name]

    def import_inventory_excel(self, path: str, sheet: str = "Inventory") -> tuple[int, int]:
        """
        Headers:
          id | product_name | variant | sku | closing_stock | min_stock | max_stock | unit_cost | unit_price [| warehouse]
        """
        ws = self._sheet(load_workbook(path, data_only=True), sheet)
        headers = _headers(ws, ITEM_COLUMNS)

        ok = 0
        skipped = 0
        for row in range(2, ws.max_row + 1):
            sku = _cell(ws, row, headers, "sku")
            if not sku:
                skipped += 1
                continue
            try:
                item = InventoryItem(
                    id=str(_cell(ws, row, headers, "id") or sku),
                    product_name=str(_cell(ws, row, headers, "product_name") or ""),
                    variant=str(_cell(ws, row, headers, "variant") or ""),
                    sku=str(sku),
                    closing_stock=_cell(ws, row, headers, "closing_stock"),
                    min_stock=_cell(ws, row, headers, "min_stock"),
                    max_stock=_cell(ws, row, headers, "max_stock"),
                    unit_cost=_cell(ws, row, headers, "unit_cost") or 0,
                    unit_price=_cell(ws, row, headers, "unit_price") or 0,
                    warehouse=_cell(ws, row, headers, "warehouse"),
                )
                self.stock.add_item(item)
                ok += 1
            except ValidationError as e:
                log.warning("Inventory import skipped row %s: %s", row, e)
                skipped += 1

        log.info("inventory_imported path=%s ok=%s skipped=%s", path, ok, skipped)
        return ok, skipped

    def import_transactions_excel(self, path: str, sheet: str = "Transactions") -> tuple[int, int]:
        """
        Headers:
          id | direction | amount | payment_method | category | description | date [| reference | counterparty | status]
        """
        ws = self._sheet(load_workbook(path, data_only=True), sheet)
        headers = _headers(ws, TXN_COLUMNS)

        ok = 0
        skipped = 0
        for row in range(2, ws.max_row + 1):
            txn_id = _cell(ws, row, headers, "id")
            amount = _cell(ws, row, headers, "amount")
            if txn_id is None or amount is None:
                skipped += 1
                continue
            try:
                txn = CashTransaction(
                    id=str(txn_id),
                    direction=str(_cell(ws, row, headers, "direction") or "").lower(),
                    amount=amount,
                    payment_method=str(_cell(ws, row, headers, "payment_method") or "").lower(),
                    category=str(_cell(ws, row, headers, "category") or ""),
                    description=str(_cell(ws, row, headers, "description") or ""),
                    date=str(_cell(ws, row, headers, "date") or ""),
                    reference=_cell(ws, row, headers, "reference"),
                    counterparty=_cell(ws, row, headers, "counterparty"),
                    status=str(_cell(ws, row, headers, "status") or "completed").lower(),
                )
                self.cashflow.record(txn)
                ok += 1
            except ValidationError as e:
                log.warning("Transaction import skipped row %s: %s", row, e)
                skipped += 1

        log.info("transactions_imported path=%s ok=%s skipped=%s", path, ok, skipped)
        return ok, skipped
