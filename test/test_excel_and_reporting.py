from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from conftest import make_item
from ipro.application.container import build_container
from ipro.config import PricingConfig, Settings
from ipro.domain.errors import ValidationError
from ipro.domain.models import PaymentMethod, StockStatus
from ipro.main import main
from ipro.services.analytics_service import AnalyticsService, margin_percent


def _write_workbook(path: Path) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "Inventory"
    ws.append(["id", "product_name", "variant", "sku", "closing_stock", "min_stock", "max_stock",
               "unit_cost", "unit_price", "warehouse"])
    ws.append(["1", "Groundnuts", "TIRA", "GN-TIRA-001", 1250, 500, 2000, 600, 850, "Kigali Main"])
    ws.append(["2", "Groundnuts", "WHITE", "GN-WHITE-001", 180, 500, 1500, 650, 900, "Kigali Main"])
    ws.append(["3", "Groundnuts", "MIXED", "GN-MIX-001", 0, 300, 900, 550, 800, "Musanze"])
    ws.append(["4", "Rice", "Premium", "RC-PRM-001", 10, 50, 20, 1000, 1500, "Musanze"])
    ws.append(["5", "Beans", "Red", None, 40, 10, 100, 700, 950, "Musanze"])

    ts = wb.create_sheet("Transactions")
    ts.append(["id", "direction", "amount", "payment_method", "category", "description", "date",
               "reference", "counterparty", "status"])
    ts.append(["1", "inflow", 850000, "cash", "Sales Revenue", "Groundnuts TIRA sales", "2025-09-12",
               "TXN-001234", "Kigali Fresh Market", "completed"])
    ts.append(["2", "inflow", 450000, "momo", "Sales Revenue", "Groundnuts WHITE sales", "2025-09-11",
               "TXN-001235", None, "Completed"])
    ts.append(["3", "outflow", 320000, "cash", "Inventory Purchase", "Raw groundnuts", "2025-09-11",
               "PUR-001", "Muhanga Farmers Cooperative", None])
    ts.append(["4", "outflow", -10, "bank", "Rent", "Bad row", "2025-09-10", None, None, None])
    wb.save(path)


def test_excel_import_validates_rows_at_the_boundary(tmp_path: Path):
    path = tmp_path / "data.xlsx"
    _write_workbook(path)
    container = build_container()

    assert container.excel.import_inventory_excel(str(path)) == (3, 2)
    assert container.excel.import_transactions_excel(str(path)) == (3, 1)

    summary = container.cashflow.summary()
    assert summary.net == 980_000
    assert summary.balances[PaymentMethod.CASH] == 530_000

    levels = {lvl.item_id: lvl.status for lvl in container.stock.list_levels()}
    assert levels == {"1": StockStatus.NORMAL, "2": StockStatus.LOW_STOCK, "3": StockStatus.OUT_OF_STOCK}


def test_excel_import_requires_headers(tmp_path: Path):
    wb = Workbook()
    wb.active.title = "Inventory"
    wb.active.append(["sku", "name"])
    path = tmp_path / "bad.xlsx"
    wb.save(path)

    with pytest.raises(ValidationError, match="Missing column header"):
        build_container().excel.import_inventory_excel(str(path))


def test_metrics_report_sheets(tmp_path: Path):
    container = build_container()
    items = [make_item("GN-TIRA", 1250, 500, 2000), make_item("ZERO", 0, 0, 0)]
    out = tmp_path / "report.xlsx"

    container.reporting.export_metrics_excel(str(out), items, [])

    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "Inventory", "Categories"]
    inv = wb["Inventory"]
    assert inv["I2"].value == "normal"
    assert inv["H2"].value == 62.5
    assert inv["H3"].value == "n/a"


def test_cli_writes_report(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "data.xlsx"
    _write_workbook(path)
    out = tmp_path / "metrics.xlsx"

    assert main([str(path), "-o", str(out)]) == 0
    assert out.exists()
    assert "RWF 980,000" in capsys.readouterr().out


def test_container_order_uses_configured_pricing():
    settings = Settings(pricing=PricingConfig(tax_rate=Decimal("0"), shipping_fee=Decimal("0")))
    draft = build_container(settings).new_order("Kigali Fresh Market")
    draft.add_product("1", "Groundnuts TIRA", 850)

    assert draft.totals.total == 850


def test_margins_and_sales_performance():
    assert margin_percent(68000, 425000) == Decimal("16.0")
    assert margin_percent(0, 0) == 0

    analytics = AnalyticsService()
    margin = analytics.product_margin(make_item("GN-TIRA", 1, 0, 10, cost="600", price="850"))
    assert margin.unit_margin == 250
    assert margin.margin_percent == Decimal("29.4")

    perf = analytics.sales_performance([
        {"revenue": 425000, "quantity": 500, "profit": 68000},
        {"revenue": 270000, "quantity": 300, "profit": 44000},
        {"revenue": 0, "quantity": 0, "profit": 0},
    ])
    assert perf.revenue == 695000
    assert perf.quantity == 800
    assert perf.profit == 112000
    assert perf.margin_percent == Decimal("16.1")


def test_excel_import_keeps_first_row_for_repeated_id(tmp_path: Path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Inventory"
    ws.append(["id", "product_name", "variant", "sku", "closing_stock", "min_stock", "max_stock",
               "unit_cost", "unit_price"])
    ws.append(["1", "Groundnuts", "TIRA", "GN-TIRA-001", 1250, 500, 2000, 600, 850])
    ws.append(["1", "Groundnuts", "WHITE", "GN-WHITE-001", 180, 500, 1500, 650, 900])
    path = tmp_path / "dupes.xlsx"
    wb.save(path)

    container = build_container()
    assert container.excel.import_inventory_excel(str(path)) == (1, 1)
    assert container.repo.get_item("1").sku == "GN-TIRA-001"
    assert container.repo.get_item("1").closing_stock == 1250
