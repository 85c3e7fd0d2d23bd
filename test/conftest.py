import logging
import sys
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ipro.domain.models import (  # noqa: E402
    CashTransaction,
    Direction,
    InventoryItem,
    PaymentMethod,
    TransactionStatus,
)


def make_item(sku: str, stock: int, min_stock: int, max_stock: int, cost="500", price="850", **kw) -> InventoryItem:
    return InventoryItem(
        id=kw.pop("id", sku),
        product_name=kw.pop("product_name", "Groundnuts"),
        variant=kw.pop("variant", "TIRA"),
        sku=sku,
        closing_stock=stock,
        min_stock=min_stock,
        max_stock=max_stock,
        unit_cost=Decimal(cost),
        unit_price=Decimal(price),
        **kw,
    )


def make_txn(txn_id: str, direction: str, amount, method: str, category: str = "Sales Revenue", **kw) -> CashTransaction:
    return CashTransaction(
        id=txn_id,
        direction=Direction(direction),
        amount=Decimal(amount),
        payment_method=PaymentMethod(method),
        category=category,
        description=kw.pop("description", f"txn {txn_id}"),
        date=kw.pop("date", "2025-09-12"),
        status=kw.pop("status", TransactionStatus.COMPLETED),
        **kw,
    )


@pytest.fixture
def sample_transactions() -> list[CashTransaction]:
    return [
        make_txn("1", "inflow", 850000, "cash", description="Groundnuts TIRA sales - Kigali Market", reference="TXN-001234"),
        make_txn("2", "inflow", 450000, "momo", description="Groundnuts WHITE sales - Musanze", reference="TXN-001235"),
        make_txn("3", "outflow", 320000, "cash", category="Inventory Purchase",
                 description="Purchase raw groundnuts from farmers", reference="PUR-001"),
    ]


@pytest.fixture(autouse=True)
def restore_logging():
    from ipro.logging_config import LOG_CHANNELS

    loggers = [logging.getLogger()] + [logging.getLogger(name) for name in LOG_CHANNELS]
    saved = [(lg, list(lg.handlers), lg.level) for lg in loggers]
    yield
    for lg, handlers, level in saved:
        for h in list(lg.handlers):
            if h not in handlers:
                lg.removeHandler(h)
                h.close()
        lg.setLevel(level)
