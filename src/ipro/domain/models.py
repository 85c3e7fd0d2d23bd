from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Optional


class StockStatus(str, Enum):
    OUT_OF_STOCK = "out-of-stock"
    LOW_STOCK = "low-stock"
    OVERSTOCK = "overstock"
    NORMAL = "normal"


class MovementKind(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


class Direction(str, Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class PaymentMethod(str, Enum):
    CASH = "cash"
    MOBILE_MONEY = "momo"
    BANK = "bank"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


INFLOW_CATEGORIES = (
    "Sales Revenue",
    "Other Income",
    "Investment Income",
    "Refunds",
)

OUTFLOW_CATEGORIES = (
    "Inventory Purchase",
    "Operating Expenses",
    "Marketing",
    "Transportation",
    "Utilities",
    "Equipment",
    "Salaries",
    "Rent",
    "Other Expenses",
)


@dataclass(frozen=True)
class InventoryItem:
    id: str
    product_name: str
    variant: str
    sku: str
    closing_stock: int
    min_stock: int
    max_stock: int
    unit_cost: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    warehouse: Optional[str] = None

    @property
    def stock_value(self) -> Decimal:
        return self.unit_cost * self.closing_stock


@dataclass(frozen=True)
class StockMovement:
    id: str
    item_id: str
    kind: MovementKind
    qty_delta: int
    date: str
    reference: str
    warehouse: Optional[str] = None


@dataclass(frozen=True)
class TransferLine:
    sku: str
    quantity: int


@dataclass(frozen=True)
class CashTransaction:
    id: str
    direction: Direction
    amount: Decimal
    payment_method: PaymentMethod
    category: str
    description: str
    date: str
    reference: Optional[str] = None
    counterparty: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED

    def complete(self) -> "CashTransaction":
        return replace(self, status=TransactionStatus.COMPLETED)


@dataclass(frozen=True)
class OrderLineItem:
    product_id: str
    product_name: str
    unit_price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    customer: str
    items: tuple[OrderLineItem, ...] = ()
    due_date: Optional[str] = None
    discount_percent: Decimal = Decimal("0")
    notes: Optional[str] = None


@dataclass(frozen=True)
class StockLevel:
    item_id: str
    status: StockStatus
    fill_percent: Optional[Decimal]


@dataclass(frozen=True)
class InventorySummary:
    item_count: int
    total_stock_value: Decimal
    status_counts: dict[StockStatus, int] = field(default_factory=dict)

    @property
    def low_stock_count(self) -> int:
        return self.status_counts.get(StockStatus.LOW_STOCK, 0)

    @property
    def out_of_stock_count(self) -> int:
        return self.status_counts.get(StockStatus.OUT_OF_STOCK, 0)

    @property
    def overstock_count(self) -> int:
        return self.status_counts.get(StockStatus.OVERSTOCK, 0)


@dataclass(frozen=True)
class CashflowSummary:
    total_inflow: Decimal
    total_outflow: Decimal
    net: Decimal
    balances: dict[PaymentMethod, Decimal]
    outflow_by_category: dict[str, Decimal]

    @property
    def sign(self) -> str:
        return "positive" if self.net >= 0 else "negative"


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    discount: Decimal
    total: Decimal


@dataclass(frozen=True)
class ProductMargin:
    sku: str
    unit_margin: Decimal
    margin_percent: Decimal


@dataclass(frozen=True)
class SalesPerformance:
    revenue: Decimal
    quantity: int
    profit: Decimal
    margin_percent: Decimal
