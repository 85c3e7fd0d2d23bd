from .models import (
    CashTransaction,
    Direction,
    InventoryItem,
    MovementKind,
    Order,
    OrderLineItem,
    PaymentMethod,
    StockMovement,
    StockStatus,
    TransferLine,
    TransactionStatus,
)
from .errors import (
    AppError,
    DivisionByZeroError,
    DuplicateLineItemError,
    InsufficientStockError,
    InvalidRangeError,
    InvalidTransitionError,
    NegativeQuantityError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "CashTransaction",
    "Direction",
    "InventoryItem",
    "MovementKind",
    "Order",
    "OrderLineItem",
    "PaymentMethod",
    "StockMovement",
    "StockStatus",
    "TransferLine",
    "TransactionStatus",
    "AppError",
    "DivisionByZeroError",
    "DuplicateLineItemError",
    "InsufficientStockError",
    "InvalidRangeError",
    "InvalidTransitionError",
    "NegativeQuantityError",
    "NotFoundError",
    "ValidationError",
]
