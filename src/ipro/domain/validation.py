from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Callable, Iterable, TypeVar

from ipro.domain.errors import (
    InvalidRangeError,
    NegativeQuantityError,
    ValidationError,
)
from ipro.domain.models import (
    CashTransaction,
    Direction,
    InventoryItem,
    MovementKind,
    OrderLineItem,
    PaymentMethod,
    StockMovement,
    TransactionStatus,
)
from ipro.domain.money import HUNDRED, ZERO, to_amount

T = TypeVar("T")


def as_int(value: object, label: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be an integer.")
    if isinstance(value, int):
        return value
    amount = to_amount(value)
    if amount != amount.to_integral_value():
        raise ValidationError(f"{label} must be an integer. Received: {value!r}")
    return int(amount)


def _as_enum(enum_cls, value: object, label: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationError(f"Unknown {label}: {value!r}") from e


def validate_inventory_item(item: InventoryItem) -> InventoryItem:
    closing = as_int(item.closing_stock, "Closing stock")
    min_stock = as_int(item.min_stock, "Min stock")
    max_stock = as_int(item.max_stock, "Max stock")
    unit_cost = to_amount(item.unit_cost)
    unit_price = to_amount(item.unit_price)

    if closing < 0:
        raise NegativeQuantityError(f"Closing stock must be >= 0 for {item.sku}. Received: {closing}")
    if min_stock < 0 or max_stock < 0:
        raise NegativeQuantityError(f"Stock thresholds must be >= 0 for {item.sku}.")
    if min_stock > max_stock:
        raise InvalidRangeError(f"Min stock ({min_stock}) exceeds max stock ({max_stock}) for {item.sku}.")
    if unit_cost < 0 or unit_price < 0:
        raise NegativeQuantityError(f"Unit cost and price must be >= 0 for {item.sku}.")

    return replace(
        item,
        closing_stock=closing,
        min_stock=min_stock,
        max_stock=max_stock,
        unit_cost=unit_cost,
        unit_price=unit_price,
    )


def validate_stock_movement(movement: StockMovement) -> StockMovement:
    kind = _as_enum(MovementKind, movement.kind, "movement kind")
    delta = as_int(movement.qty_delta, "Quantity delta")
    if kind == MovementKind.PURCHASE and delta < 0:
        raise NegativeQuantityError(f"Purchase {movement.reference} cannot remove stock.")
    if kind == MovementKind.SALE and delta > 0:
        raise ValidationError(f"Sale {movement.reference} cannot add stock.")
    return replace(movement, kind=kind, qty_delta=delta)


def validate_transaction(txn: CashTransaction) -> CashTransaction:
    direction = _as_enum(Direction, txn.direction, "direction")
    method = _as_enum(PaymentMethod, txn.payment_method, "payment method")
    status = _as_enum(TransactionStatus, txn.status, "transaction status")
    amount = to_amount(txn.amount)
    if amount < 0:
        raise NegativeQuantityError(f"Amount must be >= 0 for transaction {txn.id}. Received: {amount}")
    if not (txn.category or "").strip():
        raise ValidationError(f"Category is required for transaction {txn.id}.")
    return replace(txn, direction=direction, payment_method=method, status=status, amount=amount)


def validate_line_item(item: OrderLineItem) -> OrderLineItem:
    qty = as_int(item.quantity, "Quantity")
    unit_price = to_amount(item.unit_price)
    if qty < 1:
        raise NegativeQuantityError(f"Quantity must be >= 1 for {item.product_name}. Received: {qty}")
    if unit_price < 0:
        raise NegativeQuantityError(f"Unit price must be >= 0 for {item.product_name}.")
    return replace(item, quantity=qty, unit_price=unit_price)


def validate_discount(discount_percent: object) -> Decimal:
    pct = to_amount(discount_percent)
    if pct < ZERO or pct > HUNDRED:
        raise InvalidRangeError(f"Discount must be within [0, 100]. Received: {pct}")
    return pct


def partition_valid(
    records: Iterable[T], validator: Callable[[T], T]
) -> tuple[list[T], list[tuple[T, ValidationError]]]:
    """Split records into validated ones and (record, error) rejects.

    Whether rejects abort the computation is the caller's decision.
    """
    valid: list[T] = []
    rejected: list[tuple[T, ValidationError]] = []
    for record in records:
        try:
            valid.append(validator(record))
        except ValidationError as e:
            rejected.append((record, e))
    return valid, rejected
