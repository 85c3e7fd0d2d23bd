from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from ipro.config import PricingConfig
from ipro.domain.errors import DuplicateLineItemError, NotFoundError
from ipro.domain.models import Order, OrderLineItem, OrderTotals
from ipro.domain.money import HUNDRED, ZERO, quantize_amount, to_amount
from ipro.domain.validation import as_int, validate_discount, validate_line_item

log = logging.getLogger("ipro.orders")


def price_order(
    line_items: Iterable[OrderLineItem],
    discount_percent: object = 0,
    config: Optional[PricingConfig] = None,
) -> OrderTotals:
    """
    subtotal = sum(unit_price * qty)
    tax      = subtotal * tax_rate
    shipping = shipping_fee if subtotal > 0 else 0
    discount = subtotal * pct / 100
    total    = subtotal + tax + shipping - discount
    """
    config = config or PricingConfig()
    pct = validate_discount(discount_percent)
    items = [validate_line_item(li) for li in line_items]

    subtotal = sum((li.line_total for li in items), ZERO)
    tax = quantize_amount(subtotal * config.tax_rate, config.minor_digits)
    shipping = config.shipping_fee if subtotal > 0 else ZERO
    discount = quantize_amount(subtotal * pct / HUNDRED, config.minor_digits)
    total = subtotal + tax + shipping - discount

    return OrderTotals(subtotal=subtotal, tax=tax, shipping=shipping, discount=discount, total=total)


def _clamp(value: Decimal, low: Decimal, high: Optional[Decimal] = None) -> Decimal:
    value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


class OrderDraft:
    """Order being composed; totals are recomputed from scratch on every read."""

    def __init__(self, customer: str = "", config: Optional[PricingConfig] = None):
        self.customer = customer
        self.config = config or PricingConfig()
        self.due_date: Optional[str] = None
        self.notes: Optional[str] = None
        self._items: list[OrderLineItem] = []
        self._discount = ZERO

    @property
    def items(self) -> list[OrderLineItem]:
        return list(self._items)

    @property
    def discount_percent(self) -> Decimal:
        return self._discount

    def _index(self, product_id: str) -> int:
        for idx, li in enumerate(self._items):
            if li.product_id == product_id:
                return idx
        raise NotFoundError(f"Product {product_id} is not in this order.")

    def add_product(self, product_id: str, product_name: str, unit_price: object) -> OrderLineItem:
        if any(li.product_id == product_id for li in self._items):
            raise DuplicateLineItemError(f"{product_name} is already in this order.")
        item = validate_line_item(OrderLineItem(product_id, product_name, to_amount(unit_price), 1))
        self._items.append(item)
        return item

    def update_quantity(self, product_id: str, quantity: object) -> OrderLineItem:
        idx = self._index(product_id)
        current = self._items[idx]
        qty = as_int(quantity, "Quantity")
        if qty < 1:
            return current
        updated = OrderLineItem(current.product_id, current.product_name, current.unit_price, qty)
        self._items[idx] = updated
        return updated

    def update_unit_price(self, product_id: str, unit_price: object) -> OrderLineItem:
        idx = self._index(product_id)
        current = self._items[idx]
        price = _clamp(to_amount(unit_price), ZERO)
        updated = OrderLineItem(current.product_id, current.product_name, price, current.quantity)
        self._items[idx] = updated
        return updated

    def remove_item(self, product_id: str) -> None:
        del self._items[self._index(product_id)]

    def set_discount(self, discount_percent: object) -> Decimal:
        self._discount = _clamp(to_amount(discount_percent), ZERO, HUNDRED)
        return self._discount

    @property
    def totals(self) -> OrderTotals:
        return price_order(self._items, self._discount, self.config)

    @property
    def total_units(self) -> int:
        return sum(li.quantity for li in self._items)

    @property
    def average_unit_price(self) -> Decimal:
        units = self.total_units
        if units == 0:
            return ZERO
        return self.totals.subtotal / units

    def to_order(self) -> Order:
        order = Order(
            customer=self.customer,
            items=tuple(self._items),
            due_date=self.due_date,
            discount_percent=self._discount,
            notes=self.notes,
        )
        totals = self.totals
        log.info(
            "order_drafted customer=%s lines=%s subtotal=%s total=%s",
            self.customer, len(order.items), totals.subtotal, totals.total,
        )
        return order
