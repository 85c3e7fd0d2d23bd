from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional

from ipro.domain.errors import (
    DivisionByZeroError,
    InvalidRangeError,
    InsufficientStockError,
    NegativeQuantityError,
    NotFoundError,
    ValidationError,
)
from ipro.domain.models import (
    InventoryItem,
    InventorySummary,
    MovementKind,
    StockLevel,
    StockMovement,
    StockStatus,
    TransferLine,
)
from ipro.domain.money import HUNDRED, ZERO
from ipro.domain.validation import as_int, validate_inventory_item, validate_stock_movement
from ipro.repositories.contracts import StockRepository

log = logging.getLogger(__name__)


def _check_thresholds(min_stock: int, max_stock: int) -> None:
    if min_stock < 0 or max_stock < 0:
        raise NegativeQuantityError(f"Stock thresholds must be >= 0. Received: min={min_stock} max={max_stock}")
    if min_stock > max_stock:
        raise InvalidRangeError(f"Min stock ({min_stock}) exceeds max stock ({max_stock}).")


def stock_status(closing_stock: int, min_stock: int, max_stock: int) -> StockStatus:
    if closing_stock < 0:
        raise NegativeQuantityError(f"Closing stock must be >= 0. Received: {closing_stock}")
    _check_thresholds(min_stock, max_stock)

    # Order matters: zero stock is out-of-stock even when min_stock is 0 too.
    if closing_stock == 0:
        return StockStatus.OUT_OF_STOCK
    if closing_stock <= min_stock:
        return StockStatus.LOW_STOCK
    if closing_stock >= max_stock:
        return StockStatus.OVERSTOCK
    return StockStatus.NORMAL


def stock_fill_percentage(closing_stock: int, max_stock: int) -> Decimal:
    """Share of max_stock currently on hand, clamped to [0, 100]."""
    if closing_stock < 0:
        raise NegativeQuantityError(f"Closing stock must be >= 0. Received: {closing_stock}")
    if max_stock < 0:
        raise NegativeQuantityError(f"Max stock must be >= 0. Received: {max_stock}")
    if max_stock == 0:
        raise DivisionByZeroError("Max stock is 0; fill percentage is undefined.")
    pct = Decimal(closing_stock) / Decimal(max_stock) * HUNDRED
    return min(pct, HUNDRED)


def closing_stock(beginning: int, purchased: int, sold: int, adjustments: int = 0) -> int:
    if beginning < 0 or purchased < 0 or sold < 0:
        raise NegativeQuantityError("Beginning, purchased and sold quantities must be >= 0.")
    result = beginning + purchased - sold + adjustments
    if result < 0:
        raise InsufficientStockError(f"Closing stock would be negative ({result}).")
    return result


class StockService:
    def __init__(self, repo: Optional[StockRepository] = None):
        self.repo = repo

    def stock_level(self, item: InventoryItem) -> StockLevel:
        status = stock_status(item.closing_stock, item.min_stock, item.max_stock)
        try:
            fill: Optional[Decimal] = stock_fill_percentage(item.closing_stock, item.max_stock)
        except DivisionByZeroError:
            fill = None
        return StockLevel(item_id=item.id, status=status, fill_percent=fill)

    def classify(self, items: Iterable[InventoryItem]) -> list[StockLevel]:
        return [self.stock_level(item) for item in items]

    def items_with_status(self, items: Iterable[InventoryItem], status: StockStatus) -> list[InventoryItem]:
        return [
            item for item in items
            if stock_status(item.closing_stock, item.min_stock, item.max_stock) == status
        ]

    def low_stock_items(self, items: Iterable[InventoryItem]) -> list[InventoryItem]:
        return self.items_with_status(items, StockStatus.LOW_STOCK)

    def out_of_stock_items(self, items: Iterable[InventoryItem]) -> list[InventoryItem]:
        return self.items_with_status(items, StockStatus.OUT_OF_STOCK)

    def overstock_items(self, items: Iterable[InventoryItem]) -> list[InventoryItem]:
        return self.items_with_status(items, StockStatus.OVERSTOCK)

    def inventory_summary(self, items: Iterable[InventoryItem]) -> InventorySummary:
        items = list(items)
        counts: Counter[StockStatus] = Counter(
            stock_status(i.closing_stock, i.min_stock, i.max_stock) for i in items
        )
        total_value = sum((i.stock_value for i in items), ZERO)
        return InventorySummary(
            item_count=len(items),
            total_stock_value=total_value,
            status_counts={s: counts.get(s, 0) for s in StockStatus},
        )

    def apply_movement(self, item: InventoryItem, movement: StockMovement) -> InventoryItem:
        """Return the item with the movement's delta applied to its closing stock."""
        movement = validate_stock_movement(movement)
        if movement.item_id != item.id:
            raise NotFoundError(f"Movement {movement.reference} does not belong to item {item.sku}.")
        new_stock = item.closing_stock + movement.qty_delta
        if new_stock < 0:
            raise InsufficientStockError(f"Not enough stock for {item.sku}. Available: {item.closing_stock}")
        return replace(item, closing_stock=new_stock)

    # ---- repository-backed operations ----
    def list_levels(self) -> list[StockLevel]:
        return self.classify(self.repo.list_items())

    def add_item(self, item: InventoryItem) -> InventoryItem:
        item = validate_inventory_item(item)
        if self.repo.get_item(item.id) is not None:
            raise ValidationError(f"Inventory item {item.id} already exists.")
        self.repo.save_item(item)
        return item

    def record_movement(self, movement: StockMovement) -> InventoryItem:
        item = self.repo.get_item(movement.item_id)
        if not item:
            raise NotFoundError("Inventory item not found.")
        movement = validate_stock_movement(movement)
        updated = self.apply_movement(item, movement)
        self.repo.append_movement(movement)
        self.repo.save_item(updated)
        log.info(
            "stock_movement item=%s kind=%s delta=%s stock_after=%s ref=%s",
            item.sku, movement.kind.value, movement.qty_delta, updated.closing_stock, movement.reference,
        )
        return updated

    def movements_for(self, item_id: str) -> list[StockMovement]:
        return self.repo.movements_for_item(item_id)

    def transfer(
        self,
        source_warehouse: str,
        destination_warehouse: str,
        lines: Iterable[TransferLine],
        reference: str,
        date: str,
    ) -> list[StockMovement]:
        """
        Move stock between warehouses as paired TRANSFER movements.

        Every line is checked before anything is written, so a rejected
        transfer leaves both warehouses untouched. Lines repeating a sku are
        summed before the availability check. A destination without the sku
        gets a new item copied from the source with zero stock.
        """
        source = (source_warehouse or "").strip()
        destination = (destination_warehouse or "").strip()
        if not source or not destination:
            raise ValidationError("Source and destination warehouses are required.")
        if source == destination:
            raise ValidationError("Source and destination warehouses must differ.")

        lines = list(lines)
        if not lines:
            raise ValidationError("Transfer needs at least one line.")

        requested: Counter[str] = Counter()
        for line in lines:
            qty = as_int(line.quantity, "Transfer quantity")
            if qty < 1:
                raise NegativeQuantityError(f"Transfer quantity must be >= 1 for {line.sku}. Received: {qty}")
            requested[line.sku] += qty

        sources: dict[str, InventoryItem] = {}
        for sku, qty in requested.items():
            item = self.repo.get_item_by_sku(sku, source)
            if not item:
                raise NotFoundError(f"SKU {sku} not found in warehouse {source}.")
            if qty > item.closing_stock:
                raise InsufficientStockError(f"Not enough stock for {sku}. Available: {item.closing_stock}")
            sources[sku] = item

        movements: list[StockMovement] = []
        for n, (sku, qty) in enumerate(requested.items(), start=1):
            src = sources[sku]
            dst = self.repo.get_item_by_sku(sku, destination)
            if not dst:
                dst = replace(src, id=f"{sku}@{destination}", closing_stock=0, warehouse=destination)
                self.repo.save_item(dst)

            out = StockMovement(
                id=f"{reference}-out-{n}", item_id=src.id, kind=MovementKind.TRANSFER,
                qty_delta=-qty, date=date, reference=reference, warehouse=source,
            )
            into = StockMovement(
                id=f"{reference}-in-{n}", item_id=dst.id, kind=MovementKind.TRANSFER,
                qty_delta=qty, date=date, reference=reference, warehouse=destination,
            )
            self.repo.save_item(replace(src, closing_stock=src.closing_stock - qty))
            self.repo.save_item(replace(dst, closing_stock=dst.closing_stock + qty))
            self.repo.append_movement(out)
            self.repo.append_movement(into)
            movements.extend((out, into))

        log.info(
            "stock_transfer ref=%s from=%s to=%s skus=%s units=%s",
            reference, source, destination, len(requested), sum(requested.values()),
        )
        return movements
