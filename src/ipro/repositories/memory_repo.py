from __future__ import annotations

from typing import Iterable, Optional

from ipro.domain.errors import NotFoundError, ValidationError
from ipro.domain.models import CashTransaction, InventoryItem, StockMovement


class InMemoryRepository:
    """List-backed store for items, movements and cash transactions.

    Reads hand out copies so callers never mutate the stored sequence.
    Movements are append-only.
    """

    def __init__(
        self,
        items: Iterable[InventoryItem] = (),
        transactions: Iterable[CashTransaction] = (),
        movements: Iterable[StockMovement] = (),
    ):
        self._items: dict[str, InventoryItem] = {}
        for item in items:
            self.save_item(item)
        self._transactions: list[CashTransaction] = []
        self.extend_transactions(transactions)
        self._movements: list[StockMovement] = list(movements)

    # ---- inventory ----
    def list_items(self) -> list[InventoryItem]:
        return list(self._items.values())

    def get_item(self, item_id: str) -> Optional[InventoryItem]:
        return self._items.get(item_id)

    def get_item_by_sku(self, sku: str, warehouse: Optional[str] = None) -> Optional[InventoryItem]:
        for item in self._items.values():
            if item.sku == sku and (warehouse is None or item.warehouse == warehouse):
                return item
        return None

    def save_item(self, item: InventoryItem) -> None:
        self._items[item.id] = item

    # ---- movements ----
    def append_movement(self, movement: StockMovement) -> None:
        self._movements.append(movement)

    def movements_for_item(self, item_id: str) -> list[StockMovement]:
        return [m for m in self._movements if m.item_id == item_id]

    def list_movements(self) -> list[StockMovement]:
        return list(self._movements)

    # ---- cash transactions ----
    def list_transactions(self) -> list[CashTransaction]:
        return list(self._transactions)

    def get_transaction(self, txn_id: str) -> Optional[CashTransaction]:
        for txn in self._transactions:
            if txn.id == txn_id:
                return txn
        return None

    def add_transaction(self, txn: CashTransaction) -> None:
        if self.get_transaction(txn.id) is not None:
            raise ValidationError(f"Transaction {txn.id} already exists.")
        self._transactions.append(txn)

    def extend_transactions(self, txns: Iterable[CashTransaction]) -> None:
        for txn in txns:
            self.add_transaction(txn)

    def replace_transaction(self, txn: CashTransaction) -> None:
        for idx, existing in enumerate(self._transactions):
            if existing.id == txn.id:
                self._transactions[idx] = txn
                return
        raise NotFoundError(f"Transaction {txn.id} not found.")
