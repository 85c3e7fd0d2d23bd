from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ipro.domain.models import CashTransaction, InventoryItem, StockMovement


class InventoryRepository(Protocol):
    def list_items(self) -> list[InventoryItem]: ...
    def get_item(self, item_id: str) -> Optional[InventoryItem]: ...
    def get_item_by_sku(self, sku: str, warehouse: Optional[str] = None) -> Optional[InventoryItem]: ...
    def save_item(self, item: InventoryItem) -> None: ...


class MovementRepository(Protocol):
    def append_movement(self, movement: StockMovement) -> None: ...
    def movements_for_item(self, item_id: str) -> list[StockMovement]: ...


class TransactionRepository(Protocol):
    def list_transactions(self) -> list[CashTransaction]: ...
    def get_transaction(self, txn_id: str) -> Optional[CashTransaction]: ...
    def add_transaction(self, txn: CashTransaction) -> None: ...
    def replace_transaction(self, txn: CashTransaction) -> None: ...
    def extend_transactions(self, txns: Iterable[CashTransaction]) -> None: ...


class StockRepository(InventoryRepository, MovementRepository, Protocol):
    pass
