from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, TypeVar

from ipro.domain.errors import ValidationError

T = TypeVar("T")

ALL = "all"

# Per-entity text fields searched by the list screens.
SEARCH_FIELDS: dict[str, tuple[str, ...]] = {
    "transaction": ("description", "category", "reference"),
    "inflow": ("description", "counterparty", "reference"),
    "outflow": ("description", "counterparty", "reference"),
    "product": ("product_name", "variant", "sku"),
    "inventory": ("product_name", "variant", "sku"),
    "movement": ("reference", "warehouse"),
    "order": ("order_number", "customer", "customer_email"),
    "customer": ("name", "email", "phone"),
    "supplier": ("name", "contact_person"),
    "warehouse": ("name", "location", "manager"),
}


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    return str(value)


def matches_query(query: Optional[str], record: Any, fields: Sequence[str]) -> bool:
    if not query:
        return True
    needle = query.lower()
    for name in fields:
        value = _text(_field(record, name))
        if value is not None and needle in value.lower():
            return True
    return False


def _is_active(value: Any) -> bool:
    return value is not None and value != ALL


def matches_filters(record: Any, filters: Mapping[str, Any]) -> bool:
    for name, wanted in filters.items():
        if not _is_active(wanted):
            continue
        actual = _field(record, name)
        if isinstance(wanted, Enum):
            wanted = wanted.value
        if isinstance(actual, Enum):
            actual = actual.value
        if actual != wanted:
            return False
    return True


def filter_records(
    records: Iterable[T],
    query: Optional[str] = "",
    fields: Sequence[str] = (),
    filters: Optional[Mapping[str, Any]] = None,
) -> list[T]:
    """Records matching the text query AND every active categorical filter.

    A filter set to None or "all" is ignored. Each call is a full scan.
    """
    filters = filters or {}
    return [r for r in records if matches_query(query, r, fields) and matches_filters(r, filters)]


class SearchService:
    def __init__(self, search_fields: Optional[Mapping[str, Sequence[str]]] = None):
        self.search_fields = dict(search_fields or SEARCH_FIELDS)

    def fields_for(self, entity: str) -> tuple[str, ...]:
        try:
            return tuple(self.search_fields[entity])
        except KeyError as e:
            raise ValidationError(f"Unknown searchable entity: {entity}") from e

    def search(self, entity: str, records: Iterable[T], query: Optional[str] = "", **filters: Any) -> list[T]:
        return filter_records(records, query, self.fields_for(entity), filters)
