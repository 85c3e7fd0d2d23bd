from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from ipro.domain.models import InventoryItem, ProductMargin, SalesPerformance
from ipro.domain.money import HUNDRED, ZERO, quantize_amount, to_amount


def margin_percent(profit: object, revenue: object, digits: int = 1) -> Decimal:
    profit = to_amount(profit)
    revenue = to_amount(revenue)
    if revenue == 0:
        return ZERO
    return quantize_amount(profit / revenue * HUNDRED, digits)


def unit_margin(item: InventoryItem) -> Decimal:
    return item.unit_price - item.unit_cost


class AnalyticsService:
    def product_margin(self, item: InventoryItem) -> ProductMargin:
        margin = unit_margin(item)
        return ProductMargin(
            sku=item.sku,
            unit_margin=margin,
            margin_percent=margin_percent(margin, item.unit_price),
        )

    def product_margins(self, items: Iterable[InventoryItem]) -> list[ProductMargin]:
        return [self.product_margin(i) for i in items]

    def sales_performance(self, rows: Iterable[Mapping]) -> SalesPerformance:
        """
        rows: [{revenue, quantity, profit}]
        """
        revenue = ZERO
        profit = ZERO
        quantity = 0
        for row in rows:
            revenue += to_amount(row["revenue"])
            profit += to_amount(row["profit"])
            quantity += int(row["quantity"])
        return SalesPerformance(
            revenue=revenue,
            quantity=quantity,
            profit=profit,
            margin_percent=margin_percent(profit, revenue),
        )
