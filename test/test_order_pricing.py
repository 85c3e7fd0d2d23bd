from decimal import Decimal

import pytest

from ipro.config import PricingConfig
from ipro.domain.errors import (
    DuplicateLineItemError,
    InvalidRangeError,
    NegativeQuantityError,
    NotFoundError,
    ValidationError,
)
from ipro.domain.models import OrderLineItem
from ipro.services.pricing_service import OrderDraft, price_order

FEE = Decimal("25000")


def test_single_line_order_totals():
    totals = price_order([OrderLineItem("1", "Groundnuts TIRA", Decimal("850"), 500)], 0)

    assert totals.subtotal == 425_000
    assert totals.tax == 76_500
    assert totals.shipping == FEE
    assert totals.discount == 0
    assert totals.total == 425_000 + 76_500 + FEE


def test_empty_order_charges_no_tax_or_shipping():
    totals = price_order([], 0)

    assert totals.subtotal == 0
    assert totals.tax == 0
    assert totals.shipping == 0
    assert totals.total == 0


def test_full_discount_leaves_tax_and_shipping():
    totals = price_order([OrderLineItem("4", "Rice Premium", Decimal("1500"), 10)], 100)

    assert totals.discount == totals.subtotal
    assert totals.total == totals.tax + totals.shipping


def test_out_of_range_discount_is_rejected_by_calculator():
    with pytest.raises(InvalidRangeError):
        price_order([], 101)
    with pytest.raises(InvalidRangeError):
        price_order([], -1)


def test_invalid_line_items_are_rejected():
    with pytest.raises(NegativeQuantityError):
        price_order([OrderLineItem("1", "Groundnuts TIRA", Decimal("850"), 0)])


def test_rates_come_from_configuration():
    config = PricingConfig(tax_rate=Decimal("0.10"), shipping_fee=Decimal("5000"))
    totals = price_order([OrderLineItem("5", "Maize Yellow", Decimal("650"), 3)], 10, config)

    assert totals.subtotal == 1950
    assert totals.tax == 195
    assert totals.shipping == 5000
    assert totals.discount == 195
    assert totals.total == 1950 + 195 + 5000 - 195


def test_tax_is_rounded_half_up_to_minor_units():
    totals = price_order([OrderLineItem("x", "Odd", Decimal("1001"), 1)])
    # 1001 * 0.18 = 180.18
    assert totals.tax == Decimal("180")
    assert totals.total == 1001 + 180 + FEE


def test_draft_recomputes_on_every_change():
    draft = OrderDraft("Kigali Fresh Market")
    draft.add_product("1", "Groundnuts TIRA", 850)
    draft.add_product("2", "Groundnuts WHITE", 900)

    assert draft.totals.subtotal == 1750

    draft.update_quantity("1", 500)
    assert draft.totals.subtotal == 425_000 + 900

    draft.update_unit_price("2", 1000)
    draft.set_discount(10)
    totals = draft.totals
    assert totals.subtotal == 426_000
    assert totals.discount == 42_600
    assert totals.total == 426_000 + 76_680 + FEE - 42_600


def test_draft_quantity_below_one_is_a_noop():
    draft = OrderDraft()
    draft.add_product("1", "Groundnuts TIRA", 850)
    draft.update_quantity("1", 3)

    draft.update_quantity("1", 0)
    assert draft.items[0].quantity == 3
    assert len(draft.items) == 1


def test_draft_clamps_price_and_discount_at_input():
    draft = OrderDraft()
    draft.add_product("1", "Groundnuts TIRA", 850)

    assert draft.update_unit_price("1", -50).unit_price == 0
    assert draft.set_discount(150) == 100
    assert draft.set_discount(-3) == 0


def test_draft_rejects_duplicate_products_and_keeps_insertion_order():
    draft = OrderDraft()
    draft.add_product("3", "Groundnuts MIXED", 800)
    draft.add_product("1", "Groundnuts TIRA", 850)

    with pytest.raises(DuplicateLineItemError):
        draft.add_product("3", "Groundnuts MIXED", 800)

    assert [li.product_id for li in draft.items] == ["3", "1"]


def test_draft_remove_and_unit_stats():
    draft = OrderDraft("Musanze Traders")
    draft.add_product("1", "Groundnuts TIRA", 850)
    draft.add_product("2", "Groundnuts WHITE", 900)
    draft.update_quantity("2", 3)

    assert draft.total_units == 4
    assert draft.average_unit_price == Decimal("887.5")

    draft.remove_item("1")
    assert draft.total_units == 3
    with pytest.raises(NotFoundError):
        draft.remove_item("1")


def test_empty_draft_average_price_is_zero():
    assert OrderDraft().average_unit_price == 0


def test_to_order_snapshots_items():
    draft = OrderDraft("Kigali Fresh Market")
    draft.add_product("1", "Groundnuts TIRA", 850)
    draft.due_date = "2025-10-01"
    draft.set_discount(5)

    order = draft.to_order()
    draft.update_quantity("1", 10)

    assert order.customer == "Kigali Fresh Market"
    assert order.items[0].quantity == 1
    assert order.discount_percent == 5
    assert order.due_date == "2025-10-01"


def test_float_tax_rate_is_stored_as_exact_decimal():
    config = PricingConfig(tax_rate=0.18, shipping_fee=25000.0)
    assert config.tax_rate == Decimal("0.18")
    assert isinstance(config.shipping_fee, Decimal)

    totals = price_order([OrderLineItem("1", "Groundnuts TIRA", Decimal("850"), 500)], 0, config)
    assert totals.tax == 76_500
    assert totals.total == 425_000 + 76_500 + FEE


def test_pricing_config_rejects_out_of_range_values():
    with pytest.raises(InvalidRangeError):
        PricingConfig(tax_rate=Decimal("1.5"))
    with pytest.raises(NegativeQuantityError):
        PricingConfig(shipping_fee=-1)
    with pytest.raises(ValidationError):
        PricingConfig(minor_digits=1.5)


@pytest.mark.parametrize("bad", [2.7, "abc", "1.5", True])
def test_draft_quantity_must_be_a_whole_number(bad):
    draft = OrderDraft()
    draft.add_product("1", "Groundnuts TIRA", 850)
    draft.update_quantity("1", 3)

    with pytest.raises(ValidationError):
        draft.update_quantity("1", bad)
    assert draft.items[0].quantity == 3


def test_draft_quantity_accepts_integral_text():
    draft = OrderDraft()
    draft.add_product("1", "Groundnuts TIRA", 850)

    assert draft.update_quantity("1", "4").quantity == 4
    assert draft.update_quantity("1", 5.0).quantity == 5
