from decimal import Decimal

import pytest

from storefront.cart import build_cart_summary, checkout, format_price
from storefront.errors import ValidationError


def test_format_price():
    assert format_price(Decimal("1234.5")) == "$1,234.50"
    assert format_price(0) == "$0.00"


def test_empty_summary(fresh_storage):
    summary = build_cart_summary("u1")
    assert summary["isEmpty"]
    assert summary["items"] == []
    assert summary["totalQuantity"] == 0
    assert summary["totalAmountFormatted"] == "$0.00"


def test_summary_totals(fresh_storage):
    fresh_storage.add_to_cart("u1", "1", 2)
    fresh_storage.add_to_cart("u1", "3")

    summary = build_cart_summary("u1")
    assert summary["totalQuantity"] == 3
    assert Decimal(summary["totalAmount"]) == Decimal("204.97")
    assert summary["totalAmountFormatted"] == "$204.97"

    headphones = next(i for i in summary["items"] if i["productId"] == "1")
    assert headphones["subtotalFormatted"] == "$179.98"
    assert headphones["unitPrice"] == "89.99"


def test_checkout_clears_cart(fresh_storage):
    fresh_storage.add_to_cart("u1", "2")
    order = checkout("u1")

    assert order["orderId"].startswith("ORD-")
    assert order["itemCount"] == 1
    assert order["totalFormatted"] == "$199.99"
    assert fresh_storage.get_cart_items("u1") == []


def test_checkout_empty_cart(fresh_storage):
    with pytest.raises(ValidationError):
        checkout("u1")
