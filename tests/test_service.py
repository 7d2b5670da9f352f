from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from voltedge.shipping.exceptions import ShippingDataUnavailableException, ShippingValidationException
from voltedge.shipping.repository import RateRepository
from voltedge.shipping.service import ShippingService

CART = [{"productId": "p1", "quantity": 3}]


def test_end_to_end_california(app):
    estimate = ShippingService.estimate(CART, Decimal("100"), country="US", state="CA")

    assert estimate.method == "Standard Shipping"
    assert estimate.cost == Decimal("14.95")
    assert estimate.tax_rate == Decimal("0.0725")
    assert estimate.tax_amount == Decimal("7.25")
    assert estimate.total == Decimal("122.20")


def test_end_to_end_new_york(app):
    estimate = ShippingService.estimate(CART, "100", country="US", state="NY")

    assert estimate.cost == Decimal("8.95")
    assert estimate.tax_rate == Decimal("0.045")
    assert estimate.tax_amount == Decimal("4.50")
    assert estimate.total == Decimal("113.45")


def test_end_to_end_great_britain(app):
    estimate = ShippingService.estimate(CART, "80", country="GB")

    assert estimate.cost == Decimal("24.95")
    assert estimate.tax_rate == Decimal("0.2")
    assert estimate.tax_amount == Decimal("16.00")


def test_total_weight_uses_item_weight_or_default(app):
    items = [
        {"productId": "a", "quantity": 2, "weight": "1.5"},
        {"productId": "b", "quantity": 3},
    ]
    assert ShippingService.total_weight(items) == Decimal("6.0")

    app.config["SHIPPING_DEFAULT_ITEM_WEIGHT"] = Decimal("0.25")
    assert ShippingService.total_weight(items) == Decimal("3.75")


def test_heavier_cart_moves_to_next_band(app):
    cart = [{"productId": "p1", "quantity": 6}]
    estimate = ShippingService.estimate(cart, "20", country="US", state="NY")
    assert estimate.cost == Decimal("12.95")


@pytest.mark.parametrize("items", [
    [],
    None,
    "p1",
    [{"productId": "p1", "quantity": 0}],
    [{"productId": "p1", "quantity": "two"}],
    [{"productId": "p1", "quantity": 1, "weight": "-1"}],
    [{"productId": "p1", "quantity": 1, "weight": "heavy"}],
])
def test_invalid_cart(app, items):
    with pytest.raises(ShippingValidationException):
        ShippingService.estimate(items, "10", country="US")


@pytest.mark.parametrize("subtotal", ["-5", "abc", "NaN", "1e30"])
def test_invalid_subtotal(app, subtotal):
    with pytest.raises(ShippingValidationException):
        ShippingService.estimate(CART, subtotal, country="US")


@pytest.mark.parametrize("destination", [
    {"country": 12},
    {"country": "US", "state": ["CA"]},
    {"country": "US", "postal_code": 90210},
])
def test_invalid_destination(app, destination):
    with pytest.raises(ShippingValidationException):
        ShippingService.estimate(CART, "10", **destination)


def test_missing_country_uses_default_location(app):
    app.config["SHIPPING_DEFAULT_COUNTRY"] = "US"
    app.config["SHIPPING_DEFAULT_STATE"] = "CA"

    estimate = ShippingService.estimate(CART, "100", country="", state="NY")
    assert estimate.cost == Decimal("14.95")
    assert estimate.tax_rate == Decimal("0.0725")


def test_free_shipping_threshold(app):
    app.config["SHIPPING_FREE_THRESHOLD"] = Decimal("100")

    estimate = ShippingService.estimate(CART, "100", country="US", state="CA")
    assert estimate.is_free_shipping is True
    assert estimate.cost == Decimal("0")
    assert estimate.total == Decimal("107.25")


def test_configured_distance_fee(app):
    app.config["SHIPPING_DISTANCE_FEE_ZONES"] = [{"countries": ["US"], "states": ["CA"], "fees": {"*": "7.50"}}]

    estimate = ShippingService.estimate(CART, "100", country="US", state="CA")
    assert estimate.base_cost == Decimal("14.95")
    assert estimate.distance_fee == Decimal("7.50")
    assert estimate.cost == Decimal("22.45")


def test_requested_method(app):
    estimate = ShippingService.estimate(CART, "100", country="US", state="NY", method="express")
    assert estimate.method == "Express Shipping"
    assert estimate.cost == Decimal("18.95")

    with pytest.raises(ShippingValidationException):
        ShippingService.estimate(CART, "100", country="US", method="teleport")


def test_tax_lookup_failure_degrades_to_zero(app, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    monkeypatch.setattr(RateRepository, "find_tax_rate", staticmethod(broken))

    estimate = ShippingService.estimate(CART, "100", country="US", state="CA")
    assert estimate.tax_rate == Decimal("0")
    assert estimate.cost == Decimal("14.95")


def test_rate_lookup_failure_degrades_to_default_cost(app, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    monkeypatch.setattr(RateRepository, "find_shipping_rates", staticmethod(broken))

    estimate = ShippingService.estimate(CART, "100", country="US", state="CA")
    assert estimate.cost == Decimal("10.00")
    assert estimate.tax_rate == Decimal("0.0725")


def test_unseeded_data_is_unavailable(empty_app):
    with pytest.raises(ShippingDataUnavailableException):
        ShippingService.estimate(CART, "100", country="US")


def test_unreadable_methods_are_unavailable(app, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(RateRepository, "list_active_shipping_methods", staticmethod(broken))

    with pytest.raises(ShippingDataUnavailableException):
        ShippingService.estimate(CART, "100", country="US")


def test_calculate_options_quotes_every_method(app):
    result = ShippingService.calculate_options(CART, "100", country="US", state="NY")

    costs = {option["key"]: option["cost"] for option in result["shippingOptions"]}
    assert costs == {"standard": 8.95, "express": 18.95, "next_day": 29.95}
    assert result["taxRate"] == 0.045
