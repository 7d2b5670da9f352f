from decimal import Decimal

from voltedge.shipping.calculator import QuoteCalculator, distance_fee_for, quantize_money
from voltedge.shipping.models import ShippingMethod
from voltedge.shipping.resolvers import ShippingResolution

STANDARD = ShippingMethod(key="standard", name="Standard Shipping", estimated_days="5-7 business days",
                          default_cost=Decimal("10.00"))


def _resolution(cost):
    return ShippingResolution(STANDARD, Decimal(cost), "country")


def test_tax_and_total_are_exact():
    estimate = QuoteCalculator.calculate(_resolution("14.95"), Decimal("0.0725"), Decimal("100"))

    assert estimate.cost == Decimal("14.95")
    assert estimate.tax_amount == Decimal("7.25")
    assert estimate.total == Decimal("122.20")
    assert estimate.total == estimate.subtotal + estimate.cost + estimate.tax_amount


def test_tax_amount_rounds_to_cents():
    estimate = QuoteCalculator.calculate(_resolution("8.95"), Decimal("0.0725"), Decimal("19.99"))

    # 19.99 * 0.0725 = 1.449275
    assert estimate.tax_amount == Decimal("1.45")
    assert estimate.total == Decimal("30.39")


def test_negative_tax_rate_is_clamped():
    estimate = QuoteCalculator.calculate(_resolution("8.95"), Decimal("-0.1"), Decimal("50"))
    assert estimate.tax_rate == Decimal("0")
    assert estimate.tax_amount == Decimal("0.00")


def test_free_shipping_at_threshold():
    estimate = QuoteCalculator.calculate(
        _resolution("14.95"), Decimal("0"), Decimal("75.00"), free_shipping_threshold=Decimal("75")
    )

    assert estimate.is_free_shipping is True
    assert estimate.cost == Decimal("0")
    assert estimate.base_cost == Decimal("14.95")
    assert estimate.total == Decimal("75.00")


def test_below_threshold_pays_shipping():
    estimate = QuoteCalculator.calculate(
        _resolution("14.95"), Decimal("0"), Decimal("74.99"), free_shipping_threshold=Decimal("75")
    )
    assert estimate.is_free_shipping is False
    assert estimate.cost == Decimal("14.95")


def test_distance_fee_is_added_to_base_cost():
    estimate = QuoteCalculator.calculate(_resolution("8.95"), Decimal("0"), Decimal("10"), distance_fee=Decimal("7.50"))

    assert estimate.base_cost == Decimal("8.95")
    assert estimate.distance_fee == Decimal("7.50")
    assert estimate.cost == Decimal("16.45")


def test_to_dict_shape():
    data = QuoteCalculator.calculate(_resolution("8.95"), Decimal("0.045"), Decimal("100")).to_dict()

    assert data == {
        "cost": 8.95,
        "isFreeShipping": False,
        "baseCost": 8.95,
        "distanceFee": 0.0,
        "method": "Standard Shipping",
        "estimatedDays": "5-7 business days",
        "taxRate": 0.045,
        "taxAmount": 4.5,
        "total": 113.45,
    }


ZONES = [
    {"countries": ["EG"], "fees": {"next_day": "60", "express": "40", "*": "30"}},
    {"countries": "*", "exclude_countries": ["US"], "fees": {"*": "20"}},
    {"countries": ["US"], "states": ["CA", "OR", "WA"], "fees": {"express": "10", "*": "7.50"}},
    {"countries": ["US"], "fees": {"*": "10"}},
]


def test_distance_fee_zones():
    assert distance_fee_for(ZONES, "express", "EG", None) == Decimal("40.00")
    assert distance_fee_for(ZONES, "standard", "EG", None) == Decimal("30.00")
    assert distance_fee_for(ZONES, "standard", "FR", None) == Decimal("20.00")
    assert distance_fee_for(ZONES, "standard", "us", "ca") == Decimal("7.50")
    assert distance_fee_for(ZONES, "express", "US", "CA") == Decimal("10.00")
    assert distance_fee_for(ZONES, "standard", "US", "NY") == Decimal("10.00")


def test_no_zones_means_no_distance_fee():
    assert distance_fee_for([], "standard", "US", "CA") == Decimal("0")
    assert distance_fee_for(None, "standard", "US", "CA") == Decimal("0")


def test_quantize_money_half_up():
    assert quantize_money("2.345") == Decimal("2.35")
