from decimal import Decimal

from voltedge.shipping.models import ShippingMethod, ShippingRate, TaxRate
from voltedge.shipping.repository import RateRepository


def test_active_methods_are_ordered_and_filtered(app, db):
    keys = [method.key for method in RateRepository.list_active_shipping_methods()]
    assert keys == ["standard", "express", "next_day"]

    ShippingMethod.query.filter_by(key="express").first().is_active = False
    db.session.commit()

    keys = [method.key for method in RateRepository.list_active_shipping_methods()]
    assert keys == ["standard", "next_day"]


def test_no_methods_when_unseeded(empty_app):
    assert RateRepository.list_active_shipping_methods() == []


def test_get_shipping_method_by_key_name_and_id(app):
    standard = RateRepository.get_shipping_method("standard")
    assert standard.name == "Standard Shipping"
    assert RateRepository.get_shipping_method("next day delivery").key == "next_day"
    assert RateRepository.get_shipping_method(str(standard.id)).key == "standard"
    assert RateRepository.get_shipping_method("pigeon") is None
    assert RateRepository.get_shipping_method("") is None


def test_state_rows_shadow_fully_covered_country_rows(app):
    standard = RateRepository.get_shipping_method("standard")

    rates = RateRepository.find_shipping_rates(standard.id, "US", "CA")
    assert [(r.state, r.cost) for r in rates] == [("CA", Decimal("14.95"))]


def test_partly_covered_country_rows_are_kept(app, db):
    standard = RateRepository.get_shipping_method("standard")
    db.session.add(ShippingRate(
        shipping_method_id=standard.id, country="US", state="OR",
        min_weight=Decimal("0"), max_weight=Decimal("2"), cost=Decimal("6.00"),
    ))
    db.session.commit()

    rates = RateRepository.find_shipping_rates(standard.id, "US", "OR")
    assert [(r.state, r.cost) for r in rates] == [
        ("OR", Decimal("6.00")),
        (None, Decimal("8.95")),
        (None, Decimal("12.95")),
    ]


def test_country_rows_for_state_without_specific_rates(app):
    standard = RateRepository.get_shipping_method("standard")

    rates = RateRepository.find_shipping_rates(standard.id, "us", "ny")
    assert [r.cost for r in rates] == [Decimal("8.95"), Decimal("12.95")]
    assert all(r.state is None for r in rates)


def test_catch_all_rows(app):
    standard = RateRepository.get_shipping_method("standard")

    assert RateRepository.find_shipping_rates(standard.id, "FR") == []
    catch_all = RateRepository.find_shipping_rates(standard.id, "")
    assert [r.cost for r in catch_all] == [Decimal("24.95")]


def test_tax_rate_resolution_order(app):
    assert RateRepository.find_tax_rate("US", "CA").rate == Decimal("0.0725")
    assert RateRepository.find_tax_rate("US", "WA").description == "No federal sales tax"
    assert RateRepository.find_tax_rate("US").description == "No federal sales tax"
    assert RateRepository.find_tax_rate("GB", "").rate == Decimal("0.2")
    assert RateRepository.find_tax_rate("FR").description == "Default international tax rate"


def test_inactive_tax_rates_are_ignored(app, db):
    TaxRate.query.filter_by(country="US", state="CA").first().is_active = False
    db.session.commit()

    assert RateRepository.find_tax_rate("US", "CA").state is None


def test_tax_rate_none_without_any_row(empty_app):
    assert RateRepository.find_tax_rate("US", "CA") is None
