"""
Quote Calculator
Turns resolved shipping and tax rates into the customer-facing estimate.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from voltedge.shipping.resolvers import ShippingResolution, ZERO, to_decimal

CENT = Decimal('0.01')


def quantize_money(amount) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def distance_fee_for(zones: Optional[List[Dict]], method_key: str, country: str, state: Optional[str]) -> Decimal:
    """
    Distance fee from the first zone matching the destination.

    A zone matches when the country is listed (or "*" and not excluded) and,
    if the zone lists states, the state is one of them. The fee is looked up
    by method key, then "*".
    """
    country = (country or '').upper()
    state = (state or '').upper()

    for zone in zones or []:
        countries = zone.get('countries', '*')
        if countries == '*':
            if country in [c.upper() for c in zone.get('exclude_countries', [])]:
                continue
        elif country not in [c.upper() for c in countries]:
            continue

        states = zone.get('states')
        if states is not None and state not in [s.upper() for s in states]:
            continue

        fees = zone.get('fees', {})
        fee = fees.get(method_key, fees.get('*'))
        if fee is not None:
            return quantize_money(fee)

    return ZERO


class ShippingEstimate:
    """
    Quote returned to the cart and checkout screens.
    Computed per request, never persisted.
    """

    def __init__(
        self,
        cost: Decimal,
        is_free_shipping: bool,
        base_cost: Decimal,
        distance_fee: Decimal,
        method: str,
        estimated_days: Optional[str],
        tax_rate: Decimal,
        subtotal: Decimal
    ):
        self.cost = cost
        self.is_free_shipping = is_free_shipping
        self.base_cost = base_cost
        self.distance_fee = distance_fee
        self.method = method
        self.estimated_days = estimated_days
        self.tax_rate = tax_rate
        self.subtotal = subtotal

    @property
    def tax_amount(self) -> Decimal:
        return quantize_money(self.subtotal * self.tax_rate)

    @property
    def total(self) -> Decimal:
        return quantize_money(self.subtotal + self.cost + self.tax_amount)

    def __repr__(self):
        return f'<ShippingEstimate {self.method}: {self.cost} tax={self.tax_rate}>'

    def to_dict(self):
        """JSON shape consumed by the storefront."""
        return {
            'cost': float(self.cost),
            'isFreeShipping': self.is_free_shipping,
            'baseCost': float(self.base_cost),
            'distanceFee': float(self.distance_fee),
            'method': self.method,
            'estimatedDays': self.estimated_days,
            'taxRate': float(self.tax_rate),
            'taxAmount': float(self.tax_amount),
            'total': float(self.total),
        }


class QuoteCalculator:
    """Arithmetic over already-resolved inputs; has no failure modes of its own."""

    @staticmethod
    def calculate(
        resolution: ShippingResolution,
        tax_rate,
        subtotal,
        free_shipping_threshold=None,
        distance_fee=ZERO
    ) -> ShippingEstimate:
        subtotal = quantize_money(subtotal)
        tax_rate = to_decimal(tax_rate)
        if tax_rate < ZERO:
            tax_rate = ZERO

        base_cost = quantize_money(resolution.cost)
        distance_fee = quantize_money(distance_fee)

        is_free_shipping = (
            free_shipping_threshold is not None
            and subtotal >= to_decimal(free_shipping_threshold)
        )
        cost = ZERO.quantize(CENT) if is_free_shipping else base_cost + distance_fee

        return ShippingEstimate(
            cost=cost,
            is_free_shipping=is_free_shipping,
            base_cost=base_cost,
            distance_fee=distance_fee,
            method=resolution.method_name,
            estimated_days=resolution.estimated_days,
            tax_rate=tax_rate,
            subtotal=subtotal
        )
