"""
Rate resolvers.

Both resolvers walk an ordered tuple of lookup scopes and stop at the first
one that answers, so the precedence is readable in one place:

    shipping: destination (state rows over country rows) -> catch-all -> method default
    tax:      (country, state) -> (country) -> catch-all -> 0
"""

import logging
from decimal import Decimal
from typing import Optional

from voltedge.shipping.models import ShippingMethod, ShippingRate, TaxRate
from voltedge.shipping.repository import (
    CATCH_ALL_COUNTRY,
    RateRepository,
    normalize_country,
    normalize_state,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')

SOURCE_STATE = 'state'
SOURCE_COUNTRY = 'country'
SOURCE_CATCH_ALL = 'catch_all'
SOURCE_DEFAULT = 'default'


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def select_tier(rates, weight: Decimal) -> Optional[ShippingRate]:
    """
    Pick the weight band for ``weight`` from rates ordered by band.

    Bands are inclusive at both ends. A state row whose band contains the
    weight beats a country-wide row that contains it; within either kind the
    lower band wins on a shared boundary. A weight that lands in a gap
    between bands takes the next band up. Returns None when the weight is
    above every band.
    """
    ordered = sorted(rates, key=lambda rate: (rate.min_weight, rate.max_weight, rate.id))

    containing = [rate for rate in ordered if rate.contains_weight(weight)]
    if containing:
        state_rows = [rate for rate in containing if rate.state is not None]
        return (state_rows or containing)[0]

    for rate in ordered:
        if rate.min_weight > weight:
            return rate

    return None


class ShippingResolution:
    """Outcome of resolving one method's shipping cost for a destination."""

    def __init__(self, method: ShippingMethod, cost: Decimal, source: str, rate: Optional[ShippingRate] = None):
        self.method = method
        # Copied now: a session rollback later expires the ORM instance
        self.method_key = method.key
        self.method_name = method.name
        self.estimated_days = method.estimated_days
        self.cost = cost
        self.source = source
        self.rate = rate

    @classmethod
    def default_for(cls, method: ShippingMethod) -> 'ShippingResolution':
        return cls(method, to_decimal(method.default_cost), SOURCE_DEFAULT)

    @property
    def matched_tier(self) -> bool:
        return self.rate is not None

    def __repr__(self):
        return f'<ShippingResolution {self.method_key}: {self.cost} ({self.source})>'


def _destination_scope(method, country, state):
    return RateRepository.find_shipping_rates(method.id, country, state)


def _catch_all_scope(method, country, state):
    if country == CATCH_ALL_COUNTRY:
        return []
    return RateRepository.find_shipping_rates(method.id, CATCH_ALL_COUNTRY)


class ShippingRateResolver:
    """Selects one shipping cost per method for a destination and weight."""

    SCOPES = (
        ('destination', _destination_scope),
        (SOURCE_CATCH_ALL, _catch_all_scope),
    )

    @classmethod
    def resolve(cls, method: ShippingMethod, country: str, state: Optional[str], weight) -> ShippingResolution:
        country = normalize_country(country)
        state = normalize_state(state)
        weight = to_decimal(weight)
        if weight < ZERO:
            weight = ZERO

        default_cost = to_decimal(method.default_cost)

        for scope_name, scope in cls.SCOPES:
            rates = scope(method, country, state)
            if not rates:
                continue

            # The first scope with any rows owns the destination
            tier = select_tier(rates, weight)
            if tier is None:
                logger.info(
                    f"No {method.key} band covers {weight}kg for {country or '*'}/{state or '*'}; "
                    f"using default cost {default_cost}"
                )
                return ShippingResolution(method, default_cost, SOURCE_DEFAULT)

            if scope_name == SOURCE_CATCH_ALL:
                source = SOURCE_CATCH_ALL
            elif tier.state is not None:
                source = SOURCE_STATE
            else:
                source = SOURCE_COUNTRY
            return ShippingResolution(method, to_decimal(tier.cost), source, tier)

        logger.info(
            f"No {method.key} rates for {country or '*'}/{state or '*'}; using default cost {default_cost}"
        )
        return ShippingResolution(method, default_cost, SOURCE_DEFAULT)


class TaxResolution:
    """Outcome of resolving the tax rate for a destination."""

    def __init__(self, rate: Decimal, source: str, tax_rate: Optional[TaxRate] = None):
        self.rate = rate
        self.source = source
        self.tax_rate = tax_rate

    def __repr__(self):
        return f'<TaxResolution {self.rate} ({self.source})>'


class TaxRateResolver:
    """Returns the applicable tax rate as a decimal fraction."""

    @staticmethod
    def resolve(country: str, state: Optional[str] = None) -> TaxResolution:
        country = normalize_country(country)
        tax_rate = RateRepository.find_tax_rate(country, state)

        if tax_rate is None:
            return TaxResolution(ZERO, SOURCE_DEFAULT)

        if tax_rate.state is not None:
            source = SOURCE_STATE
        elif tax_rate.country == country and country != CATCH_ALL_COUNTRY:
            source = SOURCE_COUNTRY
        else:
            source = SOURCE_CATCH_ALL
        return TaxResolution(to_decimal(tax_rate.rate), source, tax_rate)
