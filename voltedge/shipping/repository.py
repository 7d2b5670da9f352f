"""
Rate Repository
Read access to the shipping and tax reference tables.
"""

import logging
from typing import List, Optional

from sqlalchemy import func

from voltedge.shipping.models import ShippingMethod, ShippingRate, TaxRate

logger = logging.getLogger(__name__)

CATCH_ALL_COUNTRY = ''


def normalize_country(country: Optional[str]) -> str:
    return (country or '').strip().upper()


def normalize_state(state: Optional[str]) -> Optional[str]:
    """Blank states mean "no state"."""
    state = (state or '').strip().upper()
    return state or None


class RateRepository:
    """Pure reads against shipping methods, shipping rates and tax rates."""

    @staticmethod
    def list_active_shipping_methods() -> List[ShippingMethod]:
        return ShippingMethod.query.filter(
            ShippingMethod.is_active == True  # noqa: E712
        ).order_by(ShippingMethod.id).all()

    @staticmethod
    def get_shipping_method(identifier) -> Optional[ShippingMethod]:
        """
        Find an active shipping method by id, key or name (case-insensitive).
        """
        if identifier is None or str(identifier).strip() == '':
            return None

        query = ShippingMethod.query.filter(ShippingMethod.is_active == True)  # noqa: E712
        identifier = str(identifier).strip()

        if identifier.isdigit():
            method = query.filter(ShippingMethod.id == int(identifier)).first()
            if method:
                return method

        method = query.filter(ShippingMethod.key == identifier.lower()).first()
        if method:
            return method

        return query.filter(func.lower(ShippingMethod.name) == identifier.lower()).first()

    @staticmethod
    def find_shipping_rates(method_id: int, country: str, state: Optional[str] = None) -> List[ShippingRate]:
        """
        All rates for the method and country, ordered by weight band.

        When a state is given, state-specific rows are returned together with
        the country-wide (NULL state) rows. A country-wide row is dropped only
        when a state row covers its whole band; partly covered country rows
        stay so weights outside the state bands still find their tier.
        """
        country = normalize_country(country)
        state = normalize_state(state)

        query = ShippingRate.query.filter(
            ShippingRate.shipping_method_id == method_id,
            ShippingRate.country == country,
        )
        if state:
            query = query.filter((ShippingRate.state == state) | (ShippingRate.state.is_(None)))
        else:
            query = query.filter(ShippingRate.state.is_(None))

        rows = query.all()

        state_rows = [rate for rate in rows if rate.state is not None]
        country_rows = [rate for rate in rows if rate.state is None]
        kept_country_rows = [
            rate for rate in country_rows
            if not any(state_rate.covers(rate) for state_rate in state_rows)
        ]

        rates = state_rows + kept_country_rows
        rates.sort(key=lambda rate: (rate.min_weight, rate.max_weight, rate.id))
        return rates

    @staticmethod
    def find_tax_rate(country: str, state: Optional[str] = None) -> Optional[TaxRate]:
        """
        Most specific active tax rate:
        (country, state) -> (country, NULL) -> ('', NULL) -> None.
        """
        country = normalize_country(country)
        state = normalize_state(state)

        candidates = []
        if state:
            candidates.append((country, state))
        candidates.append((country, None))
        if country != CATCH_ALL_COUNTRY:
            candidates.append((CATCH_ALL_COUNTRY, None))

        for candidate_country, candidate_state in candidates:
            tax_rate = RateRepository._active_tax_rate(candidate_country, candidate_state)
            if tax_rate is not None:
                return tax_rate
        return None

    @staticmethod
    def _active_tax_rate(country: str, state: Optional[str]) -> Optional[TaxRate]:
        query = TaxRate.query.filter(
            TaxRate.country == country,
            TaxRate.is_active == True,  # noqa: E712
        )
        if state is None:
            query = query.filter(TaxRate.state.is_(None))
        else:
            query = query.filter(TaxRate.state == state)

        rows = query.order_by(TaxRate.id).all()
        if len(rows) > 1:
            logger.warning(
                f"{len(rows)} active tax rates match country={country!r} state={state!r}; "
                f"using rate {rows[0].id}"
            )
        return rows[0] if rows else None
