"""
Seed Shipping Data
Idempotent upsert of shipping methods, rate tiers and tax rates.
Run once per deployment (``flask seed-shipping``), never on the request path.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from voltedge.extensions import db
from voltedge.shipping.constants import SHIPPING_METHODS, SHIPPING_RATES, TAX_RATES
from voltedge.shipping.models import ShippingMethod, ShippingRate, TaxRate
from voltedge.shipping.repository import normalize_country, normalize_state

logger = logging.getLogger(__name__)

WEIGHT_PLACES = Decimal('0.001')


def _weight(value) -> Decimal:
    return Decimal(str(value)).quantize(WEIGHT_PLACES)


def _new_summary() -> Dict[str, int]:
    return {'created': 0, 'updated': 0, 'skipped': 0}


def seed_shipping_methods(methods_data: Optional[List[Dict]] = None) -> Dict[str, int]:
    """Create or update shipping methods keyed by ``key``."""
    summary = _new_summary()

    for method_data in methods_data if methods_data is not None else SHIPPING_METHODS:
        method = ShippingMethod.query.filter_by(key=method_data['key']).first()
        values = {
            'name': method_data['name'],
            'description': method_data.get('description'),
            'estimated_days': method_data.get('estimated_days'),
            'is_active': method_data.get('is_active', True),
            'default_cost': Decimal(str(method_data.get('default_cost', 0))),
        }

        if method is None:
            db.session.add(ShippingMethod(key=method_data['key'], **values))
            summary['created'] += 1
            logger.info(f"Created shipping method: {method_data['key']}")
        else:
            for field, value in values.items():
                setattr(method, field, value)
            summary['updated'] += 1
            logger.info(f"Updated shipping method: {method_data['key']}")

    db.session.commit()
    return summary


def _find_overlap(method_id: int, country: str, state: Optional[str],
                  min_weight: Decimal, max_weight: Decimal) -> Tuple[Optional[ShippingRate], Optional[ShippingRate]]:
    """
    Returns (same_band_row, overlapping_row) among rates of the same
    method, country and state.
    """
    query = ShippingRate.query.filter(
        ShippingRate.shipping_method_id == method_id,
        ShippingRate.country == country,
    )
    query = query.filter(ShippingRate.state.is_(None)) if state is None else query.filter(ShippingRate.state == state)

    candidate = ShippingRate(min_weight=min_weight, max_weight=max_weight)
    for rate in query.all():
        if _weight(rate.min_weight) == min_weight and _weight(rate.max_weight) == max_weight:
            return rate, None
        if rate.overlaps_with(candidate):
            return None, rate
    return None, None


def seed_shipping_rates(rates_data: Optional[List[Dict]] = None) -> Dict[str, int]:
    """
    Create or update rate tiers keyed by (method, country, state, band).
    Tiers that would overlap an existing band are skipped.
    """
    summary = _new_summary()
    methods = {method.key: method for method in ShippingMethod.query.all()}

    for rate_data in rates_data if rates_data is not None else SHIPPING_RATES:
        method = methods.get(rate_data['method'])
        if method is None:
            logger.warning(f"Skipping rate: shipping method '{rate_data['method']}' not found. Seed methods first.")
            summary['skipped'] += 1
            continue

        country = normalize_country(rate_data.get('country'))
        state = normalize_state(rate_data.get('state'))
        min_weight = _weight(rate_data['min_weight'])
        max_weight = _weight(rate_data['max_weight'])
        cost = Decimal(str(rate_data['cost']))

        if min_weight > max_weight or cost < 0:
            logger.warning(f"Skipping invalid rate: {rate_data}")
            summary['skipped'] += 1
            continue

        existing, overlapping = _find_overlap(method.id, country, state, min_weight, max_weight)
        if overlapping is not None:
            logger.warning(
                f"Skipping rate {method.key} {country or '*'}/{state or '*'} {min_weight}-{max_weight}kg: "
                f"overlaps rate {overlapping.id} ({overlapping.min_weight}-{overlapping.max_weight}kg)"
            )
            summary['skipped'] += 1
            continue

        if existing is not None:
            existing.cost = cost
            summary['updated'] += 1
        else:
            db.session.add(ShippingRate(
                shipping_method_id=method.id,
                country=country,
                state=state,
                min_weight=min_weight,
                max_weight=max_weight,
                cost=cost
            ))
            # Flush so later rows in the same batch see this band
            db.session.flush()
            summary['created'] += 1
        logger.info(f"Seeded rate: {method.key} {country or '*'}/{state or '*'} {min_weight}-{max_weight}kg = ${cost}")

    db.session.commit()
    return summary


def seed_tax_rates(tax_data: Optional[List[Dict]] = None) -> Dict[str, int]:
    """Create or update tax rates keyed by (country, state)."""
    summary = _new_summary()

    for tax_row in tax_data if tax_data is not None else TAX_RATES:
        country = normalize_country(tax_row.get('country'))
        state = normalize_state(tax_row.get('state'))
        rate = Decimal(str(tax_row['rate']))

        if rate < 0 or rate > 1:
            logger.warning(f"Skipping tax rate outside 0..1: {tax_row}")
            summary['skipped'] += 1
            continue

        query = TaxRate.query.filter(TaxRate.country == country)
        query = query.filter(TaxRate.state.is_(None)) if state is None else query.filter(TaxRate.state == state)
        tax_rate = query.order_by(TaxRate.id).first()

        if tax_rate is None:
            db.session.add(TaxRate(
                country=country,
                state=state,
                rate=rate,
                description=tax_row.get('description'),
                is_active=tax_row.get('is_active', True)
            ))
            summary['created'] += 1
        else:
            tax_rate.rate = rate
            tax_rate.description = tax_row.get('description')
            tax_rate.is_active = tax_row.get('is_active', True)
            summary['updated'] += 1
        logger.info(f"Seeded tax rate: {country or '*'}/{state or '*'} = {rate}")

    db.session.commit()
    return summary


def seed_shipping_data() -> Dict[str, Dict[str, int]]:
    """Seed methods, then rates, then tax rates. Safe to run repeatedly."""
    try:
        return {
            'methods': seed_shipping_methods(),
            'rates': seed_shipping_rates(),
            'tax_rates': seed_tax_rates(),
        }
    except Exception:
        db.session.rollback()
        logger.error("Error seeding shipping data", exc_info=True)
        raise
