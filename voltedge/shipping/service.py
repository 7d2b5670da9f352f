"""
Shipping Service
Builds shipping and tax quotes for a cart and destination.
"""

from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from voltedge.extensions import db
from voltedge.shipping.calculator import QuoteCalculator, ShippingEstimate, distance_fee_for
from voltedge.shipping.exceptions import ShippingDataUnavailableException, ShippingValidationException
from voltedge.shipping.models import ShippingMethod
from voltedge.shipping.repository import RateRepository, normalize_country, normalize_state
from voltedge.shipping.resolvers import (
    SOURCE_DEFAULT,
    ZERO,
    ShippingRateResolver,
    ShippingResolution,
    TaxRateResolver,
    TaxResolution,
    to_decimal,
)


# Keeps every quoted amount within the decimal context precision
MAX_SUBTOTAL = Decimal('999999999999.99')


class ShippingService:
    """Service class for shipping and tax estimation."""

    @staticmethod
    def resolve_destination(
        country: Optional[str],
        state: Optional[str] = None,
        postal_code: Optional[str] = None
    ) -> Tuple[str, Optional[str], str]:
        """
        Normalize the destination, falling back to the configured default
        location when no country is given.
        """
        for field, value in (('country', country), ('state', state), ('postalCode', postal_code)):
            if value is not None and not isinstance(value, str):
                raise ShippingValidationException(f'{field} must be a string')

        country = normalize_country(country)
        if not country:
            country = normalize_country(current_app.config.get('SHIPPING_DEFAULT_COUNTRY', 'US'))
            state = current_app.config.get('SHIPPING_DEFAULT_STATE')
            postal_code = current_app.config.get('SHIPPING_DEFAULT_POSTAL_CODE')

        return country, normalize_state(state), (postal_code or '').strip()

    @staticmethod
    def total_weight(cart_items: List[Dict]) -> Decimal:
        """
        Sum of weight x quantity. Lines without a weight use
        SHIPPING_DEFAULT_ITEM_WEIGHT.
        """
        if not cart_items or not isinstance(cart_items, list):
            raise ShippingValidationException('Cart is empty or invalid')

        default_weight = to_decimal(current_app.config.get('SHIPPING_DEFAULT_ITEM_WEIGHT', Decimal('1.0')))
        total = ZERO

        for item in cart_items:
            if not isinstance(item, dict):
                raise ShippingValidationException('Cart items must be objects')

            quantity = item.get('quantity', 1)
            if isinstance(quantity, bool) or not isinstance(quantity, (int, str)):
                raise ShippingValidationException(f"Invalid quantity for product {item.get('productId')}")
            try:
                quantity = int(quantity)
            except ValueError:
                raise ShippingValidationException(f"Invalid quantity for product {item.get('productId')}")
            if quantity <= 0:
                raise ShippingValidationException(f"Quantity must be positive for product {item.get('productId')}")

            weight = item.get('weight')
            if weight is None:
                weight = default_weight
            else:
                try:
                    weight = Decimal(str(weight))
                except InvalidOperation:
                    raise ShippingValidationException(f"Invalid weight for product {item.get('productId')}")
                if not weight.is_finite() or weight < ZERO:
                    raise ShippingValidationException(f"Weight must be >= 0 for product {item.get('productId')}")

            total += weight * quantity

        return total

    @staticmethod
    def parse_subtotal(subtotal) -> Decimal:
        if subtotal is None or subtotal == '':
            return ZERO
        try:
            value = Decimal(str(subtotal))
        except InvalidOperation:
            raise ShippingValidationException('subtotal must be a number')
        if not value.is_finite() or value < ZERO:
            raise ShippingValidationException('subtotal must be >= 0')
        if value > MAX_SUBTOTAL:
            raise ShippingValidationException(f'subtotal must be <= {MAX_SUBTOTAL}')
        return value

    @staticmethod
    def get_active_methods() -> List[ShippingMethod]:
        """
        Active methods, or ShippingDataUnavailableException when the
        reference data cannot be read or was never seeded.
        """
        try:
            methods = RateRepository.list_active_shipping_methods()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Shipping methods unavailable: {e}", exc_info=True)
            raise ShippingDataUnavailableException('Shipping data is unavailable') from e

        if not methods:
            raise ShippingDataUnavailableException('No active shipping methods configured')
        return methods

    @staticmethod
    def _estimate_method(method_identifier=None) -> ShippingMethod:
        """Requested method, else the configured estimate method, else the first active one."""
        methods = ShippingService.get_active_methods()

        requested = method_identifier is not None and str(method_identifier).strip() != ''
        identifier = method_identifier if requested else current_app.config.get('SHIPPING_ESTIMATE_METHOD')

        try:
            method = RateRepository.get_shipping_method(identifier)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Error looking up shipping method {identifier!r}: {e}", exc_info=True)
            raise ShippingDataUnavailableException('Shipping data is unavailable') from e

        if method:
            return method
        if requested:
            raise ShippingValidationException(f"Shipping method '{method_identifier}' not found")

        current_app.logger.warning(
            f"Estimate method {identifier!r} is not active; quoting {methods[0].key} instead"
        )
        return methods[0]

    @staticmethod
    def _resolve_shipping(fallback: ShippingResolution, country: str, state: Optional[str],
                          weight: Decimal) -> ShippingResolution:
        try:
            return ShippingRateResolver.resolve(fallback.method, country, state, weight)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(
                f"Shipping rate lookup failed for {fallback.method_key} {country}/{state}: {e}; "
                f"falling back to default cost {fallback.cost}"
            )
            return fallback

    @staticmethod
    def _resolve_tax(country: str, state: Optional[str]) -> TaxResolution:
        try:
            return TaxRateResolver.resolve(country, state)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(f"Tax rate lookup failed for {country}/{state}: {e}; using 0")
            return TaxResolution(ZERO, SOURCE_DEFAULT)

    @staticmethod
    def _quote(resolution: ShippingResolution, country: str, state: Optional[str], weight: Decimal,
               subtotal: Decimal, tax: TaxResolution) -> ShippingEstimate:
        distance_fee = distance_fee_for(
            current_app.config.get('SHIPPING_DISTANCE_FEE_ZONES'), resolution.method_key, country, state
        )

        estimate = QuoteCalculator.calculate(
            resolution,
            tax.rate,
            subtotal,
            free_shipping_threshold=current_app.config.get('SHIPPING_FREE_THRESHOLD'),
            distance_fee=distance_fee
        )

        current_app.logger.debug(
            f"ShippingService quote: method={resolution.method_key}, destination={country}/{state or '*'}, "
            f"weight={weight}kg, tier_source={resolution.source}, base={estimate.base_cost}, "
            f"distance_fee={estimate.distance_fee}, free={estimate.is_free_shipping}, "
            f"tax_rate={tax.rate} ({tax.source})"
        )
        return estimate

    @staticmethod
    def estimate(
        cart_items: List[Dict],
        subtotal,
        country: Optional[str] = None,
        state: Optional[str] = None,
        postal_code: Optional[str] = None,
        method: Optional[str] = None
    ) -> ShippingEstimate:
        """
        Quote one shipping method (the configured estimate method unless
        ``method`` is given) plus tax for the cart.

        Raises:
            ShippingValidationException: invalid cart or subtotal
            ShippingDataUnavailableException: no usable reference data
        """
        weight = ShippingService.total_weight(cart_items)
        subtotal = ShippingService.parse_subtotal(subtotal)
        country, state, postal_code = ShippingService.resolve_destination(country, state, postal_code)

        fallback = ShippingResolution.default_for(ShippingService._estimate_method(method))

        resolution = ShippingService._resolve_shipping(fallback, country, state, weight)
        tax = ShippingService._resolve_tax(country, state)

        return ShippingService._quote(resolution, country, state, weight, subtotal, tax)

    @staticmethod
    def calculate_options(
        cart_items: List[Dict],
        subtotal,
        country: Optional[str] = None,
        state: Optional[str] = None,
        postal_code: Optional[str] = None
    ) -> Dict:
        """Quote every active shipping method for the cart."""
        weight = ShippingService.total_weight(cart_items)
        subtotal = ShippingService.parse_subtotal(subtotal)
        country, state, postal_code = ShippingService.resolve_destination(country, state, postal_code)

        methods = ShippingService.get_active_methods()
        fallbacks = [ShippingResolution.default_for(method) for method in methods]
        options_meta = [
            {'id': method.id, 'key': method.key, 'name': method.name, 'description': method.description}
            for method in methods
        ]

        resolutions = [
            ShippingService._resolve_shipping(fallback, country, state, weight) for fallback in fallbacks
        ]
        tax = ShippingService._resolve_tax(country, state)

        options = []
        for meta, resolution in zip(options_meta, resolutions):
            option = dict(meta)
            option.update(ShippingService._quote(resolution, country, state, weight, subtotal, tax).to_dict())
            options.append(option)

        return {
            'shippingOptions': options,
            'taxRate': float(tax.rate),
        }
