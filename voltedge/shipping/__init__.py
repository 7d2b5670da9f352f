"""
Shipping module: rate tables, shipping/tax resolution and cart quotes.
"""

import click
from flask.cli import with_appcontext

from voltedge.shipping.calculator import QuoteCalculator, ShippingEstimate
from voltedge.shipping.exceptions import (
    ShippingException,
    ShippingDataUnavailableException,
    ShippingValidationException,
)
from voltedge.shipping.models import ShippingMethod, ShippingRate, TaxRate
from voltedge.shipping.repository import RateRepository
from voltedge.shipping.resolvers import ShippingRateResolver, TaxRateResolver
from voltedge.shipping.service import ShippingService


@click.command('seed-shipping')
@with_appcontext
def seed_shipping_command():
    """Upsert shipping methods, rate tiers and tax rates."""
    from voltedge.shipping.seed import seed_shipping_data

    summary = seed_shipping_data()
    for table, counts in summary.items():
        click.echo(
            f"{table}: created {counts['created']}, updated {counts['updated']}, skipped {counts['skipped']}"
        )


def init_shipping(app):
    """
    Register the shipping blueprint and CLI commands with the Flask app.
    """
    from voltedge.shipping.routes import shipping_bp

    app.register_blueprint(shipping_bp)
    app.cli.add_command(seed_shipping_command)

    return app


__all__ = [
    'QuoteCalculator',
    'ShippingEstimate',
    'ShippingException',
    'ShippingDataUnavailableException',
    'ShippingValidationException',
    'ShippingMethod',
    'ShippingRate',
    'TaxRate',
    'RateRepository',
    'ShippingRateResolver',
    'TaxRateResolver',
    'ShippingService',
    'init_shipping',
]
