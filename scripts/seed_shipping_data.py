"""
Seed Shipping Data
Upsert the shipping methods, rate tiers and tax rates into DATABASE_URL.
Equivalent to `flask --app run seed-shipping`.
"""

import logging
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from voltedge import create_app
from voltedge.shipping.seed import seed_shipping_data


def main():
    """Main function to seed shipping data."""
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    app = create_app()

    with app.app_context():
        app.logger.info("Starting shipping data seed...")
        summary = seed_shipping_data()
        for table, counts in summary.items():
            app.logger.info(
                f"{table}: created {counts['created']}, updated {counts['updated']}, skipped {counts['skipped']}"
            )
        app.logger.info("Shipping data seed completed!")


if __name__ == '__main__':
    main()
