#!/usr/bin/env python
"""Run database migration"""
from flask_migrate import upgrade

from voltedge import create_app

app = create_app()

with app.app_context():
    app.logger.info("Running database migration...")
    upgrade()
    app.logger.info("Migration completed successfully!")
