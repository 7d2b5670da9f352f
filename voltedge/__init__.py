import logging
import os

from flask import Flask, jsonify, request
from sqlalchemy.exc import OperationalError

from .config import Config, config_by_name
from .extensions import db, init_extensions


def create_app(config_class: type[Config] | None = None):
    app = Flask(__name__)

    if config_class is None:
        config_class = config_by_name.get(os.environ.get("FLASK_ENV", "production"), Config)
    app.config.from_object(config_class)

    app.logger.setLevel(logging.DEBUG if app.config.get("DEBUG") else logging.INFO)

    init_extensions(app)

    from .shipping import init_shipping
    init_shipping(app)

    @app.route("/_health", methods=["GET"])
    def healthcheck():
        return jsonify({"status": "ok"}), 200

    @app.errorhandler(OperationalError)
    def handle_database_error(e):
        """Handle database connection errors gracefully."""
        app.logger.error(f"Database connection error: {e}", exc_info=True)
        try:
            db.session.rollback()
        except Exception as rollback_error:
            app.logger.warning(f"Rollback after database error failed: {rollback_error}")

        return jsonify({
            "error": "Database connection error",
            "message": "A temporary database error occurred. Please try again.",
            "path": request.path,
        }), 503

    return app
