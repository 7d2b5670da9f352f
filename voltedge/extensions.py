from flask_migrate import Migrate
from flask_migrate.cli import db as flask_migrate_cli
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect

# Engine options are read from app config in init_extensions
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
csrf = CSRFProtect()


def init_extensions(app):
    """Initialize all extensions with the given Flask app."""
    db.init_app(app)

    migrate.init_app(app, db)
    if "db" not in app.cli.commands:
        app.cli.add_command(flask_migrate_cli)

    csrf.init_app(app)

    app.logger.info("Extensions initialized (SQLAlchemy, Migrate, CSRF)")

    return app
