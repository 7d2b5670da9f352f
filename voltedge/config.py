import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _decimal_env(name, default=None):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return Decimal(value.strip())


class Config:
    """Base Flask configuration shared across environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-key-change-this-in-production"

    # Use DATABASE_URL directly without rewriting, fallbacks, or driver switching.
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # pool_pre_ping: Test connections before using them (handles stale connections)
    # pool_recycle: Recycle connections after 1 hour
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {
            "connect_timeout": 10,
            "sslmode": os.environ.get("DATABASE_SSLMODE", "require"),
        }
    }

    # Subtotal at or above which shipping is free. Unset disables free shipping.
    SHIPPING_FREE_THRESHOLD = _decimal_env("SHIPPING_FREE_THRESHOLD")

    # Weight (kg) assumed for a cart line that does not carry its own weight.
    SHIPPING_DEFAULT_ITEM_WEIGHT = _decimal_env("SHIPPING_DEFAULT_ITEM_WEIGHT", Decimal("1.0"))

    # Location used when the customer has no saved address
    SHIPPING_DEFAULT_COUNTRY = os.environ.get("SHIPPING_DEFAULT_COUNTRY", "US")
    SHIPPING_DEFAULT_STATE = os.environ.get("SHIPPING_DEFAULT_STATE", "")
    SHIPPING_DEFAULT_POSTAL_CODE = os.environ.get("SHIPPING_DEFAULT_POSTAL_CODE", "")

    # Method key (or name) quoted by /api/shipping/estimate
    SHIPPING_ESTIMATE_METHOD = os.environ.get("SHIPPING_ESTIMATE_METHOD", "standard")

    # Ordered zone table for distance fees added on top of the tier cost.
    # Each zone: {"countries": [...] or "*", "exclude_countries": [...],
    #             "states": [...] or None, "fees": {method_key: fee, "*": fee}}
    # Empty means no distance fee.
    SHIPPING_DISTANCE_FEE_ZONES = []


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_ECHO = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or "sqlite:///voltedge-dev.db"
    SQLALCHEMY_ENGINE_OPTIONS = {}


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL") or "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    SHIPPING_FREE_THRESHOLD = None
    SHIPPING_DEFAULT_ITEM_WEIGHT = Decimal("1.0")
    SHIPPING_DEFAULT_COUNTRY = "US"
    SHIPPING_DEFAULT_STATE = ""
    SHIPPING_DEFAULT_POSTAL_CODE = ""
    SHIPPING_ESTIMATE_METHOD = "standard"
    SHIPPING_DISTANCE_FEE_ZONES = []


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
