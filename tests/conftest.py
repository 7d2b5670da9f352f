# tests/conftest.py
import os
import sys

import pytest

# project root on path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from voltedge import create_app  # noqa: E402
from voltedge.config import TestingConfig  # noqa: E402
from voltedge.extensions import db as _db  # noqa: E402
from voltedge.shipping.seed import seed_shipping_data  # noqa: E402


def _make_app(seed):
    app = create_app(TestingConfig)
    ctx = app.app_context()
    ctx.push()
    _db.create_all()
    if seed:
        seed_shipping_data()
    return app, ctx


def _teardown(ctx):
    _db.session.remove()
    _db.drop_all()
    ctx.pop()


@pytest.fixture
def app():
    """App with the shipping reference data seeded."""
    app, ctx = _make_app(seed=True)
    yield app
    _teardown(ctx)


@pytest.fixture
def empty_app():
    """App whose shipping tables exist but were never seeded."""
    app, ctx = _make_app(seed=False)
    yield app
    _teardown(ctx)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def empty_client(empty_app):
    return empty_app.test_client()


@pytest.fixture
def db(app):
    return _db
