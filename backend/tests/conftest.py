"""
Pytest fixtures for SIGEF backend tests.

Provides the application with an in-memory database, a test client, a
per-test clean database and small factories for products and debts.
"""

from decimal import Decimal

import pytest

from sigef import create_app
from sigef.extensions import db
from sigef.services import debt_service
from sigef.services.products_service import create_product


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: create a product through the service (initial_quantity defaults to quantity)."""
    def _make(name="Arroz 25kg", acquisition_value="150.00", quantity=50, initial_quantity=None):
        patch = {
            "name": name,
            "acquisition_value": Decimal(str(acquisition_value)),
            "quantity": quantity,
        }
        if initial_quantity is not None:
            patch["initial_quantity"] = initial_quantity
        return create_product(patch=patch)
    return _make


@pytest.fixture(scope='function')
def product(make_product):
    """acquisition_value 150, quantity 50: unit cost 3.00."""
    return make_product()


@pytest.fixture(scope='function')
def make_debt(db_session):
    def _make(type="receivable", description="Fornecimento", amount="100.00", **kwargs):
        return debt_service.create_debt(type, description, Decimal(str(amount)), **kwargs)
    return _make
