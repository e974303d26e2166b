"""
Pytest fixtures for Cafecito backend tests.

Provides in-memory database setup, a test client, and product/customer factories.
"""

import pytest
from cafecito import create_app
from cafecito.extensions import db
from cafecito.models import Product, Customer


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'STORE_NAME': 'Cafecito Feliz',
        'SALE_ID_PREFIX': 'CF',
        'SALE_ID_SUFFIX_DIGITS': 4,
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
    """Factory: create an active product (price in cents)."""
    def _make(name="Cafe Americano", price_cents=1000, stock=10, is_active=True):
        product = Product(name=name, price_cents=price_cents, stock=stock, is_active=is_active)
        db_session.add(product)
        db_session.commit()
        return product.id
    return _make


@pytest.fixture(scope='function')
def make_customer(db_session):
    """Factory: create a customer with a given purchase history."""
    def _make(name="Ana Lopez", contact="ana@example.com", purchases_count=0):
        customer = Customer(name=name, contact=contact, purchases_count=purchases_count)
        db_session.add(customer)
        db_session.commit()
        return customer.id
    return _make


@pytest.fixture(scope='function')
def stock_of(db_session):
    """Read stock straight from the database (bypasses the identity map)."""
    def _stock(product_id: int) -> int:
        return db.session.query(Product.stock).filter_by(id=product_id).scalar()
    return _stock


@pytest.fixture(scope='function')
def purchases_of(db_session):
    def _purchases(customer_id: int) -> int:
        return db.session.query(Customer.purchases_count).filter_by(id=customer_id).scalar()
    return _purchases
