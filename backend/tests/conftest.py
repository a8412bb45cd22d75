"""
Pytest fixtures for purchasing backend tests.

Provides test database setup, a test client, and small record factories.
"""

import pytest
from purchasing import create_app
from purchasing.extensions import db
from purchasing.models import Item, User
from purchasing.time_utils import utcnow


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'APP_TIMEZONE': 'Asia/Jakarta',
        'DEFAULT_ACTOR': 'SYSTEM',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    # Clear all data but keep schema
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    # Cleanup after test
    db.session.rollback()
    db.session.remove()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


def _make_item(name="Item A", price=100, cost=80, description=None, actor="tester") -> Item:
    now = utcnow()
    item = Item(name=name, description=description, price=price, cost=cost)
    item.stamp_created(actor, now)
    db.session.add(item)
    db.session.commit()
    return item


def _make_user(email="ada@example.com", first_name="Ada", last_name="Lovelace", phone=None) -> User:
    user = User(first_name=first_name, last_name=last_name, email=email, phone=phone)
    user.stamp_created("tester", utcnow())
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture(scope='function')
def item_a(db_session):
    """Item A: price 100, cost 80."""
    return _make_item("Item A", price=100, cost=80)


@pytest.fixture(scope='function')
def item_b(db_session):
    """Item B: price 50, cost 20."""
    return _make_item("Item B", price=50, cost=20)


@pytest.fixture(scope='function')
def item_factory(db_session):
    """Create items: item_factory(name, price=..., cost=...)."""
    return _make_item


@pytest.fixture(scope='function')
def user_factory(db_session):
    """Create users: user_factory(email=...)."""
    return _make_user


def po_body(details, *, datetime="2025-01-15T10:30:00", description="Office supplies", total_price=0, total_cost=0):
    return {
        "datetime": datetime,
        "description": description,
        "totalPrice": total_price,
        "totalCost": total_cost,
        "details": details,
    }


@pytest.fixture(scope='function')
def po_payload():
    """Build a purchase order request body."""
    return po_body
