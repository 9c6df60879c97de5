from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from storefront import create_app
from storefront.config import TestConfig
from storefront.extensions import db as _db
from storefront.model import Coupon, Product, User


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


def _make_user(n, role="user"):
    u = User(
        first_name=f"First{n}",
        last_name=f"Last{n}",
        mobile=f"0100000{n:03d}",
        email=f"user{n}@example.com",
        password_hash=generate_password_hash("secret123"),
        role=role,
    )
    _db.session.add(u)
    _db.session.commit()
    return u


def _auth(user):
    return {"Authorization": f"Bearer {create_access_token(identity=str(user.id))}"}


@pytest.fixture
def user(app):
    return _make_user(1)


@pytest.fixture
def other_user(app):
    return _make_user(2)


@pytest.fixture
def admin(app):
    return _make_user(99, role="admin")


@pytest.fixture
def auth_headers(user):
    return _auth(user)


@pytest.fixture
def other_headers(other_user):
    return _auth(other_user)


@pytest.fixture
def admin_headers(admin):
    return _auth(admin)


@pytest.fixture
def make_product(app):
    counter = {"n": 0}

    def factory(price="10.00", quantity=10, title=None):
        counter["n"] += 1
        title = title or f"Product {counter['n']}"
        p = Product(
            title=title,
            slug=title.lower().replace(" ", "-"),
            description="test product",
            price=Decimal(price),
            quantity=quantity,
        )
        _db.session.add(p)
        _db.session.commit()
        return p

    return factory


@pytest.fixture
def make_coupon(app):
    def factory(name="SAVE20", discount=20, expires_in=timedelta(days=7)):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        c = Coupon(name=name, discount=Decimal(str(discount)), expiry=now + expires_in)
        _db.session.add(c)
        _db.session.commit()
        return c

    return factory
