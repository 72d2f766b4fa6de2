"""Pytest fixtures for storefront tests."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from novara.data.database import Base
from novara.data import models  # noqa: F401
from novara.services.cart_service import CartOwner, CartService
from novara.services.checkout_service import CheckoutService


class FakeWidget:
    """Records what the checkout hands to the payment widget."""

    def __init__(self):
        self.options = None
        self.callbacks = None

    def open(self, options, callbacks):
        self.options = options
        self.callbacks = callbacks
        return options


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


def remote_cart(*lines):
    """Backend /users/cart payload for (product_id, name, price, quantity) lines."""
    cart = [
        {
            "product": {"_id": product_id, "itemname": name, "finalPrice": price},
            "quantity": quantity,
        }
        for product_id, name, price, quantity in lines
    ]
    return {"cart": cart, "cartTotal": sum(price * quantity for _, _, price, quantity in lines)}


@pytest.fixture
def client():
    """Backend client double with a signed-in user's cart and a happy payment path."""
    client = MagicMock()
    client.token = "user-token"
    client.cart.get_cart.return_value = remote_cart(("p1", "Solitaire Ring", 1500, 1))
    client.orders.create.return_value = {"order": {"_id": "65f0c0ffee1234abcd"}}
    client.payment.create_order.return_value = {
        "key_id": "rzp_test_key",
        "order": {"id": "order_GW1", "amount": 200000, "currency": "INR"},
    }
    client.payment.verify.return_value = {"success": True}
    client.payment.report_failure.return_value = {"success": True}
    client.coupons.validate.return_value = {
        "valid": True,
        "coupon": {"code": "SAVE200", "discount": 200},
    }
    return client


@pytest.fixture
def user_owner():
    return CartOwner(user_id="u1")


@pytest.fixture
def guest_owner():
    return CartOwner(guest_key="guest-abc")


@pytest.fixture
def widget():
    return FakeWidget()


@pytest.fixture
def cart_service(db, client, user_owner):
    return CartService(db, client, user_owner)


@pytest.fixture
def checkout_service(db, client, cart_service, widget):
    return CheckoutService(db, client, cart_service, widget, lenient_verification=True)
