"""Tests for the session cart and wishlist."""

from decimal import Decimal

import pytest

from novara.services.cart_service import CartOwner, CartService


@pytest.fixture
def guest_cart(db, client, guest_owner):
    client.products.get_by_id.side_effect = lambda product_id: {
        "product": {"_id": product_id, "itemname": f"Item {product_id}", "finalPrice": 1200}
    }
    return CartService(db, client, guest_owner)


class TestGuestCart:
    def test_empty(self, guest_cart):
        cart = guest_cart.get_cart()
        assert cart.is_empty
        assert cart.total == Decimal("0")

    def test_add_merges_quantity(self, guest_cart):
        guest_cart.add("p1")
        cart = guest_cart.add("p1", 2)

        assert cart.count == 1
        assert cart.lines[0].quantity == 3
        assert cart.total == Decimal("3600")

    def test_add_uses_backend_price(self, guest_cart, client):
        cart = guest_cart.add("p9")
        client.products.get_by_id.assert_called_once_with("p9")
        assert cart.lines[0].name == "Item p9"
        assert cart.lines[0].price == Decimal("1200")

    def test_non_positive_quantity(self, guest_cart):
        with pytest.raises(ValueError):
            guest_cart.add("p1", 0)

    def test_update_below_one_is_ignored(self, guest_cart):
        guest_cart.add("p1", 2)
        assert guest_cart.update("p1", 0).lines[0].quantity == 2

    def test_update_missing_item(self, guest_cart):
        with pytest.raises(ValueError):
            guest_cart.update("nope", 2)

    def test_remove_and_clear(self, guest_cart):
        guest_cart.add("p1")
        guest_cart.add("p2")
        assert guest_cart.remove("p1").count == 1
        guest_cart.clear()
        assert guest_cart.get_cart().is_empty

    def test_carts_are_per_session(self, db, client, guest_cart):
        guest_cart.add("p1")
        other = CartService(db, client, CartOwner(guest_key="someone-else"))
        assert other.get_cart().is_empty

    def test_as_dict(self, guest_cart):
        data = guest_cart.add("p1", 2).as_dict()
        assert data["cart_count"] == 1
        assert data["cart_total"] == Decimal("2400")
        assert data["items"][0]["item_total"] == Decimal("2400")


class TestGuestWishlist:
    def test_add_is_idempotent(self, guest_cart):
        guest_cart.add_to_wishlist("p1")
        assert guest_cart.add_to_wishlist("p1") == ["p1"]
        assert guest_cart.is_in_wishlist("p1")

    def test_remove(self, guest_cart):
        guest_cart.add_to_wishlist("p1")
        assert guest_cart.remove_from_wishlist("p1") == []
        assert not guest_cart.is_in_wishlist("p1")


class TestSignedInCart:
    def test_reads_backend_cart(self, cart_service):
        cart = cart_service.get_cart()
        assert cart.lines[0].product_id == "p1"
        assert cart.lines[0].name == "Solitaire Ring"
        assert cart.total == Decimal("1500")

    def test_commands_go_to_backend(self, cart_service, client):
        cart_service.add("p2", 1)
        cart_service.update("p2", 3)
        cart_service.remove("p2")
        cart_service.clear()

        client.cart.add.assert_called_once_with("p2", 1)
        client.cart.update.assert_called_once_with("p2", 3)
        client.cart.remove.assert_called_once_with("p2")
        client.cart.clear.assert_called_once()

    def test_wishlist_accepts_populated_products(self, cart_service, client):
        client.cart.get_wishlist.return_value = {"wishlist": [{"_id": "p7"}, "p8"]}
        assert cart_service.get_wishlist() == ["p7", "p8"]


def test_owner_without_session():
    with pytest.raises(PermissionError):
        CartOwner().key
