from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from novara.data.models.cart_item import CartItemModel
from novara.repos.guest_cart_repo import GuestCartRepo
from novara.services.api_client import ApiClient
from novara.services.pricing import cart_total
from novara.utils.money import D, ZERO
from novara.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartOwner:
    """Who the session cart belongs to: a signed-in user or a guest session."""

    user_id: str | None = None
    guest_key: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def key(self) -> str:
        if self.user_id is not None:
            return f"user:{self.user_id}"
        if self.guest_key:
            return f"guest:{self.guest_key}"
        raise PermissionError("No session for cart")


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str | None
    price: Decimal
    quantity: int

    @property
    def item_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class CartView:
    lines: List[CartLine]
    total: Decimal

    @property
    def count(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def as_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "price": line.price,
                    "quantity": line.quantity,
                    "item_total": line.item_total,
                }
                for line in self.lines
            ],
            "cart_total": self.total,
            "cart_count": self.count,
        }


def product_price(product: dict) -> Decimal:
    # current pricing model exposes finalPrice, older products only basePrice
    for key in ("finalPrice", "price", "basePrice"):
        if product.get(key) is not None:
            return D(product[key])
    return ZERO


def entity_id_of(entity: dict) -> str | None:
    value = entity.get("_id") or entity.get("id")
    return str(value) if value is not None else None


def _remote_line(item: dict) -> CartLine:
    product = item.get("product") or {}
    quantity = int(item.get("quantity") or 0)
    price = D(item["price"]) if item.get("price") is not None else product_price(product)
    return CartLine(
        product_id=str(item.get("productId") or entity_id_of(product)),
        name=product.get("itemname") or product.get("name"),
        price=price,
        quantity=quantity,
    )


class CartService:
    """
    Session cart and wishlist.
    Signed-in users: backend /users/cart and /users/wishlist.
    Guests: local tables keyed by the guest session.
    """

    def __init__(self, db: Session, client: ApiClient, owner: CartOwner):
        self.repo = GuestCartRepo(db)
        self.client = client
        self.owner = owner

    # query
    def get_cart(self) -> CartView:
        if self.owner.authenticated:
            data = self.client.cart.get_cart()
            lines = [_remote_line(item) for item in data.get("cart") or []]
            total = data.get("cartTotal")
            return CartView(lines=lines, total=D(total) if total is not None else cart_total(lines))

        cart = self.repo.get_cart(self.owner.key)
        if not cart:
            return CartView(lines=[], total=ZERO)

        lines = [
            CartLine(product_id=i.product_id, name=i.name, price=D(i.price), quantity=i.quantity)
            for i in self.repo.get_cart_items(cart.id)
        ]
        return CartView(lines=lines, total=cart_total(lines))

    # commands
    def add(self, product_id: str, quantity: int = 1) -> CartView:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        if self.owner.authenticated:
            self.client.cart.add(product_id, quantity)
            return self.get_cart()

        logger.info(f"Fetching product {product_id} for guest cart {self.owner.key}")
        product = self.client.products.get_by_id(product_id).get("product") or {}
        price = product_price(product)

        cart = self.repo.get_or_create_cart(self.owner.key)
        existing_item = self.repo.get_cart_item(cart.id, product_id)
        if existing_item:
            logger.info(
                f"Product {product_id} already in cart, quantity "
                f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
            existing_item.price = price
            self.repo.add_cart_item(existing_item)
        else:
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    name=product.get("itemname") or product.get("name"),
                    quantity=quantity,
                    price=price,
                )
            )
        return self.get_cart()

    def update(self, product_id: str, quantity: int) -> CartView:
        if quantity < 1:
            return self.get_cart()

        if self.owner.authenticated:
            self.client.cart.update(product_id, quantity)
            return self.get_cart()

        cart = self.repo.get_cart(self.owner.key)
        item = self.repo.get_cart_item(cart.id, product_id) if cart else None
        if not item:
            raise ValueError("Cart item not found")
        item.quantity = quantity
        self.repo.add_cart_item(item)
        return self.get_cart()

    def remove(self, product_id: str) -> CartView:
        if self.owner.authenticated:
            self.client.cart.remove(product_id)
            return self.get_cart()

        cart = self.repo.get_cart(self.owner.key)
        if cart:
            self.repo.delete_cart_item(cart.id, product_id)
        return self.get_cart()

    def clear(self) -> None:
        logger.info(f"Clearing cart {self.owner.key}")
        if self.owner.authenticated:
            self.client.cart.clear()
            return

        cart = self.repo.get_cart(self.owner.key)
        if cart:
            self.repo.clear_cart(cart.id)

    # wishlist
    def get_wishlist(self) -> List[str]:
        if self.owner.authenticated:
            items = self.client.cart.get_wishlist().get("wishlist") or []
            return [item if isinstance(item, str) else entity_id_of(item) for item in items]
        return self.repo.get_wishlist(self.owner.key)

    def add_to_wishlist(self, product_id: str) -> List[str]:
        if self.owner.authenticated:
            self.client.cart.add_to_wishlist(product_id)
        else:
            self.repo.add_to_wishlist(self.owner.key, product_id)
        return self.get_wishlist()

    def remove_from_wishlist(self, product_id: str) -> List[str]:
        if self.owner.authenticated:
            self.client.cart.remove_from_wishlist(product_id)
        else:
            self.repo.remove_from_wishlist(self.owner.key, product_id)
        return self.get_wishlist()

    def is_in_wishlist(self, product_id: str) -> bool:
        return bool(product_id) and product_id in self.get_wishlist()
