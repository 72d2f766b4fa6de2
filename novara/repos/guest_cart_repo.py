# novara/repos/guest_cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from novara.data.models.cart import CartModel
from novara.data.models.cart_item import CartItemModel
from novara.data.models.wishlist_item import WishlistItemModel


class GuestCartRepo:
    def __init__(self, db: Session):
        self.db = db

    # cart
    def get_cart(self, owner_key: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.owner_key == owner_key)
        ).scalar_one_or_none()

    def get_or_create_cart(self, owner_key: str) -> CartModel:
        cart = self.get_cart(owner_key)
        if cart:
            return cart
        cart = CartModel(owner_key=owner_key)
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, cart_id: int, product_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_cart_item(self, cart_id: int, product_id: str) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        self.db.commit()
        return result.rowcount

    def clear_cart(self, cart_id: int) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        self.db.commit()
        return result.rowcount

    # wishlist
    def get_wishlist(self, owner_key: str) -> list[str]:
        return list(
            self.db.execute(
                select(WishlistItemModel.product_id)
                .where(WishlistItemModel.owner_key == owner_key)
                .order_by(WishlistItemModel.id)
            ).scalars()
        )

    def add_to_wishlist(self, owner_key: str, product_id: str) -> bool:
        exists = self.db.execute(
            select(WishlistItemModel).where(
                WishlistItemModel.owner_key == owner_key,
                WishlistItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()
        if exists:
            return False
        self.db.add(WishlistItemModel(owner_key=owner_key, product_id=product_id))
        self.db.commit()
        return True

    def remove_from_wishlist(self, owner_key: str, product_id: str) -> int:
        result = self.db.execute(
            delete(WishlistItemModel).where(
                WishlistItemModel.owner_key == owner_key,
                WishlistItemModel.product_id == product_id,
            )
        )
        self.db.commit()
        return result.rowcount
