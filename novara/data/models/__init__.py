# import every model so SQLAlchemy registers it in Base.metadata

from novara.data.models.cart import CartModel
from novara.data.models.cart_item import CartItemModel
from novara.data.models.wishlist_item import WishlistItemModel
from novara.data.models.checkout import CheckoutModel

__all__ = ["CartModel", "CartItemModel", "WishlistItemModel", "CheckoutModel"]
