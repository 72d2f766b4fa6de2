# novara/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException

from novara.api.deps import get_cart_service, http_errors
from novara.domain.schemas import CartOut, ItemIn, QuantityIn, WishlistOut
from novara.services.cart_service import CartService

router = APIRouter(tags=["cart"])


def _wishlist(items) -> WishlistOut:
    return WishlistOut(items=items, count=len(items))


@router.get("/cart", response_model=CartOut)
def get_cart(svc: CartService = Depends(get_cart_service)):
    with http_errors():
        return svc.get_cart().as_dict()


@router.post("/cart/items", response_model=CartOut)
def add_item(payload: ItemIn, svc: CartService = Depends(get_cart_service)):
    with http_errors():
        return svc.add(payload.product_id, payload.quantity).as_dict()


@router.put("/cart/items/{product_id}", response_model=CartOut)
def update_item(product_id: str, payload: QuantityIn, svc: CartService = Depends(get_cart_service)):
    with http_errors():
        try:
            return svc.update(product_id, payload.quantity).as_dict()
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))


@router.delete("/cart/items/{product_id}", response_model=CartOut)
def remove_item(product_id: str, svc: CartService = Depends(get_cart_service)):
    with http_errors():
        return svc.remove(product_id).as_dict()


@router.delete("/cart", status_code=204)
def clear_cart(svc: CartService = Depends(get_cart_service)):
    with http_errors():
        svc.clear()


@router.get("/wishlist", response_model=WishlistOut)
def get_wishlist(svc: CartService = Depends(get_cart_service)):
    with http_errors():
        return _wishlist(svc.get_wishlist())


@router.post("/wishlist/{product_id}", response_model=WishlistOut)
def add_to_wishlist(product_id: str, svc: CartService = Depends(get_cart_service)):
    with http_errors():
        return _wishlist(svc.add_to_wishlist(product_id))


@router.delete("/wishlist/{product_id}", response_model=WishlistOut)
def remove_from_wishlist(product_id: str, svc: CartService = Depends(get_cart_service)):
    with http_errors():
        return _wishlist(svc.remove_from_wishlist(product_id))
