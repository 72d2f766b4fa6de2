# novara/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException

from novara.api.deps import get_client, http_errors
from novara.services.api_client import ApiClient

router = APIRouter(prefix="/orders", tags=["orders"])


def _signed_in(client: ApiClient = Depends(get_client)) -> ApiClient:
    if not client.token:
        raise HTTPException(status_code=401, detail="Please sign in to see your orders")
    return client


@router.get("")
def my_orders(client: ApiClient = Depends(_signed_in)):
    """Orders of the signed-in customer, newest first as the backend returns them."""
    with http_errors():
        return client.orders.mine()


@router.get("/{order_id}")
def get_order(order_id: str, client: ApiClient = Depends(_signed_in)):
    with http_errors():
        return client.orders.get_by_id(order_id)
