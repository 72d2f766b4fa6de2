# novara/api/deps.py
from contextlib import contextmanager

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from novara.data.database import get_db
from novara.domain.errors import (
    ApiError,
    CheckoutNotFoundError,
    InvalidCouponError,
    InvalidTransitionError,
    NovaraError,
    PaymentError,
    ValidationError,
)
from novara.services.api_client import ApiClient
from novara.services.cart_service import CartOwner, CartService, entity_id_of
from novara.services.checkout_service import CheckoutService
from novara.services.dashboard_service import DashboardService
from novara.services.payment_widget import PaymentWidget, RazorpayCheckoutWidget


def bearer_token(authorization: str | None = Header(None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_client(token: str | None = Depends(bearer_token)) -> ApiClient:
    return ApiClient(token=token)


def _profile_user(client: ApiClient) -> dict:
    try:
        profile = client.auth.profile()
    except ApiError as e:
        if e.status_code in (401, 403):
            raise HTTPException(status_code=401, detail=e.message)
        raise to_http(e)
    return profile.get("user") or profile


def get_owner(
    client: ApiClient = Depends(get_client),
    x_guest_session: str | None = Header(None),
) -> CartOwner:
    if client.token:
        user_id = entity_id_of(_profile_user(client))
        if not user_id:
            raise HTTPException(status_code=401, detail="Not authorized")
        return CartOwner(user_id=user_id)
    if x_guest_session:
        return CartOwner(guest_key=x_guest_session)
    raise HTTPException(status_code=401, detail="Sign in or send X-Guest-Session")


def get_widget() -> PaymentWidget:
    return RazorpayCheckoutWidget()


def get_cart_service(
    db: Session = Depends(get_db),
    client: ApiClient = Depends(get_client),
    owner: CartOwner = Depends(get_owner),
) -> CartService:
    return CartService(db, client, owner)


def get_checkout_service(
    db: Session = Depends(get_db),
    client: ApiClient = Depends(get_client),
    cart: CartService = Depends(get_cart_service),
    widget: PaymentWidget = Depends(get_widget),
) -> CheckoutService:
    return CheckoutService(db, client, cart, widget)


def require_admin(client: ApiClient = Depends(get_client)) -> ApiClient:
    if not client.token:
        raise HTTPException(status_code=401, detail="Not authorized")
    user = _profile_user(client)
    if not (user.get("isAdmin") or user.get("role") == "admin"):
        raise HTTPException(status_code=403, detail="Admin access required")
    return client


def get_dashboard(client: ApiClient = Depends(require_admin)) -> DashboardService:
    return DashboardService(client)


def get_loaded_dashboard(dashboard: DashboardService = Depends(get_dashboard)) -> DashboardService:
    """Dashboard loaded from the backend, so mutations are checked against current data."""
    return dashboard.load()


def to_http(e: NovaraError) -> HTTPException:
    if isinstance(e, ValidationError):
        detail = {"message": e.message, "field": e.field} if e.field else e.message
        return HTTPException(status_code=422, detail=detail)
    if isinstance(e, InvalidCouponError):
        return HTTPException(status_code=400, detail={"message": e.message, "code": e.code})
    if isinstance(e, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, CheckoutNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PaymentError):
        return HTTPException(status_code=502, detail=e.message)
    if isinstance(e, ApiError):
        status = e.status_code if e.status_code and e.status_code >= 400 else 502
        return HTTPException(status_code=status, detail=e.message)
    return HTTPException(status_code=400, detail=str(e))


@contextmanager
def http_errors():
    """Translate service exceptions raised inside the block into HTTP errors."""
    try:
        yield
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NovaraError as e:
        raise to_http(e)
