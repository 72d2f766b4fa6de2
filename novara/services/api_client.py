# novara/services/api_client.py
import requests
from requests import RequestException

from novara.domain.errors import ApiError
from novara.utils.settings import API_URL, HTTP_TIMEOUT
from novara.utils.logging import get_logger

logger = get_logger(__name__)


class ApiClient:
    """
    Thin JSON-over-HTTP wrapper around the Novara backend.
    Attaches the bearer token and turns every failure into ApiError.
    No retries: a failed call surfaces to the caller immediately.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or API_URL).rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

        self.auth = AuthAPI(self)
        self.products = ProductsAPI(self)
        self.cart = CartAPI(self)
        self.orders = OrdersAPI(self)
        self.payment = PaymentAPI(self)
        self.coupons = CouponsAPI(self)
        self.categories = CategoriesAPI(self)
        self.reviews = ReviewsAPI(self)
        self.carousel = CarouselAPI(self)

    def _headers(self, multipart: bool) -> dict:
        headers = {"Accept": "application/json"}
        if not multipart:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        params: dict | None = None,
        data: dict | None = None,
        files: list | None = None,
    ):
        url = f"{self.base_url}/{path.lstrip('/')}"
        multipart = files is not None
        logger.info(f"ApiClient {method} {url}")

        try:
            resp = self.session.request(
                method,
                url,
                json=json,
                params=params,
                data=data,
                files=files,
                headers=self._headers(multipart),
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"ApiClient {method} {url} failed: {e}")
            raise ApiError(f"Backend unreachable: {e}") from e

        if resp.status_code >= 400:
            payload = _safe_json(resp)
            message = (
                payload.get("message") if isinstance(payload, dict) else None
            ) or resp.reason or f"HTTP {resp.status_code}"
            logger.error(f"ApiClient {method} {url} -> {resp.status_code}: {message}")
            raise ApiError(message, status_code=resp.status_code, payload=payload)

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"ApiClient {method} {url} -> {resp.status_code}: body is not JSON")
            raise ApiError("Invalid response from backend", status_code=resp.status_code) from e

    def get(self, path: str, **params):
        return self.request("GET", path, params=params or None)

    def post(self, path: str, json: dict | None = None):
        return self.request("POST", path, json=json)

    def put(self, path: str, json: dict | None = None):
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: dict | None = None):
        return self.request("PATCH", path, json=json)

    def delete(self, path: str):
        return self.request("DELETE", path)


def _safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


class _Resource:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthAPI(_Resource):
    def login(self, credentials: dict) -> dict:
        return self.client.post("/auth/login", credentials)

    def register(self, user_data: dict) -> dict:
        return self.client.post("/auth/register", user_data)

    def profile(self) -> dict:
        return self.client.get("/auth/profile")


class ProductsAPI(_Resource):
    def get_all(self, category: str | None = None, search: str | None = None) -> dict:
        params = {}
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        return self.client.get("/products", **params)

    def trending(self) -> dict:
        return self.client.get("/products/trending")

    def get_by_id(self, product_id: str) -> dict:
        return self.client.get(f"/products/{product_id}")

    def create(self, fields: dict, files: list) -> dict:
        return self.client.request("POST", "/products", data=fields, files=files)

    def update(self, product_id: str, fields: dict, files: list) -> dict:
        return self.client.request("PUT", f"/products/{product_id}", data=fields, files=files)

    def delete(self, product_id: str) -> dict:
        return self.client.delete(f"/products/{product_id}")


class CartAPI(_Resource):
    """Server-side cart and wishlist of the signed-in user."""

    def get_cart(self) -> dict:
        return self.client.get("/users/cart")

    def add(self, product_id: str, quantity: int) -> dict:
        return self.client.post("/users/cart", {"productId": product_id, "quantity": quantity})

    def update(self, product_id: str, quantity: int) -> dict:
        return self.client.put(f"/users/cart/{product_id}", {"quantity": quantity})

    def remove(self, product_id: str) -> dict:
        return self.client.delete(f"/users/cart/{product_id}")

    def clear(self) -> dict:
        return self.client.delete("/users/cart")

    def get_wishlist(self) -> dict:
        return self.client.get("/users/wishlist")

    def add_to_wishlist(self, product_id: str) -> dict:
        return self.client.post(f"/users/wishlist/{product_id}")

    def remove_from_wishlist(self, product_id: str) -> dict:
        return self.client.delete(f"/users/wishlist/{product_id}")


class OrdersAPI(_Resource):
    def create(self, order_data: dict) -> dict:
        return self.client.post("/orders", order_data)

    def get_all(self) -> dict:
        return self.client.get("/orders")

    def mine(self) -> dict:
        return self.client.get("/orders/myorders")

    def get_by_id(self, order_id: str) -> dict:
        return self.client.get(f"/orders/{order_id}")

    def update(self, order_id: str, order_data: dict) -> dict:
        return self.client.put(f"/orders/{order_id}", order_data)


class PaymentAPI(_Resource):
    def create_order(self, amount: float, order_id: str, currency: str = "INR") -> dict:
        return self.client.post(
            "/payment/create-order",
            {"amount": amount, "currency": currency, "receipt": f"order_{order_id}"},
        )

    def verify(self, payment_data: dict) -> dict:
        return self.client.post("/payment/verify", payment_data)

    def report_failure(self, order_id: str, error: dict) -> dict:
        return self.client.post("/payment/failed", {"orderId": order_id, "error": error})


class CouponsAPI(_Resource):
    def get_all(self) -> dict:
        return self.client.get("/coupons")

    def active(self) -> dict:
        return self.client.get("/coupons/active")

    def validate(self, code: str, order_amount: float) -> dict:
        return self.client.post("/coupons/validate", {"code": code, "orderAmount": order_amount})

    def create(self, coupon_data: dict) -> dict:
        return self.client.post("/coupons", coupon_data)

    def update(self, coupon_id: str, coupon_data: dict) -> dict:
        return self.client.put(f"/coupons/{coupon_id}", coupon_data)

    def toggle(self, coupon_id: str) -> dict:
        return self.client.patch(f"/coupons/{coupon_id}/toggle")

    def delete(self, coupon_id: str) -> dict:
        return self.client.delete(f"/coupons/{coupon_id}")


class CategoriesAPI(_Resource):
    def get_all(self, is_active: bool | None = None, show_in_navbar: bool | None = None) -> dict:
        params = {}
        if is_active is not None:
            params["isActive"] = str(is_active).lower()
        if show_in_navbar is not None:
            params["showInNavbar"] = str(show_in_navbar).lower()
        return self.client.get("/categories", **params)

    def get_by_id(self, category_id: str) -> dict:
        return self.client.get(f"/categories/{category_id}")

    def create(self, data: dict) -> dict:
        return self.client.post("/categories", data)

    def update(self, category_id: str, data: dict) -> dict:
        return self.client.put(f"/categories/{category_id}", data)

    def delete(self, category_id: str) -> dict:
        return self.client.delete(f"/categories/{category_id}")

    def toggle(self, category_id: str) -> dict:
        return self.client.patch(f"/categories/{category_id}/toggle")


class ReviewsAPI(_Resource):
    def get_all(self) -> dict:
        return self.client.get("/reviews")

    def get_all_admin(self) -> dict:
        return self.client.get("/reviews/all")

    def stats(self) -> dict:
        return self.client.get("/reviews/stats")

    def create(self, review_data: dict) -> dict:
        return self.client.post("/reviews", review_data)

    def approve(self, review_id: str) -> dict:
        return self.client.patch(f"/reviews/{review_id}/approve")

    def toggle(self, review_id: str) -> dict:
        return self.client.patch(f"/reviews/{review_id}/toggle")

    def delete(self, review_id: str) -> dict:
        return self.client.delete(f"/reviews/{review_id}")


class CarouselAPI(_Resource):
    def get_all(self) -> dict:
        return self.client.get("/carousel/slides")

    def create(self, fields: dict, files: list) -> dict:
        return self.client.request("POST", "/carousel/slides", data=fields, files=files)

    def update(self, slide_id: str, fields: dict, files: list) -> dict:
        return self.client.request("PUT", f"/carousel/slides/{slide_id}", data=fields, files=files)

    def delete(self, slide_id: str) -> dict:
        return self.client.delete(f"/carousel/slides/{slide_id}")
