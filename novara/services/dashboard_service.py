# novara/services/dashboard_service.py
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Callable, Dict, List

from novara.domain.errors import ValidationError
from novara.domain.order_status import (
    OrderStatus,
    counts_as_revenue,
    ensure_transition,
    order_status_of,
)
from novara.services.admin_forms import (
    ImageUpload,
    ProductForm,
    category_payload,
    coupon_payload,
    slide_multipart,
)
from novara.services.api_client import ApiClient
from novara.services.cart_service import entity_id_of
from novara.utils.money import D, ZERO, to_float
from novara.utils.settings import DASHBOARD_WORKERS
from novara.utils.logging import get_logger

logger = get_logger(__name__)

# resource -> (collection key in list responses, entity key in mutation responses)
RESOURCES = {
    "products": ("products", "product"),
    "orders": ("orders", "order"),
    "coupons": ("coupons", "coupon"),
    "categories": ("categories", "category"),
    "reviews": ("reviews", "review"),
}


@dataclass(frozen=True)
class DashboardStats:
    total_products: int = 0
    total_orders: int = 0
    pending_orders: int = 0
    total_revenue: Decimal = ZERO

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def total_revenue(orders: List[dict]) -> Decimal:
    """Sum of totalAmount over confirmed, processing, shipped and delivered orders."""
    return sum(
        (D(o.get("totalAmount")) for o in orders if counts_as_revenue(order_status_of(o))),
        ZERO,
    )


def compute_stats(products: List[dict], orders: List[dict] | None) -> DashboardStats:
    if orders is None:
        return DashboardStats(total_products=len(products))
    return DashboardStats(
        total_products=len(products),
        total_orders=len(orders),
        pending_orders=sum(1 for o in orders if order_status_of(o) == OrderStatus.PENDING.value),
        total_revenue=total_revenue(orders),
    )


class DashboardService:
    """
    In-memory view of the admin back-office.

    load() fetches the five resources concurrently and joins them all-settled:
    a failed resource becomes an empty list plus a logged error and never
    blocks the others. Mutations reconcile one resource at a time, merging
    the entity the backend returned or refetching that resource when the
    response has none.
    """

    def __init__(self, client: ApiClient, max_workers: int = DASHBOARD_WORKERS):
        self.client = client
        self.max_workers = max_workers
        self.collections: Dict[str, List[dict]] = {name: [] for name in RESOURCES}
        self.errors: Dict[str, str] = {}
        self.carousel_slides: List[dict] = []
        self.stats = DashboardStats()

    def _fetchers(self) -> Dict[str, Callable[[], dict]]:
        return {
            "products": self.client.products.get_all,
            "orders": self.client.orders.get_all,
            "coupons": self.client.coupons.get_all,
            "categories": self.client.categories.get_all,
            "reviews": self.client.reviews.get_all_admin,
        }

    # query
    def load(self) -> "DashboardService":
        fetchers = self._fetchers()
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {name: pool.submit(fetch) for name, fetch in fetchers.items()}

        self.errors = {}
        for name, future in futures.items():
            collection_key = RESOURCES[name][0]
            try:
                self.collections[name] = list(future.result().get(collection_key) or [])
            except Exception as e:
                # all-settled: one failed resource never blocks the others
                logger.error(f"Failed to fetch {name}: {e}")
                self.collections[name] = []
                self.errors[name] = str(e)

        self._recompute_stats()
        self.load_carousel_slides()
        return self

    def load_carousel_slides(self) -> List[dict]:
        try:
            data = self.client.carousel.get_all()
            slides = data.get("slides") if isinstance(data, dict) else None
            self.carousel_slides = slides if isinstance(slides, list) else []
            self.errors.pop("carousel", None)
        except Exception as e:
            logger.error(f"Failed to fetch carousel slides: {e}")
            self.carousel_slides = []
            self.errors["carousel"] = str(e)
        return self.carousel_slides

    def refetch(self, resource: str) -> List[dict]:
        collection_key = RESOURCES[resource][0]
        logger.info(f"Refetching {resource}")
        try:
            self.collections[resource] = list(
                self._fetchers()[resource]().get(collection_key) or []
            )
            self.errors.pop(resource, None)
        except Exception as e:
            logger.error(f"Failed to fetch {resource}: {e}")
            self.collections[resource] = []
            self.errors[resource] = str(e)
        if resource in ("products", "orders"):
            self._recompute_stats()
        return self.collections[resource]

    def find(self, resource: str, entity_id: str) -> dict | None:
        for entity in self.collections[resource]:
            if entity_id_of(entity) == str(entity_id):
                return entity
        return None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.as_dict(),
            **{name: list(items) for name, items in self.collections.items()},
            "carousel_slides": list(self.carousel_slides),
            "errors": dict(self.errors),
            "pending_reviews": sum(1 for r in self.collections["reviews"] if not r.get("isApproved")),
        }

    # reconciliation
    def reconcile(self, resource: str, response: Any) -> List[dict]:
        """Merge the returned entity, or refetch the resource. Exactly one of the two."""
        entity_key = RESOURCES[resource][1]
        entity = response.get(entity_key) if isinstance(response, dict) else None
        entity_id = entity_id_of(entity) if isinstance(entity, dict) else None

        if not entity_id:
            return self.refetch(resource)

        items = self.collections[resource]
        for index, existing in enumerate(items):
            if entity_id_of(existing) == entity_id:
                items[index] = {**existing, **entity}
                break
        else:
            items.insert(0, entity)

        if resource in ("products", "orders"):
            self._recompute_stats()
        return items

    def forget(self, resource: str, entity_id: str) -> List[dict]:
        self.collections[resource] = [
            e for e in self.collections[resource] if entity_id_of(e) != str(entity_id)
        ]
        if resource in ("products", "orders"):
            self._recompute_stats()
        return self.collections[resource]

    def _recompute_stats(self) -> None:
        orders = None if "orders" in self.errors else self.collections["orders"]
        self.stats = compute_stats(self.collections["products"], orders)

    # products
    def create_product(self, form: ProductForm) -> List[dict]:
        fields, files = form.to_multipart()
        return self.reconcile("products", self.client.products.create(fields, files))

    def update_product(self, product_id: str, form: ProductForm) -> List[dict]:
        fields, files = form.to_multipart()
        return self.reconcile("products", self.client.products.update(product_id, fields, files))

    def delete_product(self, product_id: str) -> List[dict]:
        self.client.products.delete(product_id)
        return self.forget("products", product_id)

    # orders
    def update_order_status(self, order_id: str, status: str) -> List[dict]:
        current = self.find("orders", order_id)
        if current is not None:
            status = ensure_transition(order_status_of(current), status).value
        response = self.client.orders.update(order_id, {"orderStatus": status})
        return self.reconcile("orders", response)

    def confirm_order(self, order_id: str) -> List[dict]:
        return self.update_order_status(order_id, OrderStatus.CONFIRMED.value)

    def cancel_order(self, order_id: str) -> List[dict]:
        return self.update_order_status(order_id, OrderStatus.CANCELLED.value)

    def update_delivery_charge(self, order_id: str, charge) -> List[dict]:
        try:
            charge = D(charge)
        except ArithmeticError:
            raise ValidationError("Please enter a valid delivery charge", field="deliveryCharge")
        if charge < 0:
            raise ValidationError("Please enter a valid delivery charge", field="deliveryCharge")

        order = self.find("orders", order_id)
        if order is None:
            order = self.client.orders.get_by_id(order_id).get("order") or {}

        items_total = D(order.get("totalAmount")) - D(order.get("deliveryCharge"))
        response = self.client.orders.update(
            order_id,
            {"deliveryCharge": to_float(charge), "totalAmount": to_float(items_total + charge)},
        )
        return self.reconcile("orders", response)

    # coupons
    def save_coupon(self, form: Dict[str, Any], coupon_id: str | None = None) -> List[dict]:
        payload = coupon_payload(form)
        if coupon_id:
            response = self.client.coupons.update(coupon_id, payload)
        else:
            response = self.client.coupons.create(payload)
        return self.reconcile("coupons", response)

    def toggle_coupon(self, coupon_id: str) -> List[dict]:
        return self.reconcile("coupons", self.client.coupons.toggle(coupon_id))

    def delete_coupon(self, coupon_id: str) -> List[dict]:
        self.client.coupons.delete(coupon_id)
        return self.forget("coupons", coupon_id)

    # categories
    def save_category(self, form: Dict[str, Any], category_id: str | None = None) -> List[dict]:
        payload = category_payload(form)
        if category_id:
            response = self.client.categories.update(category_id, payload)
        else:
            response = self.client.categories.create(payload)
        return self.reconcile("categories", response)

    def toggle_category(self, category_id: str) -> List[dict]:
        return self.reconcile("categories", self.client.categories.toggle(category_id))

    def delete_category(self, category_id: str) -> List[dict]:
        self.client.categories.delete(category_id)
        return self.forget("categories", category_id)

    # reviews
    def approve_review(self, review_id: str) -> List[dict]:
        return self.reconcile("reviews", self.client.reviews.approve(review_id))

    def toggle_review(self, review_id: str) -> List[dict]:
        return self.reconcile("reviews", self.client.reviews.toggle(review_id))

    def delete_review(self, review_id: str) -> List[dict]:
        self.client.reviews.delete(review_id)
        return self.forget("reviews", review_id)

    # carousel
    def save_slide(
        self,
        title: str,
        subtitle: str,
        image: ImageUpload | None,
        slide_id: str | None = None,
    ) -> List[dict]:
        fields, files = slide_multipart(title, subtitle, image, require_image=slide_id is None)
        if slide_id:
            self.client.carousel.update(slide_id, fields, files)
        else:
            self.client.carousel.create(fields, files)
        return self.load_carousel_slides()

    def delete_slide(self, slide_id: str) -> List[dict]:
        self.client.carousel.delete(slide_id)
        return self.load_carousel_slides()
