# novara/api/routers/catalog.py
from fastapi import APIRouter, Depends, Query

from novara.api.deps import get_client, http_errors
from novara.domain.schemas import ReviewIn
from novara.services.api_client import ApiClient

router = APIRouter(tags=["catalog"])

ALL_CATEGORIES = "all"


# ---------------- products ----------------

@router.get("/products")
def list_products(
    category: str | None = Query(None),
    search: str | None = Query(None),
    client: ApiClient = Depends(get_client),
):
    """Product listing, optionally narrowed to one category or a search term."""
    if category == ALL_CATEGORIES:
        category = None
    with http_errors():
        return client.products.get_all(category=category, search=search)


@router.get("/products/trending")
def trending_products(client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.products.trending()


@router.get("/products/{product_id}")
def get_product(product_id: str, client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.products.get_by_id(product_id)


# ---------------- categories ----------------

@router.get("/categories")
def list_categories(
    navbar: bool | None = Query(None, description="Only categories shown in the navbar"),
    client: ApiClient = Depends(get_client),
):
    # shoppers only ever see active categories
    with http_errors():
        return client.categories.get_all(is_active=True, show_in_navbar=navbar)


@router.get("/categories/{category_id}")
def get_category(category_id: str, client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.categories.get_by_id(category_id)


# ---------------- coupons ----------------

@router.get("/coupons/active")
def active_coupons(client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.coupons.active()


# ---------------- reviews ----------------

@router.get("/reviews")
def list_reviews(client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.reviews.get_all()


@router.get("/reviews/stats")
def review_stats(client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.reviews.stats()


@router.post("/reviews", status_code=201)
def submit_review(payload: ReviewIn, client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.reviews.create(payload.model_dump())
