# novara/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from novara.api.deps import (
    get_loaded_dashboard,
    http_errors,
    require_admin,
)
from novara.domain.schemas import (
    CategoryFormIn,
    CouponFormIn,
    DashboardOut,
    DeliveryChargeIn,
    OrderStatusIn,
    RevenueOut,
)
from novara.services.admin_forms import ImageUpload, ProductForm
from novara.services.api_client import ApiClient
from novara.services.dashboard_service import DashboardService
from novara.services.revenue_service import revenue_report
from novara.utils.money import format_compact, format_inr
from novara.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _upload(file: UploadFile) -> ImageUpload:
    return ImageUpload(
        filename=file.filename or "upload",
        content_type=file.content_type or "",
        content=file.file.read(),
    )


def _stats(dashboard: DashboardService) -> dict:
    stats = dashboard.stats.as_dict()
    stats["total_revenue_display"] = format_inr(dashboard.stats.total_revenue)
    return stats


def _view(dashboard: DashboardService, resource: str) -> dict:
    return {resource: dashboard.collections[resource], "stats": _stats(dashboard)}


def product_form(
    itemname: str = Form(...),
    itemCode: str = Form(...),
    basePrice: str = Form(...),
    category: str = Form(...),
    description: str = Form(""),
    deliveryType: str = Form("ready-to-ship"),
    inStock: bool = Form(True),
    netWeight: str | None = Form(None),
    grossWeight: str | None = Form(None),
    weightUnit: str = Form("grams"),
    existingImages: List[str] | None = Form(None),
    itemImages: List[UploadFile] | None = File(None),
) -> ProductForm:
    return ProductForm(
        itemname=itemname,
        item_code=itemCode,
        base_price=basePrice,
        category=category,
        description=description,
        delivery_type=deliveryType,
        in_stock=inStock,
        net_weight=netWeight,
        gross_weight=grossWeight,
        weight_unit=weightUnit,
        existing_images=existingImages or [],
        new_images=[_upload(f) for f in itemImages or []],
    )


# ---------------- overview ----------------

@router.get("/dashboard", response_model=DashboardOut)
def dashboard_overview(dashboard: DashboardService = Depends(get_loaded_dashboard)):
    """
    Reloads every resource. A resource that fails to load comes back empty
    and is listed under errors, the rest of the dashboard still renders.
    """
    snapshot = dashboard.snapshot()
    snapshot["stats"] = _stats(dashboard)
    return snapshot


@router.get("/revenue", response_model=RevenueOut)
def revenue(period: str = Query("monthly"), client: ApiClient = Depends(require_admin)):
    with http_errors():
        orders = client.orders.get_all().get("orders") or []
    report = revenue_report(orders, period)
    logger.info(f"Revenue {report.period}: {report.current_revenue} over {report.total_orders} orders")
    return RevenueOut(
        period=report.period,
        current_revenue=report.current_revenue,
        previous_revenue=report.previous_revenue,
        growth_rate=report.growth_rate,
        total_orders=report.total_orders,
        avg_order_value=report.avg_order_value,
        current_revenue_display=format_compact(report.current_revenue),
        chart=report.chart,
    )


# ---------------- products ----------------

@router.post("/products", status_code=201)
def create_product(
    form: ProductForm = Depends(product_form),
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        dashboard.create_product(form)
        return _view(dashboard, "products")


@router.put("/products/{product_id}")
def update_product(
    product_id: str,
    form: ProductForm = Depends(product_form),
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        dashboard.update_product(product_id, form)
        return _view(dashboard, "products")


@router.delete("/products/{product_id}")
def delete_product(product_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.delete_product(product_id)
        return _view(dashboard, "products")


# ---------------- orders ----------------

@router.patch("/orders/{order_id}/status")
def update_order_status(
    order_id: str,
    payload: OrderStatusIn,
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        dashboard.update_order_status(order_id, payload.status)
        return _view(dashboard, "orders")


@router.patch("/orders/{order_id}/delivery-charge")
def update_delivery_charge(
    order_id: str,
    payload: DeliveryChargeIn,
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        dashboard.update_delivery_charge(order_id, payload.delivery_charge)
        return _view(dashboard, "orders")


# ---------------- coupons ----------------

@router.post("/coupons", status_code=201)
def create_coupon(payload: CouponFormIn, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.save_coupon(payload.model_dump())
        return _view(dashboard, "coupons")


@router.put("/coupons/{coupon_id}")
def update_coupon(
    coupon_id: str,
    payload: CouponFormIn,
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        dashboard.save_coupon(payload.model_dump(), coupon_id)
        return _view(dashboard, "coupons")


@router.patch("/coupons/{coupon_id}/toggle")
def toggle_coupon(coupon_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.toggle_coupon(coupon_id)
        return _view(dashboard, "coupons")


@router.delete("/coupons/{coupon_id}")
def delete_coupon(coupon_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.delete_coupon(coupon_id)
        return _view(dashboard, "coupons")


# ---------------- categories ----------------

@router.post("/categories", status_code=201)
def create_category(payload: CategoryFormIn, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.save_category(payload.model_dump())
        return _view(dashboard, "categories")


@router.put("/categories/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryFormIn,
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        dashboard.save_category(payload.model_dump(), category_id)
        return _view(dashboard, "categories")


@router.patch("/categories/{category_id}/toggle")
def toggle_category(category_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.toggle_category(category_id)
        return _view(dashboard, "categories")


@router.delete("/categories/{category_id}")
def delete_category(category_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.delete_category(category_id)
        return _view(dashboard, "categories")


# ---------------- reviews ----------------

@router.patch("/reviews/{review_id}/approve")
def approve_review(review_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.approve_review(review_id)
        return _view(dashboard, "reviews")


@router.patch("/reviews/{review_id}/toggle")
def toggle_review(review_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.toggle_review(review_id)
        return _view(dashboard, "reviews")


@router.delete("/reviews/{review_id}")
def delete_review(review_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        dashboard.delete_review(review_id)
        return _view(dashboard, "reviews")


# ---------------- carousel ----------------

@router.post("/carousel", status_code=201)
def create_slide(
    title: str = Form(""),
    subtitle: str = Form(""),
    image: UploadFile | None = File(None),
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        slides = dashboard.save_slide(title, subtitle, _upload(image) if image else None)
        return {"carousel_slides": slides}


@router.put("/carousel/{slide_id}")
def update_slide(
    slide_id: str,
    title: str = Form(""),
    subtitle: str = Form(""),
    image: UploadFile | None = File(None),
    dashboard: DashboardService = Depends(get_loaded_dashboard),
):
    with http_errors():
        slides = dashboard.save_slide(title, subtitle, _upload(image) if image else None, slide_id)
        return {"carousel_slides": slides}


@router.delete("/carousel/{slide_id}")
def delete_slide(slide_id: str, dashboard: DashboardService = Depends(get_loaded_dashboard)):
    with http_errors():
        return {"carousel_slides": dashboard.delete_slide(slide_id)}
