# novara/domain/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List
from decimal import Decimal
from datetime import datetime


# ---------------- auth ----------------

class LoginIn(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class RegisterIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6, description="At least 6 characters")
    phone: str | None = None


# ---------------- catalog ----------------

class ReviewIn(BaseModel):
    """Customer review, published once an admin approves it."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3)
    rating: int = Field(5, ge=1, le=5)
    title: str = Field(..., min_length=1)
    review: str = Field(..., min_length=1)


# ---------------- cart ----------------

class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, description="Quantity (must be > 0)")


class QuantityIn(BaseModel):
    """Quantities below 1 leave the cart unchanged."""

    quantity: int


class CartItemOut(BaseModel):
    product_id: str
    name: str | None = None
    price: Decimal
    quantity: int
    item_total: Decimal


class CartOut(BaseModel):
    items: List[CartItemOut]
    cart_total: Decimal
    cart_count: int


class WishlistOut(BaseModel):
    items: List[str]
    count: int


# ---------------- checkout ----------------

class CheckoutFormIn(BaseModel):
    """Checkout form. Phone is required, the rest mirrors the shipping address."""

    customer_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str | None = None
    coupon_code: str | None = None


class CouponIn(BaseModel):
    coupon_code: str


class QuoteIn(BaseModel):
    coupon_code: str | None = None


class QuoteOut(BaseModel):
    subtotal: Decimal
    discount: Decimal
    delivery_charge: Decimal
    total: Decimal
    free_delivery: bool
    coupon_code: str | None = None
    coupon_error: str = ""


class PaymentSuccessIn(BaseModel):
    """Razorpay handler payload, passed through verbatim."""

    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None

    model_config = ConfigDict(extra="allow")


class PaymentFailureIn(BaseModel):
    """Razorpay payment.failed error object."""

    code: str | None = None
    description: str | None = None
    source: str | None = None
    step: str | None = None
    reason: str | None = None

    model_config = ConfigDict(extra="allow")


class CheckoutOut(BaseModel):
    id: int
    state: str
    message: str | None = None
    order_id: str | None = None
    gateway_order_id: str | None = None
    payment_id: str | None = None
    subtotal: Decimal | None = None
    coupon_code: str | None = None
    discount: Decimal | None = None
    delivery_charge: Decimal | None = None
    amount: Decimal | None = None
    redirect_to: str | None = None
    redirect_after_ms: int | None = None
    created_at: datetime | None = None
    widget_options: Dict[str, Any] | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------- admin ----------------

class StatsOut(BaseModel):
    total_products: int
    total_orders: int
    pending_orders: int
    total_revenue: Decimal
    total_revenue_display: str


class DashboardOut(BaseModel):
    stats: StatsOut
    products: List[Dict[str, Any]]
    orders: List[Dict[str, Any]]
    coupons: List[Dict[str, Any]]
    categories: List[Dict[str, Any]]
    reviews: List[Dict[str, Any]]
    carousel_slides: List[Dict[str, Any]]
    pending_reviews: int
    errors: Dict[str, str]


class OrderStatusIn(BaseModel):
    status: str = Field(..., min_length=1)


class DeliveryChargeIn(BaseModel):
    delivery_charge: Decimal = Field(..., ge=0)


class CouponFormIn(BaseModel):
    """Coupon create/edit form, validated again by the admin form builder."""

    code: str = ""
    discountType: str = "percentage"
    discountValue: float | str | None = None
    minOrderAmount: float | str | None = None
    maxDiscount: float | str | None = None
    expiresAt: str = ""
    usageLimit: int | str | None = None
    description: str = ""


class CategoryFormIn(BaseModel):
    name: str = ""
    slug: str = ""
    description: str = ""
    displayOrder: int | str | None = 0
    showInNavbar: bool = True


class ChartPointOut(BaseModel):
    period: str
    revenue: Decimal
    orders: int


class RevenueOut(BaseModel):
    period: str
    current_revenue: Decimal
    previous_revenue: Decimal
    growth_rate: Decimal
    total_orders: int
    avg_order_value: Decimal
    current_revenue_display: str
    chart: List[ChartPointOut]
