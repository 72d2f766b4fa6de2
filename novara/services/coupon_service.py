# novara/services/coupon_service.py
from dataclasses import dataclass
from decimal import Decimal

from novara.domain.errors import ApiError, InvalidCouponError, ValidationError
from novara.services.api_client import ApiClient
from novara.services.pricing import PriceBreakdown, price_breakdown
from novara.utils.money import D, ZERO, to_float
from novara.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_COUPON_ERROR = "Invalid coupon code"


@dataclass(frozen=True)
class CouponResult:
    valid: bool
    discount: Decimal
    coupon: dict


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


def clamp_discount(discount, subtotal, max_discount=None) -> Decimal:
    """Keep a server-quoted discount within [0, maxDiscount] and [0, subtotal]."""
    value = max(ZERO, D(discount))
    if max_discount is not None:
        value = min(value, D(max_discount))
    return min(value, max(ZERO, D(subtotal)))


class CouponService:
    """
    Coupon eligibility is decided by the backend.
    This service only forwards the code and normalizes the answer.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    def apply_coupon(self, code: str, subtotal) -> CouponResult:
        code = normalize_code(code)
        if not code:
            raise ValidationError("Please enter a coupon code", field="coupon_code")

        logger.info(f"Validating coupon {code} for subtotal {subtotal}")
        try:
            response = self.client.coupons.validate(code, to_float(subtotal))
        except ApiError as e:
            logger.warning(f"Coupon {code} rejected: {e.message}")
            raise InvalidCouponError(e.message or DEFAULT_COUPON_ERROR) from e

        if not response.get("valid"):
            raise InvalidCouponError(response.get("message") or DEFAULT_COUPON_ERROR)

        coupon = dict(response.get("coupon") or {})
        coupon.setdefault("code", code)
        discount = clamp_discount(
            coupon.get("discount", 0), subtotal, coupon.get("maxDiscount")
        )
        return CouponResult(valid=True, discount=discount, coupon=coupon)


@dataclass
class CouponState:
    """Coupon part of the checkout form."""

    applied_coupon: dict | None = None
    discount: Decimal = ZERO
    error: str = ""

    @property
    def code(self) -> str | None:
        return self.applied_coupon.get("code") if self.applied_coupon else None

    def apply(self, service: CouponService, code: str, subtotal) -> CouponResult:
        try:
            result = service.apply_coupon(code, subtotal)
        except (ValidationError, InvalidCouponError) as e:
            self.applied_coupon = None
            self.discount = ZERO
            self.error = e.message
            raise

        self.applied_coupon = result.coupon
        self.discount = result.discount
        self.error = ""
        return result

    def remove(self) -> None:
        self.applied_coupon = None
        self.discount = ZERO
        self.error = ""

    def breakdown(self, subtotal) -> PriceBreakdown:
        return price_breakdown(subtotal, self.discount)
