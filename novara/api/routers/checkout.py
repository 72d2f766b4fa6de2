# novara/api/routers/checkout.py
from fastapi import APIRouter, Depends

from novara.api.deps import get_checkout_service, http_errors
from novara.domain.errors import InvalidCouponError
from novara.domain.schemas import (
    CheckoutFormIn,
    CheckoutOut,
    CouponIn,
    PaymentFailureIn,
    PaymentSuccessIn,
    QuoteIn,
    QuoteOut,
)
from novara.services.checkout_service import CheckoutForm, CheckoutService
from novara.services.coupon_service import CouponState
from novara.services.pricing import PriceBreakdown
from novara.utils.settings import DEFAULT_COUNTRY

router = APIRouter(prefix="/checkout", tags=["checkout"])


def _quote(breakdown: PriceBreakdown, coupon: CouponState) -> QuoteOut:
    return QuoteOut(
        subtotal=breakdown.subtotal,
        discount=breakdown.discount,
        delivery_charge=breakdown.delivery_charge,
        total=breakdown.payable,
        free_delivery=breakdown.free_delivery,
        coupon_code=coupon.code,
        coupon_error=coupon.error,
    )


def _out(checkout, widget_options=None) -> CheckoutOut:
    out = CheckoutOut.model_validate(checkout)
    out.widget_options = widget_options
    return out


@router.post("/quote", response_model=QuoteOut)
def quote(payload: QuoteIn, svc: CheckoutService = Depends(get_checkout_service)):
    """
    Totals for the current cart. A rejected coupon does not fail the quote,
    it comes back as coupon_error with the coupon left out.
    """
    with http_errors():
        try:
            return _quote(*svc.quote(payload.coupon_code))
        except InvalidCouponError as e:
            breakdown, coupon = svc.quote(None)
            coupon.error = e.message
            return _quote(breakdown, coupon)


@router.post("/coupon", response_model=QuoteOut)
def apply_coupon(payload: CouponIn, svc: CheckoutService = Depends(get_checkout_service)):
    with http_errors():
        return _quote(*svc.quote(payload.coupon_code))


@router.post("", response_model=CheckoutOut, status_code=201)
def start_checkout(payload: CheckoutFormIn, svc: CheckoutService = Depends(get_checkout_service)):
    """
    Creates the backend order and the gateway order.
    widget_options are handed to Razorpay Checkout in the browser.
    """
    form = CheckoutForm(**payload.model_dump(exclude={"country"}), country=payload.country or DEFAULT_COUNTRY)
    with http_errors():
        checkout, options = svc.start(form)
        return _out(checkout, options)


@router.get("/{checkout_id}", response_model=CheckoutOut)
def get_checkout(checkout_id: int, svc: CheckoutService = Depends(get_checkout_service)):
    with http_errors():
        return _out(svc.get(checkout_id))


@router.post("/{checkout_id}/payment/success", response_model=CheckoutOut)
def payment_success(
    checkout_id: int,
    payload: PaymentSuccessIn,
    svc: CheckoutService = Depends(get_checkout_service),
):
    with http_errors():
        return _out(svc.payment_succeeded(checkout_id, payload.model_dump()))


@router.post("/{checkout_id}/payment/failure", response_model=CheckoutOut)
def payment_failure(
    checkout_id: int,
    payload: PaymentFailureIn,
    svc: CheckoutService = Depends(get_checkout_service),
):
    with http_errors():
        return _out(svc.payment_failed(checkout_id, payload.model_dump(exclude_none=True)))


@router.post("/{checkout_id}/payment/dismiss", response_model=CheckoutOut)
def payment_dismiss(checkout_id: int, svc: CheckoutService = Depends(get_checkout_service)):
    with http_errors():
        return _out(svc.payment_dismissed(checkout_id))
