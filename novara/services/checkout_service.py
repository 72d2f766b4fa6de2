# novara/services/checkout_service.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from sqlalchemy.orm import Session

from novara.data.models.checkout import CheckoutModel
from novara.domain.errors import (
    ApiError,
    CheckoutNotFoundError,
    InvalidTransitionError,
    PaymentError,
    ValidationError,
)
from novara.repos.checkout_repo import CheckoutRepo
from novara.services.address_service import build_shipping_address
from novara.services.api_client import ApiClient
from novara.services.cart_service import CartService, CartView
from novara.services.coupon_service import CouponService, CouponState
from novara.services.payment_widget import (
    PaymentCallbacks,
    PaymentWidget,
    build_widget_options,
)
from novara.services.pricing import PriceBreakdown
from novara.utils.money import to_float
from novara.utils.settings import (
    CURRENCY,
    DEFAULT_COUNTRY,
    FAILURE_REDIRECT_MS,
    LENIENT_VERIFICATION,
    ORDERS_PATH,
    SUCCESS_REDIRECT_MS,
)
from novara.utils.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_FAILED = "Failed to initiate checkout."
VERIFICATION_FAILED = "Payment verification failed. Please contact support."
PAYMENT_CONFIRMED = "Your order has been confirmed successfully."
PAYMENT_CANCELLED = "Payment cancelled. Your order has been saved as pending."
FAILURE_NOT_RECORDED = "Payment failed. Please try again or contact support."


class CheckoutState(str, Enum):
    FORM_ENTRY = "FORM_ENTRY"
    ORDER_CREATED = "ORDER_CREATED"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    VERIFYING_PAYMENT = "VERIFYING_PAYMENT"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


_TRANSITIONS = {
    CheckoutState.FORM_ENTRY: {CheckoutState.ORDER_CREATED},
    CheckoutState.ORDER_CREATED: {CheckoutState.AWAITING_PAYMENT},
    CheckoutState.AWAITING_PAYMENT: {
        CheckoutState.VERIFYING_PAYMENT,
        CheckoutState.FAILED,
        CheckoutState.CANCELLED,
    },
    CheckoutState.VERIFYING_PAYMENT: {CheckoutState.SUCCESS, CheckoutState.FAILED},
    CheckoutState.SUCCESS: set(),
    CheckoutState.FAILED: set(),
    CheckoutState.CANCELLED: set(),
}


@dataclass
class CheckoutForm:
    customer_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    country: str = DEFAULT_COUNTRY
    coupon_code: str | None = None


def failure_message(error: Dict[str, Any] | None) -> str:
    description = (error or {}).get("description") or "Unknown error"
    return f"Payment failed: {description}. Your order has been saved as pending."


class CheckoutService:
    """
    Checkout as a persisted state machine:
    FORM_ENTRY -> ORDER_CREATED -> AWAITING_PAYMENT -> VERIFYING_PAYMENT
    -> SUCCESS | FAILED | CANCELLED.

    The backend order is created before any payment is attempted and every
    payment outcome is reconciled against it. A failed or cancelled payment
    leaves the order pending on the backend.
    """

    def __init__(
        self,
        db: Session,
        client: ApiClient,
        cart: CartService,
        widget: PaymentWidget,
        lenient_verification: bool = LENIENT_VERIFICATION,
    ):
        self.repo = CheckoutRepo(db)
        self.client = client
        self.cart = cart
        self.coupons = CouponService(client)
        self.widget = widget
        self.lenient_verification = lenient_verification

    # query
    def get(self, checkout_id: int) -> CheckoutModel:
        checkout = self.repo.get(checkout_id)
        if not checkout:
            raise CheckoutNotFoundError(checkout_id)
        if checkout.owner_key != self.cart.owner.key:
            raise PermissionError("No access to this checkout")
        return checkout

    def quote(self, coupon_code: str | None = None) -> tuple[PriceBreakdown, CouponState]:
        """Totals for the current cart, with the coupon applied when given."""
        subtotal = self.cart.get_cart().total
        state = CouponState()
        if coupon_code is not None:
            state.apply(self.coupons, coupon_code, subtotal)
        return state.breakdown(subtotal), state

    # commands
    def start(self, form: CheckoutForm) -> tuple[CheckoutModel, Dict[str, Any]]:
        """
        FORM_ENTRY -> ORDER_CREATED -> AWAITING_PAYMENT, then open the widget.
        """
        if not self.cart.owner.authenticated:
            raise PermissionError("Please sign in to checkout")

        if not form.phone or not form.phone.strip():
            raise ValidationError("Please enter a valid phone number", field="phone")

        cart = self.cart.get_cart()
        if cart.is_empty:
            raise ValidationError("Your cart is empty", field="items")

        coupon = CouponState()
        if form.coupon_code:
            coupon.apply(self.coupons, form.coupon_code, cart.total)
        breakdown = coupon.breakdown(cart.total)

        checkout = self.repo.create(
            CheckoutModel(
                owner_key=self.cart.owner.key,
                state=CheckoutState.FORM_ENTRY.value,
                customer_name=form.customer_name,
                email=form.email,
                phone=form.phone,
                subtotal=breakdown.subtotal,
                coupon_code=coupon.code,
                discount=breakdown.discount,
                delivery_charge=breakdown.delivery_charge,
                amount=breakdown.payable,
            )
        )

        order_data = self._order_payload(form, cart, coupon, breakdown)
        try:
            response = self.client.orders.create(order_data)
        except ApiError as e:
            self._note(checkout, e.message or CHECKOUT_FAILED)
            logger.error(f"Checkout {checkout.id}: order creation failed: {e.message}")
            raise

        order = response.get("order") or {}
        order_id = str(order.get("_id") or order.get("id") or "")
        if not order_id:
            self._note(checkout, CHECKOUT_FAILED)
            raise ApiError(CHECKOUT_FAILED, payload=response)

        checkout.order_id = order_id
        self._move(checkout, CheckoutState.ORDER_CREATED)
        logger.info(f"Checkout {checkout.id}: order {order_id} created for {breakdown.payable}")

        try:
            gateway = self.client.payment.create_order(to_float(breakdown.payable), order_id, CURRENCY)
        except ApiError as e:
            # order stays pending on the backend
            self._note(checkout, e.message or CHECKOUT_FAILED)
            logger.error(f"Checkout {checkout.id}: gateway order failed: {e.message}")
            raise

        checkout.gateway_order_id = (gateway.get("order") or {}).get("id")
        if not checkout.gateway_order_id or not gateway.get("key_id"):
            self._note(checkout, CHECKOUT_FAILED)
            logger.error(f"Checkout {checkout.id}: gateway returned no order for {order_id}")
            raise PaymentError(CHECKOUT_FAILED, code="GATEWAY_ORDER_MISSING")
        self._move(checkout, CheckoutState.AWAITING_PAYMENT)

        options = build_widget_options(
            gateway,
            order_id=order_id,
            customer_name=form.customer_name,
            email=form.email,
            phone=form.phone,
            callback_base=f"/checkout/{checkout.id}",
        )
        checkout_id = checkout.id
        options = self.widget.open(
            options,
            PaymentCallbacks(
                on_success=lambda payment: self.payment_succeeded(checkout_id, payment),
                on_failure=lambda error: self.payment_failed(checkout_id, error),
                on_dismiss=lambda: self.payment_dismissed(checkout_id),
            ),
        )
        return self.repo.get(checkout_id), options

    def payment_succeeded(self, checkout_id: int, payment: Dict[str, Any]) -> CheckoutModel:
        """AWAITING_PAYMENT -> VERIFYING_PAYMENT -> SUCCESS | FAILED. Reported once."""
        checkout = self.get(checkout_id)
        self._move(checkout, CheckoutState.VERIFYING_PAYMENT)

        payment_id = payment.get("razorpay_payment_id")
        verification = {
            "razorpay_order_id": payment.get("razorpay_order_id"),
            "razorpay_payment_id": payment_id,
            "razorpay_signature": payment.get("razorpay_signature"),
            "orderId": checkout.order_id,
        }

        try:
            result = self.client.payment.verify(verification)
        except ApiError as e:
            if e.status_code == 400 and self._lenient_applies(checkout, payment):
                # backend is assumed to have recorded the payment; risks a double booking
                logger.warning(
                    f"Checkout {checkout.id}: verification returned 400 for payment "
                    f"{payment_id}, accepting it as paid"
                )
                return self._succeed(checkout, payment_id)
            logger.error(f"Checkout {checkout.id}: verification error: {e.message}")
            return self._fail(checkout, VERIFICATION_FAILED, redirect=False)
        except Exception as e:
            # the checkout is already VERIFYING_PAYMENT and must not stay there
            logger.error(f"Checkout {checkout.id}: unexpected verification error: {e}")
            return self._fail(checkout, VERIFICATION_FAILED, redirect=False)

        if not (isinstance(result, dict) and result.get("success")):
            logger.error(f"Checkout {checkout.id}: signature rejected for {payment_id}")
            return self._fail(checkout, VERIFICATION_FAILED, redirect=False)

        return self._succeed(checkout, payment_id)

    def payment_failed(self, checkout_id: int, error: Dict[str, Any] | None) -> CheckoutModel:
        """AWAITING_PAYMENT -> FAILED. The gateway error is reported to the backend."""
        checkout = self.get(checkout_id)
        self._ensure(checkout, CheckoutState.FAILED)
        logger.error(f"Checkout {checkout.id}: payment failed: {error}")

        try:
            self.client.payment.report_failure(checkout.order_id, error or {})
        except ApiError as e:
            logger.error(f"Checkout {checkout.id}: could not record failure: {e.message}")
            return self._fail(checkout, FAILURE_NOT_RECORDED, redirect=False)

        return self._fail(checkout, failure_message(error), redirect=True)

    def payment_dismissed(self, checkout_id: int) -> CheckoutModel:
        """AWAITING_PAYMENT -> CANCELLED. Reported so the order stays visibly pending."""
        checkout = self.get(checkout_id)
        self._ensure(checkout, CheckoutState.CANCELLED)

        try:
            self.client.payment.report_failure(
                checkout.order_id,
                {"code": "PAYMENT_CANCELLED", "description": "User closed payment modal"},
            )
        except ApiError as e:
            logger.error(f"Checkout {checkout.id}: failed to update order status: {e.message}")

        checkout.message = PAYMENT_CANCELLED
        checkout.redirect_to = ORDERS_PATH
        checkout.redirect_after_ms = FAILURE_REDIRECT_MS
        return self._move(checkout, CheckoutState.CANCELLED)

    # helpers
    def _order_payload(
        self,
        form: CheckoutForm,
        cart: CartView,
        coupon: CouponState,
        breakdown: PriceBreakdown,
    ) -> Dict[str, Any]:
        return {
            "customerName": form.customer_name,
            "email": form.email,
            "phone": form.phone,
            "shippingAddress": build_shipping_address(
                form.address, form.city, form.state, form.country, form.zip_code
            ),
            "paymentMethod": "razorpay",
            "couponCode": coupon.code,
            "discount": to_float(breakdown.discount),
            "deliveryCharge": to_float(breakdown.delivery_charge),
            "items": [
                {"product": line.product_id, "quantity": line.quantity}
                for line in cart.lines
            ],
        }

    def _succeed(self, checkout: CheckoutModel, payment_id: str | None) -> CheckoutModel:
        try:
            self.cart.clear()
        except ApiError as e:
            # payment is settled; a stale cart is not worth failing it
            logger.error(f"Checkout {checkout.id}: failed to clear cart: {e.message}")

        checkout.payment_id = payment_id
        checkout.message = PAYMENT_CONFIRMED
        checkout.redirect_to = ORDERS_PATH
        checkout.redirect_after_ms = SUCCESS_REDIRECT_MS
        logger.info(f"Checkout {checkout.id}: order {checkout.order_id} paid ({payment_id})")
        return self._move(checkout, CheckoutState.SUCCESS)

    def _lenient_applies(self, checkout: CheckoutModel, payment: Dict[str, Any]) -> bool:
        if not (self.lenient_verification and payment.get("razorpay_payment_id")):
            return False
        if payment.get("razorpay_order_id") != checkout.gateway_order_id:
            logger.warning(
                f"Checkout {checkout.id}: gateway order {payment.get('razorpay_order_id')} "
                f"does not match {checkout.gateway_order_id}, not accepting 400 as paid"
            )
            return False
        return True

    def _fail(self, checkout: CheckoutModel, message: str, redirect: bool) -> CheckoutModel:
        checkout.message = message
        if redirect:
            checkout.redirect_to = ORDERS_PATH
            checkout.redirect_after_ms = FAILURE_REDIRECT_MS
        return self._move(checkout, CheckoutState.FAILED)

    def _note(self, checkout: CheckoutModel, message: str) -> None:
        checkout.message = message
        self.repo.save(checkout)

    def _ensure(self, checkout: CheckoutModel, target: CheckoutState) -> None:
        current = CheckoutState(checkout.state)
        if target not in _TRANSITIONS[current]:
            raise InvalidTransitionError(current.value, target.value)

    def _move(self, checkout: CheckoutModel, target: CheckoutState) -> CheckoutModel:
        self._ensure(checkout, target)
        logger.info(f"Checkout {checkout.id}: {checkout.state} -> {target.value}")
        checkout.state = target.value
        return self.repo.save(checkout)
