# novara/services/payment_widget.py
from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol

from novara.utils.settings import CURRENCY, STORE_NAME, THEME_COLOR
from novara.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENT_METHODS = (
    ("upi", "Pay using UPI"),
    ("card", "Credit/Debit Cards"),
    ("netbanking", "Net Banking"),
    ("wallet", "Wallets"),
)


@dataclass(frozen=True)
class PaymentCallbacks:
    """The three outcomes the widget can report. Each must return promptly."""

    on_success: Callable[[Dict[str, Any]], Any]
    on_failure: Callable[[Dict[str, Any]], Any]
    on_dismiss: Callable[[], Any]


class PaymentWidget(Protocol):
    def open(self, options: Dict[str, Any], callbacks: PaymentCallbacks) -> Dict[str, Any]:
        ...


class RazorpayCheckoutWidget:
    """
    Razorpay Checkout runs in the browser.
    open() returns the options the page hands to `new Razorpay(options)`;
    the page then posts the handler / payment.failed / ondismiss outcome
    back to the callback urls, which end up in the same CheckoutService
    methods the callbacks point at.
    """

    def open(self, options: Dict[str, Any], callbacks: PaymentCallbacks) -> Dict[str, Any]:
        logger.info(f"Handing payment options for {options.get('order_id')} to the browser")
        return options


def order_reference(order_id: str) -> str:
    return f"Order #{str(order_id)[-8:].upper()}"


def build_widget_options(
    gateway: Dict[str, Any],
    order_id: str,
    customer_name: str,
    email: str,
    phone: str,
    callback_base: str,
) -> Dict[str, Any]:
    gateway_order = gateway.get("order") or {}
    blocks = {
        method: {"name": label, "instruments": [{"method": method}]}
        for method, label in PAYMENT_METHODS
    }
    return {
        "key": gateway.get("key_id"),
        "amount": gateway_order.get("amount"),
        "currency": gateway_order.get("currency") or CURRENCY,
        "name": STORE_NAME,
        "description": order_reference(order_id),
        "order_id": gateway_order.get("id"),
        "prefill": {"name": customer_name, "email": email, "contact": phone},
        "config": {
            "display": {
                "blocks": blocks,
                "sequence": [f"block.{method}" for method, _ in PAYMENT_METHODS],
                "preferences": {"show_default_blocks": True},
            }
        },
        "theme": {"color": THEME_COLOR},
        "callback_urls": {
            "success": f"{callback_base}/payment/success",
            "failure": f"{callback_base}/payment/failure",
            "dismiss": f"{callback_base}/payment/dismiss",
        },
    }
