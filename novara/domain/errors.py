"""Exceptions raised by the storefront services."""


class NovaraError(Exception):
    """Base exception for all storefront errors."""

    pass


class ValidationError(NovaraError):
    """Raised when form input is rejected before reaching the backend."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ApiError(NovaraError):
    """Raised when a backend call fails.

    status_code is None for transport failures (connection refused, DNS,
    timeouts when one is configured).
    """

    def __init__(self, message: str, status_code: int | None = None, payload=None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class InvalidCouponError(NovaraError):
    """Raised when the backend rejects a coupon code."""

    code = "INVALID_COUPON"

    def __init__(self, message: str = "Invalid coupon code"):
        self.message = message
        super().__init__(message)


class PaymentError(NovaraError):
    """Raised for gateway failures, cancellations and verification mismatches."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidTransitionError(NovaraError):
    """Raised when a checkout or order cannot move to the requested state."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from '{current}' to '{target}'")


class CheckoutNotFoundError(NovaraError):
    """Raised when a checkout id does not exist."""

    def __init__(self, checkout_id: int):
        self.checkout_id = checkout_id
        super().__init__(f"Checkout not found: {checkout_id}")
