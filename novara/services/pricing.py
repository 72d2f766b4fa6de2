# novara/services/pricing.py
from dataclasses import dataclass
from decimal import Decimal

from novara.utils.money import D, ZERO, round_money

FREE_DELIVERY_THRESHOLD = Decimal("5000")
REDUCED_DELIVERY_THRESHOLD = Decimal("2000")
REDUCED_DELIVERY_CHARGE = Decimal("300")
STANDARD_DELIVERY_CHARGE = Decimal("500")


def delivery_charge(subtotal) -> Decimal:
    """Shipping fee tier for a cart subtotal."""
    subtotal = D(subtotal)
    if subtotal >= FREE_DELIVERY_THRESHOLD:
        return ZERO
    if subtotal >= REDUCED_DELIVERY_THRESHOLD:
        return REDUCED_DELIVERY_CHARGE
    return STANDARD_DELIVERY_CHARGE


def subtotal_after_discount(subtotal, discount) -> Decimal:
    return max(ZERO, D(subtotal) - D(discount))


def final_total(subtotal, discount=ZERO) -> Decimal:
    # delivery is charged on the undiscounted subtotal and never discounted
    return subtotal_after_discount(subtotal, discount) + delivery_charge(subtotal)


def cart_total(lines) -> Decimal:
    return sum((D(line.price) * int(line.quantity) for line in lines), ZERO)


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount: Decimal
    delivery_charge: Decimal
    total: Decimal

    @property
    def free_delivery(self) -> bool:
        return self.delivery_charge == ZERO

    @property
    def payable(self) -> Decimal:
        """Amount requested from the gateway, rounded to paise."""
        return round_money(self.total)


def price_breakdown(subtotal, discount=ZERO) -> PriceBreakdown:
    subtotal = D(subtotal)
    discount = D(discount)
    return PriceBreakdown(
        subtotal=subtotal,
        discount=discount,
        delivery_charge=delivery_charge(subtotal),
        total=final_total(subtotal, discount),
    )
