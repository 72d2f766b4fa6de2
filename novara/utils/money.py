# novara/utils/money.py
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0.00")


def D(x) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))


def round_money(x) -> Decimal:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_float(x) -> float:
    """JSON-friendly amount, as the backend expects plain numbers."""
    return float(round_money(x))


def _group_indian(digits: str) -> str:
    # last three digits, then pairs: 1,00,00,000
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_inr(amount) -> str:
    value = round_money(amount)
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    return f"{sign}₹{_group_indian(whole)}.{frac}"


def format_compact(amount, symbol: str = "₹") -> str:
    value = D(amount)
    for threshold, suffix in (
        (Decimal(1_000_000_000), "B"),
        (Decimal(1_000_000), "M"),
        (Decimal(1_000), "K"),
    ):
        if value >= threshold:
            return f"{symbol}{round_money(value / threshold):.2f}{suffix}"
    return f"{symbol}{round_money(value):.2f}"
