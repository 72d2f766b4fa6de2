# novara/services/revenue_service.py
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from novara.domain.order_status import counts_as_revenue, order_status_of
from novara.utils.money import D, ZERO, round_money
from novara.utils.logging import get_logger

logger = get_logger(__name__)

PERIODS = ("weekly", "monthly", "yearly", "all")

# strftime patterns for the chart buckets of each period
_BUCKET_FORMATS = {
    "weekly": "%a",
    "monthly": "%b %d",
    "yearly": "%b",
}
_ALL_TIME_FORMAT = "%b %Y"


@dataclass
class RevenueReport:
    period: str
    current_revenue: Decimal = ZERO
    previous_revenue: Decimal = ZERO
    growth_rate: Decimal = ZERO
    total_orders: int = 0
    avg_order_value: Decimal = ZERO
    chart: List[Dict[str, Any]] = field(default_factory=list)


def parse_created_at(value) -> datetime | None:
    """Backend timestamps are ISO 8601, usually with a trailing Z. Returned naive UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif not value:
        return None
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable order date: {value}")
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _shift_month(moment: datetime, months: int) -> datetime:
    index = moment.year * 12 + (moment.month - 1) + months
    return moment.replace(year=index // 12, month=index % 12 + 1, day=1)


def period_windows(period: str, now: datetime) -> Tuple[Tuple[datetime, datetime], Tuple[datetime, datetime]] | None:
    """
    (current, previous) half-open [start, end) windows for a period.
    Weeks start on Monday. None means all-time with no previous period.
    """
    if period == "weekly":
        start = _start_of_day(now) - timedelta(days=now.weekday())
        end = start + timedelta(days=7)
        return (start, end), (start - timedelta(days=7), start)
    if period == "monthly":
        start = _start_of_day(now).replace(day=1)
        return (start, _shift_month(start, 1)), (_shift_month(start, -1), start)
    if period == "yearly":
        start = _start_of_day(now).replace(month=1, day=1)
        return (start, start.replace(year=start.year + 1)), (start.replace(year=start.year - 1), start)
    return None


def revenue_orders(orders: List[dict]) -> List[Tuple[datetime, Decimal]]:
    """(createdAt, totalAmount) for confirmed, processing, shipped and delivered orders."""
    eligible = []
    for order in orders:
        if not counts_as_revenue(order_status_of(order)):
            continue
        created_at = parse_created_at(order.get("createdAt"))
        if created_at is None:
            continue
        eligible.append((created_at, D(order.get("totalAmount"))))
    return eligible


def growth_rate(current: Decimal, previous: Decimal) -> Decimal:
    if previous <= 0:
        return ZERO
    return round_money((current - previous) / previous * 100)


def chart_buckets(eligible: List[Tuple[datetime, Decimal]], period: str, now: datetime) -> List[Dict[str, Any]]:
    windows = period_windows(period, now)
    pattern = _BUCKET_FORMATS.get(period, _ALL_TIME_FORMAT)

    buckets: Dict[str, Dict[str, Any]] = {}
    for created_at, amount in sorted(eligible, key=lambda pair: pair[0]):
        if windows is not None and created_at < windows[0][0]:
            continue
        key = created_at.strftime(pattern)
        bucket = buckets.setdefault(key, {"period": key, "revenue": ZERO, "orders": 0})
        bucket["revenue"] += amount
        bucket["orders"] += 1
    return list(buckets.values())


def revenue_report(orders: List[dict], period: str = "monthly", now: datetime | None = None) -> RevenueReport:
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    period = period if period in PERIODS else "all"
    eligible = revenue_orders(orders)
    windows = period_windows(period, now)

    if windows is None:
        current = [amount for _, amount in eligible]
        previous: List[Decimal] = []
    else:
        (cur_start, cur_end), (prev_start, prev_end) = windows
        current = [amount for at, amount in eligible if cur_start <= at < cur_end]
        previous = [amount for at, amount in eligible if prev_start <= at < prev_end]

    current_revenue = sum(current, ZERO)
    previous_revenue = sum(previous, ZERO)
    return RevenueReport(
        period=period,
        current_revenue=current_revenue,
        previous_revenue=previous_revenue,
        growth_rate=growth_rate(current_revenue, previous_revenue),
        total_orders=len(current),
        avg_order_value=round_money(current_revenue / len(current)) if current else ZERO,
        chart=chart_buckets(eligible, period, now),
    )
