"""Tests for revenue analytics windows and chart buckets."""

from datetime import datetime
from decimal import Decimal

from novara.services.revenue_service import (
    growth_rate,
    parse_created_at,
    period_windows,
    revenue_report,
)

# Wednesday
NOW = datetime(2025, 1, 15, 12, 0)

ORDERS = [
    {"orderStatus": "confirmed", "totalAmount": 1000, "createdAt": "2025-01-14T10:00:00.000Z"},
    {"orderStatus": "delivered", "totalAmount": 500, "createdAt": "2025-01-08T09:30:00.000Z"},
    {"orderStatus": "shipped", "totalAmount": 750, "createdAt": "2024-12-20T18:00:00.000Z"},
    {"orderStatus": "pending", "totalAmount": 9999, "createdAt": "2025-01-14T11:00:00.000Z"},
    {"orderStatus": "cancelled", "totalAmount": 8888, "createdAt": "2025-01-13T11:00:00.000Z"},
]


def test_parse_created_at():
    assert parse_created_at("2025-01-14T10:00:00.000Z") == datetime(2025, 1, 14, 10, 0)
    assert parse_created_at("2025-01-14T15:30:00+05:30") == datetime(2025, 1, 14, 10, 0)
    assert parse_created_at("not a date") is None
    assert parse_created_at(None) is None


def test_week_starts_on_monday():
    (start, end), (prev_start, prev_end) = period_windows("weekly", NOW)
    assert start == datetime(2025, 1, 13)
    assert end == datetime(2025, 1, 20)
    assert prev_start == datetime(2025, 1, 6)
    assert prev_end == start


def test_month_window_crosses_year():
    (start, end), (prev_start, _) = period_windows("monthly", NOW)
    assert start == datetime(2025, 1, 1)
    assert end == datetime(2025, 2, 1)
    assert prev_start == datetime(2024, 12, 1)


def test_growth_rate_without_previous_period():
    assert growth_rate(Decimal("100"), Decimal("0")) == Decimal("0")


def test_weekly_report():
    report = revenue_report(ORDERS, "weekly", now=NOW)

    assert report.current_revenue == Decimal("1000")
    assert report.previous_revenue == Decimal("500")
    assert report.growth_rate == Decimal("100")
    assert report.total_orders == 1
    assert report.avg_order_value == Decimal("1000")
    assert report.chart == [{"period": "Tue", "revenue": Decimal("1000"), "orders": 1}]


def test_monthly_report():
    report = revenue_report(ORDERS, "monthly", now=NOW)

    assert report.current_revenue == Decimal("1500")
    assert report.previous_revenue == Decimal("750")
    assert report.growth_rate == Decimal("100")
    assert report.avg_order_value == Decimal("750")
    assert [point["period"] for point in report.chart] == ["Jan 08", "Jan 14"]


def test_yearly_report():
    report = revenue_report(ORDERS, "yearly", now=NOW)

    assert report.current_revenue == Decimal("1500")
    assert report.previous_revenue == Decimal("750")
    assert [point["period"] for point in report.chart] == ["Jan"]


def test_unknown_period_is_all_time():
    report = revenue_report(ORDERS, "lifetime", now=NOW)

    assert report.period == "all"
    assert report.current_revenue == Decimal("2250")
    assert report.previous_revenue == Decimal("0")
    assert report.growth_rate == Decimal("0")
    assert report.total_orders == 3
    assert [point["period"] for point in report.chart] == ["Dec 2024", "Jan 2025"]


def test_no_orders():
    report = revenue_report([], "monthly", now=NOW)
    assert report.total_orders == 0
    assert report.avg_order_value == Decimal("0")
    assert report.chart == []
