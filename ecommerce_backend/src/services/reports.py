"""
Sales reporting for the admin dashboard.

`build_report` aggregates orders already loaded from the database over an inclusive date
range. Cancelled orders never count. Dates are bucketed by UTC calendar day (ISO format).
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.core.errors import ValidationError
from src.db.models import Order, Product, Profile

UNCATEGORIZED = "Uncategorized"
RECENT_ORDERS_LIMIT = 5


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def report_window(start: date, end: date) -> tuple:
    """`[start 00:00, end 23:59:59.999]` in UTC."""
    if end < start:
        raise ValidationError("The report end date is before its start date.")
    return (
        datetime.combine(start, time.min, tzinfo=timezone.utc),
        datetime.combine(end, time(23, 59, 59, 999000), tzinfo=timezone.utc),
    )


def _in_window(value: Optional[datetime], window: tuple) -> bool:
    if value is None:
        return False
    return window[0] <= _as_aware(value) <= window[1]


def _day(value: datetime) -> str:
    return _as_aware(value).astimezone(timezone.utc).date().isoformat()


# PUBLIC_INTERFACE
def build_report(orders: Iterable, profiles: Iterable, start: date, end: date) -> dict:
    """
    Aggregate sales between `start` and `end` (both inclusive).

    Customers are keyed by email, falling back to phone and then "Unknown". Products are
    keyed by product id (the name at purchase time is reported). Money values are cents.
    """
    window = report_window(start, end)
    filtered = [o for o in orders if o.status != "Cancelled" and _in_window(o.created_at, window)]
    new_customers = [p for p in profiles if _in_window(p.created_at, window)]

    sales_by_date: Dict[str, int] = {}
    sales_by_product: Dict[object, dict] = {}
    sales_by_category: Dict[str, int] = {}
    coupons_by_date: Dict[str, int] = {}
    customers: Dict[str, dict] = {}

    for order in filtered:
        day = _day(order.created_at)
        sales_by_date[day] = sales_by_date.get(day, 0) + order.total_cents

        for item in order.items:
            revenue = item.unit_price_cents * item.quantity
            key = item.product_id if item.product_id is not None else item.product_name
            entry = sales_by_product.setdefault(key, {"product_id": item.product_id, "name": item.product_name, "quantity": 0, "revenue_cents": 0})
            entry["quantity"] += item.quantity
            entry["revenue_cents"] += revenue
            category = item.category or UNCATEGORIZED
            sales_by_category[category] = sales_by_category.get(category, 0) + revenue

        if order.coupon_code:
            coupons_by_date[day] = coupons_by_date.get(day, 0) + 1

        customer_key = order.customer_email or order.customer_phone or "Unknown"
        stats = customers.setdefault(
            customer_key,
            {
                "name": order.customer_name,
                "contact": order.customer_email or order.customer_phone or "N/A",
                "orders": 0,
                "spent_cents": 0,
            },
        )
        stats["orders"] += 1
        stats["spent_cents"] += order.total_cents

    delivered = [o for o in filtered if o.status == "Delivered"]
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "sales_by_date": dict(sorted(sales_by_date.items())),
        "sales_by_product": sorted(sales_by_product.values(), key=lambda e: e["revenue_cents"], reverse=True),
        "sales_by_category": sales_by_category,
        "coupons_by_date": dict(sorted(coupons_by_date.items())),
        "customer_report": sorted(customers.values(), key=lambda c: c["spent_cents"], reverse=True),
        "new_customers_count": len(new_customers),
        "orders": sorted(filtered, key=lambda o: _as_aware(o.created_at), reverse=True),
        "delivered_revenue_cents": sum(o.total_cents for o in delivered),
        "delivered_orders_count": len(delivered),
    }


def load_report(session: Session, start: date, end: date) -> dict:
    window = report_window(start, end)
    orders = list(
        session.scalars(select(Order).where(Order.created_at >= window[0], Order.created_at <= window[1]))
    )
    profiles = list(
        session.scalars(select(Profile).where(Profile.created_at >= window[0], Profile.created_at <= window[1]))
    )
    return build_report(orders, profiles, start, end)


# PUBLIC_INTERFACE
def dashboard_summary(session: Session) -> dict:
    """Headline numbers for the admin landing page."""
    status_counts: Dict[str, int] = dict(
        session.execute(select(Order.status, func.count(Order.id)).group_by(Order.status)).all()
    )
    revenue = session.scalar(
        select(func.coalesce(func.sum(Order.total_cents), 0)).where(Order.status != "Cancelled")
    )
    recent: List[Order] = list(
        session.scalars(select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(RECENT_ORDERS_LIMIT))
    )
    return {
        "products": session.scalar(select(func.count(Product.id))) or 0,
        "customers": session.scalar(select(func.count(Profile.id)).where(Profile.role == "customer")) or 0,
        "orders": sum(status_counts.values()),
        "orders_by_status": status_counts,
        "pending_orders": status_counts.get("Pending", 0),
        "revenue_cents": int(revenue or 0),
        "recent_orders": recent,
    }
