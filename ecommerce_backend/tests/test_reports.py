from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from src.core.errors import ValidationError
from src.db.models import Order, OrderItem
from src.services import reports


def at(day, hour=12):
    return datetime(2024, 3, day, hour, tzinfo=timezone.utc)


def item(product_id, name, quantity, unit, category="Fruits"):
    return SimpleNamespace(product_id=product_id, product_name=name, quantity=quantity, unit_price_cents=unit, category=category)


def order(day, total, items, status="Delivered", email=None, phone="017", name="Rahim", coupon=None, hour=12):
    return SimpleNamespace(
        created_at=at(day, hour),
        status=status,
        total_cents=total,
        items=items,
        customer_email=email,
        customer_phone=phone,
        customer_name=name,
        coupon_code=coupon,
    )


@pytest.fixture
def orders():
    return [
        order(1, 56000, [item(1, "Apple", 2, 25000)], email="rahim@example.com", coupon="SAVE10"),
        order(1, 24000, [item(2, "Orange", 1, 18000, "Citrus")], status="Pending", phone="018", name="Karim"),
        order(2, 40000, [item(1, "Apple", 1, 25000), item(None, "Gift Card", 1, 9000, None)], email="rahim@example.com"),
        order(2, 99999, [item(1, "Apple", 4, 25000)], status="Cancelled"),
        order(20, 10000, [item(2, "Orange", 1, 10000)]),
    ]


class TestBuildReport:
    def test_sales_by_date_skips_cancelled_and_out_of_range(self, orders):
        report = reports.build_report(orders, [], date(2024, 3, 1), date(2024, 3, 10))
        assert report["sales_by_date"] == {"2024-03-01": 80000, "2024-03-02": 40000}
        assert len(report["orders"]) == 3
        assert report["orders"][0].created_at == at(2)

    def test_sales_by_product_and_category(self, orders):
        report = reports.build_report(orders, [], date(2024, 3, 1), date(2024, 3, 10))
        assert [(p["name"], p["quantity"], p["revenue_cents"]) for p in report["sales_by_product"]] == [
            ("Apple", 3, 75000),
            ("Orange", 1, 18000),
            ("Gift Card", 1, 9000),
        ]
        assert report["sales_by_category"] == {"Fruits": 75000, "Citrus": 18000, "Uncategorized": 9000}

    def test_customers_and_coupons(self, orders):
        report = reports.build_report(orders, [], date(2024, 3, 1), date(2024, 3, 10))
        assert report["customer_report"] == [
            {"name": "Rahim", "contact": "rahim@example.com", "orders": 2, "spent_cents": 96000},
            {"name": "Karim", "contact": "018", "orders": 1, "spent_cents": 24000},
        ]
        assert report["coupons_by_date"] == {"2024-03-01": 1}

    def test_delivered_totals(self, orders):
        report = reports.build_report(orders, [], date(2024, 3, 1), date(2024, 3, 31))
        assert report["delivered_orders_count"] == 3
        assert report["delivered_revenue_cents"] == 56000 + 40000 + 10000

    def test_end_date_is_inclusive(self):
        late = order(10, 500, [], hour=23)
        assert reports.build_report([late], [], date(2024, 3, 10), date(2024, 3, 10))["sales_by_date"] == {"2024-03-10": 500}

    def test_naive_timestamps_are_treated_as_utc(self):
        naive = order(5, 700, [])
        naive.created_at = datetime(2024, 3, 5, 8, 0)
        assert reports.build_report([naive], [], date(2024, 3, 5), date(2024, 3, 5))["sales_by_date"] == {"2024-03-05": 700}

    def test_new_customers(self):
        profiles = [SimpleNamespace(created_at=at(3)), SimpleNamespace(created_at=at(25)), SimpleNamespace(created_at=None)]
        assert reports.build_report([], profiles, date(2024, 3, 1), date(2024, 3, 10))["new_customers_count"] == 1

    def test_reversed_range(self):
        with pytest.raises(ValidationError):
            reports.build_report([], [], date(2024, 3, 10), date(2024, 3, 1))


def test_dashboard_summary(session, catalog):
    def placed(status, total):
        return Order(
            customer_name="C",
            status=status,
            total_cents=total,
            subtotal_cents=total,
            items=[OrderItem(product_name="Apple", quantity=1, unit_price_cents=total, total_price_cents=total)],
        )

    session.add_all([placed("Pending", 1000), placed("Pending", 2000), placed("Delivered", 3000), placed("Cancelled", 9000)])
    session.commit()

    summary = reports.dashboard_summary(session)
    assert summary["products"] == 3
    assert summary["orders"] == 4
    assert summary["pending_orders"] == 2
    assert summary["orders_by_status"]["Cancelled"] == 1
    assert summary["revenue_cents"] == 6000
    assert len(summary["recent_orders"]) == 4
