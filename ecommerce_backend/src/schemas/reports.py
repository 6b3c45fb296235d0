"""Report and dashboard schemas. Money values are cents."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from src.schemas.orders import OrderOut


class ProductSales(BaseModel):
    product_id: Optional[int] = None
    name: str
    quantity: int
    revenue_cents: int


class CustomerSales(BaseModel):
    name: str
    contact: str
    orders: int
    spent_cents: int


class SalesReport(BaseModel):
    start: str
    end: str
    sales_by_date: Dict[str, int]
    sales_by_product: List[ProductSales]
    sales_by_category: Dict[str, int]
    coupons_by_date: Dict[str, int]
    customer_report: List[CustomerSales]
    new_customers_count: int
    orders: List[OrderOut]
    delivered_revenue_cents: int
    delivered_orders_count: int


class DashboardSummary(BaseModel):
    products: int
    customers: int
    orders: int
    orders_by_status: Dict[str, int]
    pending_orders: int
    revenue_cents: int
    recent_orders: List[OrderOut]
