"""Cart, checkout, order and tracking schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]


class CartLine(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = Field(default=1, ge=1)


class PricedLine(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    sku: Optional[str] = None
    product_name: str
    variant_name: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    quantity: int
    unit_price_cents: int
    total_price_cents: int


class QuoteRequest(BaseModel):
    items: List[CartLine] = Field(default_factory=list)
    district: Optional[str] = None
    coupon_code: Optional[str] = None


class Quote(BaseModel):
    items: List[PricedLine]
    subtotal_cents: int
    shipping_cents: int
    discount_cents: int
    total_cents: int
    coupon_code: Optional[str] = Field(default=None, description="The coupon that was applied, explicit or automatic.")


class CustomerInfo(BaseModel):
    name: str = ""
    email: Optional[str] = None
    phone: str = ""
    address: str = ""
    district: str = ""
    area: Optional[str] = None


class CheckoutRequest(BaseModel):
    customer: CustomerInfo
    items: List[CartLine] = Field(default_factory=list)
    coupon_code: Optional[str] = None
    notes: Optional[str] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    product_id: Optional[int] = None
    variant_id: Optional[int] = None
    sku: Optional[str] = None
    product_name: str
    variant_name: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    quantity: int
    unit_price_cents: int
    total_price_cents: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[uuid.UUID] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    customer_district: Optional[str] = None
    customer_area: Optional[str] = None
    notes: Optional[str] = None
    subtotal_cents: int
    shipping_cents: int
    discount_cents: int
    total_cents: int
    status: str
    coupon_code: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemOut] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    status: OrderStatus


class OrderDraft(BaseModel):
    """Editable copy of an order in the admin order editor."""

    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    customer_district: Optional[str] = None
    customer_area: Optional[str] = None
    notes: Optional[str] = None
    coupon_code: Optional[str] = None
    status: OrderStatus = "Pending"
    subtotal_cents: int = 0
    shipping_cents: int = 0
    discount_cents: int = 0
    total_cents: int = 0
    items: List[OrderItemOut] = Field(default_factory=list)


class DraftAction(BaseModel):
    """One editor action applied to a draft (used by the stateless edit preview endpoint)."""

    action: Literal["remove_item", "change_quantity", "change_shipping", "update_customer", "add_product"]
    index: Optional[int] = None
    delta: Optional[int] = None
    shipping_cents: Optional[int] = Field(default=None, ge=0)
    field: Optional[str] = None
    value: Optional[str] = None
    product_id: Optional[int] = None
    variant_id: Optional[int] = None


class DraftEditRequest(BaseModel):
    draft: OrderDraft
    actions: List[DraftAction] = Field(default_factory=list)


class TrackingStep(BaseModel):
    status: str
    step: int
    done: bool


class TrackingResult(BaseModel):
    order: OrderOut
    step: int
    cancelled: bool
    timeline: List[TrackingStep]
