"""
Admin order editor.

An admin opens an order, edits a draft copy (items, shipping, customer details) and then
saves it back. Every item edit recalculates the totals from the draft's own lines and the
coupon code recorded on the order. Draft helpers take a draft dict and return a new one.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger
from sqlalchemy.orm import Session

from src.core.errors import NotFoundError, ValidationError
from src.db.models import ORDER_STATUSES, Order, OrderItem
from src.services.coupons import coupon_discount, find_coupon

CUSTOMER_FIELDS = (
    "customer_name",
    "customer_email",
    "customer_phone",
    "customer_address",
    "customer_district",
    "customer_area",
    "notes",
)
ITEM_FIELDS = (
    "product_id",
    "variant_id",
    "sku",
    "product_name",
    "variant_name",
    "image",
    "category",
    "quantity",
    "unit_price_cents",
    "total_price_cents",
)


def order_to_draft(order: Order) -> dict:
    draft = {field: getattr(order, field) for field in CUSTOMER_FIELDS}
    draft.update(
        coupon_code=order.coupon_code,
        status=order.status,
        subtotal_cents=order.subtotal_cents,
        shipping_cents=order.shipping_cents,
        discount_cents=order.discount_cents,
        total_cents=order.total_cents,
        items=[{field: getattr(item, field) for field in ITEM_FIELDS} for item in order.items],
    )
    return draft


# PUBLIC_INTERFACE
def recalculate_totals(draft: dict, coupons: Iterable) -> dict:
    """
    Recompute line totals, subtotal, discount and total.

    The discount comes from the coupon recorded on the order; a code that no longer matches
    a coupon gives no discount. Eligibility is not re-checked: the customer qualified when
    the order was placed.
    """
    updated = copy.deepcopy(draft)
    for item in updated["items"]:
        item["total_price_cents"] = item["unit_price_cents"] * item["quantity"]
    subtotal = sum(item["total_price_cents"] for item in updated["items"])
    coupon = find_coupon(coupons, updated.get("coupon_code"))
    discount = coupon_discount(coupon, subtotal)
    updated["subtotal_cents"] = subtotal
    updated["discount_cents"] = discount
    updated["total_cents"] = subtotal + updated.get("shipping_cents", 0) - discount
    return updated


def _check_index(draft: dict, index: Optional[int]) -> int:
    if index is None or not 0 <= index < len(draft["items"]):
        raise ValidationError(f"Order line {index} does not exist.")
    return index


def remove_item(draft: dict, index: int, coupons: Iterable) -> dict:
    index = _check_index(draft, index)
    updated = copy.deepcopy(draft)
    del updated["items"][index]
    return recalculate_totals(updated, coupons)


def change_item_quantity(draft: dict, index: int, delta: int, coupons: Iterable) -> dict:
    """Quantities never drop below 1; use `remove_item` to drop a line."""
    index = _check_index(draft, index)
    updated = copy.deepcopy(draft)
    item = updated["items"][index]
    item["quantity"] = max(1, item["quantity"] + delta)
    return recalculate_totals(updated, coupons)


def change_shipping(draft: dict, shipping_cents: int, coupons: Iterable) -> dict:
    if shipping_cents < 0:
        raise ValidationError("Shipping cost cannot be negative.")
    updated = copy.deepcopy(draft)
    updated["shipping_cents"] = shipping_cents
    return recalculate_totals(updated, coupons)


def update_customer_info(draft: dict, field: str, value) -> dict:
    """Change one customer field. A new district clears the area, which belongs to the old one."""
    if field not in CUSTOMER_FIELDS:
        raise ValidationError(f"{field} is not an editable customer field.")
    updated = copy.deepcopy(draft)
    updated[field] = value
    if field == "customer_district":
        updated["customer_area"] = ""
    return updated


def add_product(draft: dict, product, variant, coupons: Iterable) -> dict:
    """Add one unit of a product (or variant); an identical line just gains one."""
    variant_id = variant.id if variant is not None else None
    for index, item in enumerate(draft["items"]):
        if item.get("product_id") == product.id and item.get("variant_id") == variant_id:
            return change_item_quantity(draft, index, 1, coupons)

    unit_price = variant.price_cents if variant is not None else product.price_cents
    image = (variant.image if variant is not None and variant.image else None) or (product.images[0] if product.images else "")
    updated = copy.deepcopy(draft)
    updated["items"].append(
        {
            "product_id": product.id,
            "variant_id": variant_id,
            "sku": (variant.sku if variant is not None else None) or product.sku,
            "product_name": product.name,
            "variant_name": variant.name if variant is not None else None,
            "image": image,
            "category": product.category_name,
            "quantity": 1,
            "unit_price_cents": unit_price,
            "total_price_cents": unit_price,
        }
    )
    return recalculate_totals(updated, coupons)


def _load_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")
    return order


# PUBLIC_INTERFACE
def save_order_edits(session: Session, order_id: int, draft: dict, coupons: Iterable) -> Order:
    """Write an edited draft back to the order, replacing its lines."""
    order = _load_order(session, order_id)
    if not draft.get("items"):
        raise ValidationError("An order needs at least one item.")
    if draft.get("status") and draft["status"] not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status {draft['status']!r}.")
    final = recalculate_totals(draft, coupons)

    for field in CUSTOMER_FIELDS:
        setattr(order, field, final.get(field))
    if final.get("status"):
        order.status = final["status"]
    order.shipping_cents = final["shipping_cents"]
    order.subtotal_cents = final["subtotal_cents"]
    order.discount_cents = final["discount_cents"]
    order.total_cents = final["total_cents"]
    order.items = [OrderItem(**{field: item.get(field) for field in ITEM_FIELDS}) for item in final["items"]]

    session.commit()
    logger.info("Order {} edited: {} lines, total {}", order.id, len(order.items), order.total_cents)
    return order


# PUBLIC_INTERFACE
def update_order_status(session: Session, order_id: int, status: str) -> Order:
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status {status!r}.")
    order = _load_order(session, order_id)
    previous = order.status
    order.status = status
    session.commit()
    logger.info("Order {} status {} -> {}", order.id, previous, status)
    return order


# ---------------------------------------------------------------------------
# Invoice
# ---------------------------------------------------------------------------


def _template_env() -> Environment:
    template_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))
    env.filters["money"] = lambda cents: f"{(cents or 0) / 100:.2f}"
    return env


# PUBLIC_INTERFACE
def render_invoice(order: Order, store_name: str, store_address: str = "") -> str:
    """Printable HTML invoice; the page opens the print dialog when loaded."""
    created = order.created_at.strftime("%d/%m/%Y") if order.created_at else ""
    bill_to_address = ", ".join(
        part for part in (order.customer_address, order.customer_area, order.customer_district) if part
    )
    template = _template_env().get_template("invoice.html")
    return template.render(
        order=order,
        store_name=store_name,
        store_address=store_address,
        created=created,
        bill_to_address=bill_to_address,
    )
