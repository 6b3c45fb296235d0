"""
Cart pricing and order placement.

The cart lives on the client; the server only ever sees `{product_id, variant_id, quantity}`
lines and reprices them from the catalog before quoting or placing an order.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.errors import ValidationError
from src.db.models import Coupon, Order, OrderItem, Product, Profile
from src.services.coupons import best_auto_apply_coupon, coupon_discount, find_coupon, validate_coupon
from src.services.locations import shipping_cost, validate_location
from src.services.store_settings import shipping_settings

REQUIRED_CUSTOMER_FIELDS = (("name", "Name"), ("phone", "Phone"), ("address", "Address"), ("district", "District"))


def _get(obj, key, default=None):
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _merge_lines(lines: Iterable) -> List[Tuple[int, Optional[int], int]]:
    merged: dict = {}
    for line in lines:
        quantity = int(_get(line, "quantity", 1) or 0)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1.")
        key = (int(_get(line, "product_id")), _get(line, "variant_id"))
        merged[key] = merged.get(key, 0) + quantity
    return [(product_id, variant_id, quantity) for (product_id, variant_id), quantity in merged.items()]


# PUBLIC_INTERFACE
def price_cart(session: Session, lines: Iterable) -> List[dict]:
    """
    Resolve cart lines against the catalog.

    Duplicate product/variant lines are merged. Products with variants must be bought as a
    specific variant; each priced line snapshots the name, SKU, image and category that the
    order item will keep.
    """
    merged = _merge_lines(lines)
    if not merged:
        return []
    product_ids = {product_id for product_id, _, _ in merged}
    products = {p.id: p for p in session.scalars(select(Product).where(Product.id.in_(product_ids)))}

    priced = []
    for product_id, variant_id, quantity in merged:
        product = products.get(product_id)
        if product is None:
            raise ValidationError(f"Product {product_id} is no longer available.")
        variant = None
        if variant_id is not None:
            variant = next((v for v in product.variants if v.id == variant_id), None)
            if variant is None:
                raise ValidationError(f"The selected option of {product.name} is no longer available.")
        elif product.variants:
            raise ValidationError(f"Choose an option for {product.name}.")

        unit_price = variant.price_cents if variant else product.price_cents
        image = (variant.image if variant and variant.image else None) or (product.images[0] if product.images else None)
        priced.append(
            {
                "product_id": product.id,
                "variant_id": variant.id if variant else None,
                "sku": (variant.sku if variant else None) or product.sku,
                "product_name": product.name,
                "variant_name": variant.name if variant else None,
                "image": image,
                "category": product.category_name,
                "quantity": quantity,
                "unit_price_cents": unit_price,
                "total_price_cents": unit_price * quantity,
            }
        )
    return priced


def _resolve_coupon(session: Session, code: Optional[str], subtotal_cents: int):
    coupons = list(session.scalars(select(Coupon)))
    if code and code.strip():
        coupon = find_coupon(coupons, code)
        if coupon is None:
            raise ValidationError(f"Coupon {code.strip().upper()} does not exist.")
        validate_coupon(coupon, subtotal_cents)
        return coupon
    return best_auto_apply_coupon(coupons, subtotal_cents)


# PUBLIC_INTERFACE
def quote(session: Session, lines: Iterable, district: Optional[str] = None, coupon_code: Optional[str] = None) -> dict:
    """Priced lines plus subtotal, shipping, discount and total (subtotal + shipping - discount)."""
    items = price_cart(session, lines)
    subtotal = sum(item["total_price_cents"] for item in items)
    rates = shipping_settings(session)
    shipping = shipping_cost(district, rates["inside_dhaka_cents"], rates["outside_dhaka_cents"]) if items else 0
    coupon = _resolve_coupon(session, coupon_code, subtotal) if items else None
    discount = coupon_discount(coupon, subtotal)
    return {
        "items": items,
        "subtotal_cents": subtotal,
        "shipping_cents": shipping,
        "discount_cents": discount,
        "total_cents": subtotal + shipping - discount,
        "coupon_code": coupon.code if coupon else None,
    }


def _validate_customer(customer) -> None:
    missing = [label for field, label in REQUIRED_CUSTOMER_FIELDS if not str(_get(customer, field) or "").strip()]
    if missing:
        raise ValidationError(f"Please fill in: {', '.join(missing)}.")
    validate_location(_get(customer, "district"), _get(customer, "area"))


# PUBLIC_INTERFACE
def place_order(session: Session, request, user: Optional[Profile] = None) -> Order:
    """
    Create a Pending order from a checkout request.

    Signed-in customers have the order linked to their profile and, when the form leaves
    the email empty, their account email recorded on it.
    """
    lines = list(_get(request, "items") or [])
    if not lines:
        raise ValidationError("Your cart is empty.")
    customer = _get(request, "customer")
    _validate_customer(customer)

    totals = quote(session, lines, _get(customer, "district"), _get(request, "coupon_code"))
    order = Order(
        user_id=user.id if user else None,
        customer_name=_get(customer, "name").strip(),
        customer_email=(_get(customer, "email") or (user.email if user else None)),
        customer_phone=_get(customer, "phone").strip(),
        customer_address=_get(customer, "address").strip(),
        customer_district=_get(customer, "district").strip(),
        customer_area=_get(customer, "area"),
        notes=_get(request, "notes"),
        subtotal_cents=totals["subtotal_cents"],
        shipping_cents=totals["shipping_cents"],
        discount_cents=totals["discount_cents"],
        total_cents=totals["total_cents"],
        coupon_code=totals["coupon_code"],
        status="Pending",
        items=[OrderItem(**item) for item in totals["items"]],
    )
    session.add(order)
    session.commit()
    logger.info(
        "Order {} placed by {} ({} items, total {})",
        order.id,
        order.customer_phone,
        len(order.items),
        order.total_cents,
    )
    return order
