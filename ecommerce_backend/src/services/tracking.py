"""Public order tracking by order number and phone."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from src.core.errors import NotFoundError, ValidationError
from src.db.models import Order

TRACKING_STEPS = ("Pending", "Processing", "Shipped", "Delivered")
CANCELLED = "Cancelled"
MAX_ORDER_ID = 2**63 - 1


def status_step(status: Optional[str]) -> int:
    """Index of `status` on the delivery timeline; -1 for cancelled (or unknown) orders."""
    if status in TRACKING_STEPS:
        return TRACKING_STEPS.index(status)
    return -1


def timeline(status: Optional[str]) -> List[dict]:
    current = status_step(status)
    return [{"status": name, "step": idx, "done": 0 <= idx <= current} for idx, name in enumerate(TRACKING_STEPS)]


# PUBLIC_INTERFACE
def track_order(session: Session, order_id, phone: Optional[str]) -> Order:
    """
    Find an order by its number and the phone used at checkout.

    The phone only has to appear within the stored number, so "01711..." matches
    "+8801711...". A mismatch is reported exactly like a missing order.
    """
    raw_id = str(order_id or "").strip().lstrip("#")
    phone = (phone or "").strip()
    if not raw_id or not phone:
        raise ValidationError("Enter both the order number and the phone number.")
    try:
        numeric_id = int(raw_id)
    except ValueError:
        raise NotFoundError("No order matches that order number and phone.") from None
    if not 1 <= numeric_id <= MAX_ORDER_ID:
        raise NotFoundError("No order matches that order number and phone.")

    order = session.get(Order, numeric_id)
    if order is None or phone not in (order.customer_phone or ""):
        raise NotFoundError("No order matches that order number and phone.")
    return order


def tracking_payload(order: Order) -> dict:
    return {
        "order": order,
        "step": status_step(order.status),
        "cancelled": order.status == CANCELLED,
        "timeline": timeline(order.status),
    }
