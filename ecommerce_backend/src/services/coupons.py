"""Coupon rules: eligibility, discount amount and auto-apply selection."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from src.core.errors import ValidationError


def _today() -> date:
    return date.today()


# PUBLIC_INTERFACE
def coupon_discount(coupon, subtotal_cents: int) -> int:
    """
    Discount in cents for `subtotal_cents`.

    Fixed coupons take `discount_value` cents off; Percentage coupons take
    `discount_value` percent, rounded half up. The discount never exceeds the subtotal.
    """
    if coupon is None or subtotal_cents <= 0:
        return 0
    if coupon.discount_type == "Percentage":
        discount = (subtotal_cents * coupon.discount_value + 50) // 100
    else:
        discount = coupon.discount_value
    return max(0, min(discount, subtotal_cents))


def coupon_problem(coupon, subtotal_cents: int, today: Optional[date] = None) -> Optional[str]:
    """Why `coupon` cannot be used for this subtotal, or None when it can."""
    today = today or _today()
    if coupon.status != "Active":
        return f"Coupon {coupon.code} is not active."
    if coupon.expiry_date < today:
        return f"Coupon {coupon.code} expired on {coupon.expiry_date.isoformat()}."
    if subtotal_cents < (coupon.minimum_spend_cents or 0):
        return f"Coupon {coupon.code} requires a minimum spend of {coupon.minimum_spend_cents / 100:.2f}."
    return None


def validate_coupon(coupon, subtotal_cents: int, today: Optional[date] = None) -> None:
    problem = coupon_problem(coupon, subtotal_cents, today)
    if problem:
        raise ValidationError(problem)


def best_auto_apply_coupon(coupons: Iterable, subtotal_cents: int, today: Optional[date] = None):
    """The usable auto-apply coupon with the largest discount, if any."""
    best = None
    best_discount = 0
    for coupon in coupons:
        if not coupon.auto_apply or coupon_problem(coupon, subtotal_cents, today):
            continue
        discount = coupon_discount(coupon, subtotal_cents)
        if discount > best_discount:
            best, best_discount = coupon, discount
    return best


def find_coupon(coupons: Iterable, code: Optional[str]):
    """Codes are matched case-insensitively after trimming."""
    wanted = (code or "").strip().lower()
    if not wanted:
        return None
    for coupon in coupons:
        if coupon.code.lower() == wanted:
            return coupon
    return None
