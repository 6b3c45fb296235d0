"""
Sale-price rules.

A product (or variant) is on sale when it carries an original price strictly above its
selling price. Admins enter a base price and an optional sale price; the sale price only
applies when it is positive and below the base price.
"""

from typing import Optional, Tuple


def resolve_prices(base_cents: int, sale_cents: Optional[int]) -> Tuple[int, Optional[int]]:
    """Return `(price_cents, original_price_cents)` for a base/sale price pair."""
    base = max(base_cents or 0, 0)
    sale = sale_cents or 0
    if 0 < sale < base:
        return sale, base
    return base, None


def is_on_sale(price_cents: int, original_price_cents: Optional[int]) -> bool:
    return original_price_cents is not None and original_price_cents > price_cents


def display_price(price_cents: int, original_price_cents: Optional[int]) -> dict:
    """`mrp` is the crossed-out list price; `sale` is only set for discounted items."""
    if is_on_sale(price_cents, original_price_cents):
        return {"mrp": original_price_cents, "sale": price_cents}
    return {"mrp": price_cents, "sale": None}


def split_prices(price_cents: int, original_price_cents: Optional[int]) -> Tuple[int, Optional[int]]:
    """Inverse of `resolve_prices`: recover the `(base, sale)` pair an admin form would show."""
    if is_on_sale(price_cents, original_price_cents):
        return original_price_cents, price_cents
    return price_cents, None
