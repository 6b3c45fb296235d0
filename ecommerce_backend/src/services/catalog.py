"""
In-memory catalog queries: category hierarchy, product filtering, search and pagination.

These functions take rows that have already been loaded (ORM objects or anything with the
same attributes) and never touch the session themselves.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set, TypeVar

from src.services.pricing import is_on_sale

T = TypeVar("T")

LIVE_SEARCH_MIN_CHARS = 2
LIVE_SEARCH_LIMIT = 5
SORT_OPTIONS = ("newest", "price_asc", "price_desc", "name")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_aware(value: Optional[datetime]) -> datetime:
    if value is None:
        return _EPOCH
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def build_category_tree(categories: Sequence) -> List[dict]:
    """
    Flatten the category forest depth-first.

    Returns `[{"category": c, "level": n}, ...]` with each root followed by its
    descendants, preserving the input order among siblings. Categories whose parent is
    missing are treated as roots.
    """
    known_ids = {c.id for c in categories}
    children: Dict[Optional[int], list] = {}
    for category in categories:
        parent = category.parent_id if category.parent_id in known_ids else None
        children.setdefault(parent, []).append(category)

    result: List[dict] = []
    visited: Set[int] = set()

    def walk(parent_id: Optional[int], level: int) -> None:
        for child in children.get(parent_id, []):
            if child.id in visited:
                continue
            visited.add(child.id)
            result.append({"category": child, "level": level})
            walk(child.id, level + 1)

    walk(None, 0)
    return result


def find_category(categories: Iterable, key: Optional[str]):
    """Match a category by id, slug or name, case-insensitively."""
    wanted = str(key or "").strip().lower()
    if not wanted:
        return None
    for category in categories:
        if str(category.id).lower() == wanted or (category.slug or "").lower() == wanted or (category.name or "").lower() == wanted:
            return category
    return None


def descendant_ids(categories: Iterable, root_id: int) -> Set[int]:
    """Ids of `root_id` and every category below it."""
    by_parent: Dict[Optional[int], List[int]] = {}
    for category in categories:
        by_parent.setdefault(category.parent_id, []).append(category.id)

    family = {root_id}
    pending = [root_id]
    while pending:
        current = pending.pop()
        for child_id in by_parent.get(current, []):
            if child_id not in family:
                family.add(child_id)
                pending.append(child_id)
    return family


def filter_by_category(products: Iterable[T], categories: Sequence, key: Optional[str]) -> List[T]:
    """
    Keep products in the category named by `key` or any of its descendants.

    When `key` does not match a known category it is compared literally against each
    product's category name.
    """
    target = find_category(categories, key)
    if target is not None:
        family = descendant_ids(categories, target.id)
        return [p for p in products if p.category_id in family]
    literal = str(key or "").strip().lower()
    return [p for p in products if (p.category_name or "").lower() == literal]


def filter_by_brand(products: Iterable[T], brand: Optional[str]) -> List[T]:
    wanted = (brand or "").strip().lower()
    return [p for p in products if (p.brand_name or "").lower() == wanted or (p.brand and (p.brand.slug or "").lower() == wanted)]


def sort_products(products: Iterable[T], sort: Optional[str]) -> List[T]:
    items = list(products)
    if sort == "price_asc":
        items.sort(key=lambda p: p.price_cents)
    elif sort == "price_desc":
        items.sort(key=lambda p: p.price_cents, reverse=True)
    elif sort == "name":
        items.sort(key=lambda p: (p.name or "").lower())
    elif sort == "newest":
        items.sort(key=lambda p: _as_aware(p.created_at), reverse=True)
    return items


# PUBLIC_INTERFACE
def search_products(
    products: Iterable[T],
    categories: Sequence = (),
    query: Optional[str] = None,
    category: Optional[str] = None,
    brand: Optional[str] = None,
    on_sale: bool = False,
    featured: bool = False,
    sort: Optional[str] = None,
) -> List[T]:
    """Apply the storefront product listing filters, then sort."""
    items = list(products)
    if query and query.strip():
        needle = query.strip().lower()
        items = [p for p in items if needle in (p.name or "").lower() or needle in (p.category_name or "").lower()]
    if category:
        items = filter_by_category(items, categories, category)
    if brand:
        items = filter_by_brand(items, brand)
    if on_sale:
        items = [p for p in items if is_on_sale(p.price_cents, p.original_price_cents)]
    if featured:
        items = [p for p in items if p.is_featured]
    return sort_products(items, sort)


def live_search(products: Iterable[T], query: Optional[str], limit: int = LIVE_SEARCH_LIMIT) -> List[T]:
    """Header search-as-you-type: nothing until at least two characters are typed."""
    if not query or len(query.strip()) < LIVE_SEARCH_MIN_CHARS:
        return []
    needle = query.lower()
    return [p for p in products if needle in (p.name or "").lower()][:limit]


def paginate(items: Sequence[T], page: int, page_size: int) -> dict:
    page = max(page, 1)
    page_size = max(page_size, 1)
    total = len(items)
    start = (page - 1) * page_size
    return {
        "items": list(items[start : start + page_size]),
        "total": total,
        "page": page,
        "page_size": page_size,
        "pages": (total + page_size - 1) // page_size,
    }


def product_counts(products: Iterable) -> Counter:
    """Number of products per category id."""
    return Counter(p.category_id for p in products if p.category_id is not None)


def average_rating(reviews: Iterable) -> float:
    ratings = [r.rating for r in reviews]
    return round(sum(ratings) / len(ratings), 2) if ratings else 0.0
