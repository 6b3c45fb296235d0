"""
Homepage renderer.

The homepage is a hero area (slider banners, up to four hero-grid banners, home banners)
followed by the admin-built list of sections. Each section has a type string from a closed
set; `SECTION_RENDERERS` maps every type to a function that resolves the section against the
catalog. A section whose type is unknown, or that lacks the data its type needs, renders
nothing and is left out of the page.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from urllib.parse import quote

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.db.models import Banner, Brand, Category, HomeSection, Order, OrderItem, Product
from src.schemas.catalog import BrandOut, CategoryOut, ProductSummary
from src.schemas.content import BannerOut
from src.services.catalog import filter_by_category, find_category, product_counts, sort_products
from src.services.pricing import is_on_sale

SECTION_PRODUCT_LIMIT = 12
TAB_PRODUCT_LIMIT = 8
BRAND_TAB_PRODUCT_LIMIT = 10
SIDEBAR_PRODUCT_LIMIT = 8
HERO_GRID_LIMIT = 4
FEATURED_CATEGORIES_LIMIT = 4


@dataclass
class HomeContext:
    """Rows loaded once per homepage render."""

    products: List[Product]
    categories: List[Category]
    brands: List[Brand]
    sales: Counter = field(default_factory=Counter)

    def __post_init__(self) -> None:
        self.counts = product_counts(self.products)


def _card(product) -> dict:
    return ProductSummary.model_validate(product).model_dump(mode="json")


def _cards(products) -> List[dict]:
    return [_card(p) for p in products]


def _banner(banner) -> dict:
    return BannerOut.model_validate(banner).model_dump(mode="json")


# PUBLIC_INTERFACE
def section_products(section, ctx: HomeContext) -> list:
    """Products selected by the section's filter, capped at twelve."""
    items = list(ctx.products)
    if section.filter_type == "category" and section.filter_value:
        items = filter_by_category(items, ctx.categories, section.filter_value)
    elif section.filter_type == "sale":
        items = [p for p in items if is_on_sale(p.price_cents, p.original_price_cents)]
    elif section.filter_type == "featured":
        items = [p for p in items if p.is_featured]
    return items[:SECTION_PRODUCT_LIMIT]


def view_all_link(section) -> str:
    if section.filter_type == "category" and section.filter_value:
        return f"/products?category={quote(section.filter_value.strip().lower(), safe='')}"
    return "/products"


def product_tabs(products: list, sales: Counter) -> List[dict]:
    """NEW ARRIVAL (newest first), ON SALE, and BEST SELLING (units sold, products with sales only)."""
    newest = sort_products(products, "newest")
    on_sale = [p for p in products if is_on_sale(p.price_cents, p.original_price_cents)]
    best = sorted((p for p in products if sales.get(p.id, 0) > 0), key=lambda p: sales[p.id], reverse=True)
    return [
        {"label": "NEW ARRIVAL", "products": _cards(newest[:TAB_PRODUCT_LIMIT])},
        {"label": "ON SALE", "products": _cards(on_sale[:TAB_PRODUCT_LIMIT])},
        {"label": "BEST SELLING", "products": _cards(best[:TAB_PRODUCT_LIMIT])},
    ]


def _render_slider(section, ctx: HomeContext) -> Optional[dict]:
    return {"products": _cards(section_products(section, ctx)), "view_all_link": view_all_link(section)}


def _render_tabbed_slider(section, ctx: HomeContext) -> Optional[dict]:
    return {"tabs": product_tabs(ctx.products, ctx.sales)}


def _render_category_grid(section, ctx: HomeContext) -> Optional[dict]:
    wanted = list(section.category_ids or [])
    by_id = {c.id: c for c in ctx.categories}
    selected = [by_id[cid] for cid in wanted if cid in by_id]
    if not selected:
        return None
    return {
        "categories": [
            CategoryOut.model_validate(c).model_copy(update={"item_count": ctx.counts.get(c.id, 0)}).model_dump(mode="json")
            for c in selected
        ]
    }


def _render_featured_category_sidebar(section, ctx: HomeContext) -> Optional[dict]:
    return {
        "products": _cards(section_products(section, ctx)[:SIDEBAR_PRODUCT_LIMIT]),
        "view_all_link": view_all_link(section),
        "banner": section.banner,
    }


def _render_three_column_banners(section, ctx: HomeContext) -> Optional[dict]:
    if not section.grid_banners:
        return None
    return {"banners": list(section.grid_banners)}


def _render_single_banner(section, ctx: HomeContext) -> Optional[dict]:
    if not section.banner:
        return None
    return {"banner": section.banner}


def _render_brand_tabs(section, ctx: HomeContext) -> Optional[dict]:
    names = [n for n in (section.brand_names or []) if n]
    if not names:
        return None
    return {
        "tabs": [
            {"brand": name, "products": _cards([p for p in ctx.products if p.brand_name == name][:BRAND_TAB_PRODUCT_LIMIT])}
            for name in names
        ]
    }


def _render_brand_logos(section, ctx: HomeContext) -> Optional[dict]:
    brands = [b for b in ctx.brands if b.logo_url]
    if section.brand_names:
        brands = [b for b in brands if b.name in section.brand_names]
    if not brands:
        return None
    return {"brands": [BrandOut.model_validate(b).model_dump(mode="json") for b in brands]}


def _render_featured_categories_grid(section, ctx: HomeContext) -> Optional[dict]:
    items = list(section.grid_banners or [])[:FEATURED_CATEGORIES_LIMIT]
    if not items:
        return None
    resolved = []
    for item in items:
        category = find_category(ctx.categories, item.get("category_id")) if item.get("category_id") is not None else None
        resolved.append({**item, "product_count": ctx.counts.get(category.id, 0) if category else 0})
    return {"items": resolved}


def _render_featured_collection_scroll(section, ctx: HomeContext) -> Optional[dict]:
    if not section.banner:
        return None
    return {
        "description": section.banner.get("description"),
        "link": section.banner.get("link"),
        "background": section.banner.get("image_url"),
        "products": _cards(section_products(section, ctx)),
    }


def _render_featured_product_grid(section, ctx: HomeContext) -> Optional[dict]:
    return {
        "products": _cards(section_products(section, ctx)),
        "view_all_link": (section.banner or {}).get("link"),
    }


SECTION_RENDERERS: Dict[str, Callable[..., Optional[dict]]] = {
    "slider": _render_slider,
    "tabbed-slider": _render_tabbed_slider,
    "category-grid": _render_category_grid,
    "featured-category-sidebar": _render_featured_category_sidebar,
    "three-column-banners": _render_three_column_banners,
    "single-banner": _render_single_banner,
    "brand-tabs": _render_brand_tabs,
    "brand-logos": _render_brand_logos,
    "featured-categories-grid": _render_featured_categories_grid,
    "featured-collection-scroll": _render_featured_collection_scroll,
    "featured-product-grid": _render_featured_product_grid,
}


def render_section(section, ctx: HomeContext) -> Optional[dict]:
    renderer = SECTION_RENDERERS.get(section.type)
    if renderer is None:
        return None
    payload = renderer(section, ctx)
    if payload is None:
        return None
    return {"id": section.id, "type": section.type, "title": section.title, **payload}


def render_sections(sections, ctx: HomeContext) -> List[dict]:
    active = sorted((s for s in sections if s.is_active), key=lambda s: s.sort_order)
    rendered = (render_section(s, ctx) for s in active)
    return [r for r in rendered if r is not None]


def _sorted_banners(banners, banner_type: str) -> list:
    return sorted((b for b in banners if b.type == banner_type and b.is_active), key=lambda b: b.sort_order or 0)


def sales_counts(session: Session) -> Counter:
    """Units sold per product over orders that were not cancelled."""
    rows = session.execute(
        select(OrderItem.product_id, func.sum(OrderItem.quantity))
        .join(Order, Order.id == OrderItem.order_id)
        .where(Order.status != "Cancelled", OrderItem.product_id.is_not(None))
        .group_by(OrderItem.product_id)
    )
    return Counter({product_id: int(total) for product_id, total in rows})


# PUBLIC_INTERFACE
def render_home(session: Session) -> dict:
    """Resolve the whole homepage in one pass over the catalog."""
    ctx = HomeContext(
        products=list(session.scalars(select(Product).order_by(Product.id.desc()))),
        categories=list(session.scalars(select(Category).order_by(Category.id))),
        brands=list(session.scalars(select(Brand).order_by(Brand.name))),
        sales=sales_counts(session),
    )
    banners = list(session.scalars(select(Banner)))
    sections = list(session.scalars(select(HomeSection)))
    return {
        "hero_slider": [_banner(b) for b in _sorted_banners(banners, "slider")],
        "hero_grid": [_banner(b) for b in _sorted_banners(banners, "hero_grid")[:HERO_GRID_LIMIT]],
        "home_banners": [_banner(b) for b in _sorted_banners(banners, "home_banner")],
        "sections": render_sections(sections, ctx),
    }
