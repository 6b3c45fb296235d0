"""
Admin writes for the catalog: products (with variants), categories, brands and attributes.

Slugs are derived on save. Product prices arrive as a base/sale pair and are stored as
`price_cents` plus `original_price_cents` (see `services.pricing`).
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.db.models import Attribute, Brand, Category, Product, ProductVariant
from src.services.catalog import descendant_ids
from src.services.pricing import resolve_prices, split_prices
from src.services.slugs import category_slug, slugify
from src.services.variants import (
    generate_variants,
    parse_values_input,
    reconstruct_attributes,
    regenerated_skus,
    sync_global_attributes,
)

VARIANT_FIELDS = ("attribute_values", "price_cents", "original_price_cents", "sku", "stock", "image")


def _ensure_unique_slug(session: Session, model, slug: str, exclude_id=None) -> str:
    if not slug:
        raise ValidationError("A name that produces a URL slug is required.")
    clash = session.scalar(select(model).where(model.slug == slug))
    if clash is not None and clash.id != exclude_id:
        raise ConflictError(f"The slug {slug!r} is already in use.")
    return slug


def _get_or_404(session: Session, model, ident, label: str):
    row = session.get(model, ident)
    if row is None:
        raise NotFoundError(f"{label} {ident} not found.")
    return row


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def _apply_variants(product: Product, variants: List[dict]) -> None:
    existing = {v.id: v for v in product.variants}
    kept: List[ProductVariant] = []
    for data in variants:
        variant = existing.get(data.get("id")) if data.get("id") is not None else None
        if variant is None:
            variant = ProductVariant()
        for field in VARIANT_FIELDS:
            if field in data:
                setattr(variant, field, data[field])
        if variant.stock is None:
            variant.stock = 100
        kept.append(variant)
    product.variants = kept


# PUBLIC_INTERFACE
def save_product(session: Session, data: dict, product_id: Optional[int] = None) -> Product:
    """
    Create or update a product from the admin form.

    Variants in `data` replace the product's variant list; entries carrying an `id` update
    the matching variant in place. Attribute options are merged into the global attributes.
    """
    product = _get_or_404(session, Product, product_id, "Product") if product_id is not None else Product()
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Product name is required.")

    if data.get("category_id") is not None:
        _get_or_404(session, Category, data["category_id"], "Category")
    if data.get("brand_id") is not None:
        _get_or_404(session, Brand, data["brand_id"], "Brand")

    price, original = resolve_prices(data.get("base_price_cents", 0), data.get("sale_price_cents"))
    product.name = name
    product.slug = _ensure_unique_slug(session, Product, slugify(name), product.id)
    product.price_cents = price
    product.original_price_cents = original
    for field in ("category_id", "brand_id", "description", "short_description", "unit", "sku", "badge"):
        setattr(product, field, data.get(field))
    product.is_featured = bool(data.get("is_featured"))
    product.images = list(data.get("images") or [])

    attributes = [a for a in (data.get("attributes") or []) if a.get("name")]
    product.attributes = [{"name": a["name"], "options": list(a.get("options") or [])} for a in attributes]
    _apply_variants(product, list(data.get("variants") or []))

    session.add(product)
    sync_global_attributes(session, attributes)
    session.commit()
    logger.info("{} product {} ({} variants)", "Updated" if product_id else "Created", product.id, len(product.variants))
    return product


def delete_product(session: Session, product_id: int) -> None:
    session.delete(_get_or_404(session, Product, product_id, "Product"))
    session.commit()
    logger.info("Deleted product {}", product_id)


def product_form(product: Product) -> dict:
    """Reshape a stored product into what the edit form expects."""
    base, sale = split_prices(product.price_cents, product.original_price_cents)
    return {
        "name": product.name,
        "base_price_cents": base,
        "sale_price_cents": sale,
        "category_id": product.category_id,
        "brand_id": product.brand_id,
        "description": product.description,
        "short_description": product.short_description,
        "images": list(product.images or []),
        "unit": product.unit,
        "sku": product.sku,
        "badge": product.badge,
        "is_featured": product.is_featured,
        "attributes": reconstruct_attributes(product),
        "variants": list(product.variants),
    }


def preview_variants(session: Session, request: dict) -> List[dict]:
    category_name = None
    if request.get("category_id") is not None:
        category_name = _get_or_404(session, Category, request["category_id"], "Category").name
    return generate_variants(
        request.get("attributes") or [],
        request.get("base_price_cents", 0),
        request.get("sale_price_cents"),
        sku=request.get("sku"),
        category_name=category_name,
        product_name=request.get("name"),
        images=request.get("images") or [],
    )


# PUBLIC_INTERFACE
def regenerate_all_skus(session: Session) -> int:
    """Rewrite product and variant SKUs from category, name and attribute values. Returns products updated."""
    products = list(session.scalars(select(Product)))
    for product in products:
        prefix, variant_skus = regenerated_skus(product.category_name, product.name, product.variants)
        product.sku = prefix
        for variant, sku in zip(product.variants, variant_skus):
            variant.sku = sku
    session.commit()
    logger.info("Regenerated SKUs for {} products", len(products))
    return len(products)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def _parent_slug(session: Session, parent_id: Optional[int], self_id: Optional[int] = None) -> Optional[str]:
    if parent_id is None:
        return None
    if parent_id == self_id:
        raise ValidationError("A category cannot be its own parent.")
    parent = _get_or_404(session, Category, parent_id, "Category")
    if self_id is not None and parent.id in descendant_ids(session.scalars(select(Category)), self_id):
        raise ValidationError("A category cannot be moved under one of its own subcategories.")
    return parent.slug



def save_category(session: Session, data: dict, category_id: Optional[int] = None) -> Category:
    category = _get_or_404(session, Category, category_id, "Category") if category_id is not None else Category()
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Category name is required.")
    parent_slug = _parent_slug(session, data.get("parent_id"), category.id)
    category.name = name
    category.parent_id = data.get("parent_id")
    category.image_url = data.get("image_url")
    category.slug = _ensure_unique_slug(session, Category, category_slug(name, parent_slug), category.id)
    session.add(category)
    session.commit()
    return category


def delete_category(session: Session, category_id: int) -> None:
    """Children become roots and products become uncategorised."""
    category = _get_or_404(session, Category, category_id, "Category")
    session.execute(update(Category).where(Category.parent_id == category_id).values(parent_id=None))
    session.execute(update(Product).where(Product.category_id == category_id).values(category_id=None))
    session.delete(category)
    session.commit()


# ---------------------------------------------------------------------------
# Brands and attributes
# ---------------------------------------------------------------------------


def save_brand(session: Session, data: dict, brand_id: Optional[int] = None) -> Brand:
    brand = _get_or_404(session, Brand, brand_id, "Brand") if brand_id is not None else Brand()
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Brand name is required.")
    brand.name = name
    brand.slug = _ensure_unique_slug(session, Brand, slugify(data.get("slug") or name), brand.id)
    brand.logo_url = data.get("logo_url")
    session.add(brand)
    session.commit()
    return brand


def delete_brand(session: Session, brand_id: int) -> None:
    brand = _get_or_404(session, Brand, brand_id, "Brand")
    session.execute(update(Product).where(Product.brand_id == brand_id).values(brand_id=None))
    session.delete(brand)
    session.commit()


def save_attribute(session: Session, data: dict, attribute_id: Optional[int] = None) -> Attribute:
    attribute = _get_or_404(session, Attribute, attribute_id, "Attribute") if attribute_id is not None else Attribute()
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Attribute name is required.")
    values = data.get("values")
    if values is None:
        values = parse_values_input(data.get("values_input") or "")
    attribute.name = name
    attribute.values = list(dict.fromkeys(v.strip() for v in values if v and v.strip()))
    session.add(attribute)
    session.commit()
    return attribute


def delete_attribute(session: Session, attribute_id: int) -> None:
    session.delete(_get_or_404(session, Attribute, attribute_id, "Attribute"))
    session.commit()
