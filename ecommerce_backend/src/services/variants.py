"""
Variant generation for the admin product form.

Admins attach attributes (name + option list) to a product and flag the ones that drive
variations. The generator takes the cartesian product of the flagged option lists, in
attribute order, and produces one purchasable variant per combination with a readable SKU.
"""

from __future__ import annotations

import itertools
import re
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.errors import ValidationError
from src.db.models import Attribute
from src.services.pricing import resolve_prices

DEFAULT_VARIANT_STOCK = 100
_VOWELS = re.compile(r"[AEIOU]")


def _get(obj, key, default=None):
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def abbreviate(value: Optional[str]) -> str:
    """
    Short SKU token for an attribute value.

    "Free Size" -> "FS" (initials), "XL" -> "XL" (three characters or fewer are kept),
    "White" -> "WHT" (first three consonants), "Aqua" -> "AQU" (fallback: first three).
    """
    text = (value or "").upper().strip()
    if not text:
        return "VAR"
    if " " in text:
        return "".join(word[0] for word in text.split())
    if len(text) <= 3:
        return text
    consonants = _VOWELS.sub("", text)
    if len(consonants) >= 3:
        return consonants[:3]
    return text[:3]


def sku_prefix(category_name: Optional[str], product_name: Optional[str]) -> str:
    """`CAT-PRO`: first three letters of the category (or GEN) and of the product name (or PROD)."""
    cat_part = (category_name or "GEN")[:3].upper()
    name_part = (product_name or "PROD")[:3].upper()
    return f"{cat_part}-{name_part}"


# PUBLIC_INTERFACE
def generate_variants(
    attributes: Sequence,
    base_price_cents: int,
    sale_price_cents: Optional[int] = None,
    sku: Optional[str] = None,
    category_name: Optional[str] = None,
    product_name: Optional[str] = None,
    images: Sequence[str] = (),
) -> List[dict]:
    """
    Build one variant per combination of the options of attributes flagged `for_variations`.

    SKUs are `<sku>-<n>` (1-based) when the product has a base SKU, otherwise
    `CAT-PRO-<abbr>-<abbr>...`. Every variant starts with the product's resolved price,
    a stock of 100 and the product's first image.
    """
    selected = [a for a in attributes if _get(a, "for_variations") and _get(a, "options")]
    if not selected:
        raise ValidationError("Add at least one attribute with options marked for variations first.")

    names = [_get(a, "name") for a in selected]
    option_lists = [list(_get(a, "options")) for a in selected]
    price, original = resolve_prices(base_price_cents, sale_price_cents)
    base_sku = (sku or "").strip()
    prefix = sku_prefix(category_name, product_name)
    image = images[0] if images else ""

    variants = []
    for idx, combo in enumerate(itertools.product(*option_lists)):
        if base_sku:
            variant_sku = f"{base_sku}-{idx + 1}"
        else:
            variant_sku = "-".join([prefix] + [abbreviate(v) for v in combo])
        variants.append(
            {
                "attribute_values": dict(zip(names, combo)),
                "price_cents": price,
                "original_price_cents": original,
                "sku": variant_sku,
                "stock": DEFAULT_VARIANT_STOCK,
                "image": image,
            }
        )
    return variants


def regenerated_skus(category_name: Optional[str], product_name: Optional[str], variants: Iterable) -> tuple:
    """
    Bulk SKU regeneration: `(base_sku, [variant_sku, ...])`.

    Variant tokens follow the attribute names in sorted order so that the result does not
    depend on how the attribute map was stored.
    """
    prefix = sku_prefix(category_name, product_name)
    variant_skus = []
    for variant in variants:
        values = _get(variant, "attribute_values") or {}
        tokens = [abbreviate(values[key]) for key in sorted(values)]
        variant_skus.append("-".join([prefix] + tokens))
    return prefix, variant_skus


def reconstruct_attributes(product) -> List[dict]:
    """
    Rebuild the form's attribute list for an existing product.

    Saved attributes are flagged `for_variations` when any variant uses them. Products
    saved before attributes were stored get them derived from their variants.
    """
    variants = _get(product, "variants") or []
    saved = _get(product, "attributes") or []
    if saved:
        used = set()
        for variant in variants:
            used.update((_get(variant, "attribute_values") or {}).keys())
        return [
            {"name": a["name"], "options": list(a.get("options") or []), "for_variations": a["name"] in used}
            for a in saved
        ]

    derived: Dict[str, List[str]] = {}
    for variant in variants:
        for name, value in (_get(variant, "attribute_values") or {}).items():
            options = derived.setdefault(name, [])
            if value not in options:
                options.append(value)
    return [{"name": name, "options": options, "for_variations": True} for name, options in derived.items()]


def sync_global_attributes(session: Session, attributes: Sequence) -> List[Attribute]:
    """
    Merge a product's attributes into the global attribute list.

    Unknown attribute names are created; known ones (matched case-insensitively) gain any
    option values they do not already have. Returns the rows that were created or changed.
    """
    existing = list(session.scalars(select(Attribute)))
    by_name = {a.name.lower(): a for a in existing}
    touched: List[Attribute] = []

    for attr in attributes:
        name = (_get(attr, "name") or "").strip()
        options = [o for o in (_get(attr, "options") or []) if o]
        if not name:
            continue
        row = by_name.get(name.lower())
        if row is None:
            row = Attribute(name=name, values=list(dict.fromkeys(options)))
            session.add(row)
            by_name[name.lower()] = row
            touched.append(row)
            logger.info("Created global attribute {} with {} values", name, len(row.values))
            continue
        known = {v.lower() for v in row.values or []}
        new_values = [o for o in options if o.lower() not in known]
        if new_values:
            # Reassign so the JSON column is flagged dirty.
            row.values = list(row.values or []) + list(dict.fromkeys(new_values))
            touched.append(row)
            logger.info("Added {} values to global attribute {}", len(new_values), row.name)
    return touched


def parse_values_input(raw: str) -> List[str]:
    """Split the comma-separated value box of the attribute form."""
    return [v.strip() for v in (raw or "").split(",") if v.strip()]
