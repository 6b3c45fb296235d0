"""URL slug helpers shared by catalog and CMS writes."""

import re
from typing import Optional

_SYMBOLS = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(text: Optional[str], strip_symbols: bool = True) -> str:
    """
    Lowercase `text` and collapse whitespace, underscores and hyphens into single hyphens.

    With `strip_symbols` punctuation is dropped first ("Men's T-Shirt!" -> "mens-t-shirt").
    Leading and trailing hyphens are removed.
    """
    slug = (text or "").lower().strip()
    if strip_symbols:
        slug = _SYMBOLS.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def category_slug(name: str, parent_slug: Optional[str] = None) -> str:
    """Child categories carry their parent's slug as a prefix so that slugs stay unique."""
    slug = slugify(name, strip_symbols=False)
    return f"{parent_slug}-{slug}" if parent_slug else slug
