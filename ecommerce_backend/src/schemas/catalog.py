"""
Catalog API schemas.

Prices are integer cents throughout. Admin writes take a base price and an optional sale
price; reads expose the resolved selling price and, for discounted items, the original price.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.services import pricing


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Categories, brands, attributes
# ---------------------------------------------------------------------------


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1)
    parent_id: Optional[int] = None
    image_url: Optional[str] = None


class CategoryOut(ORMModel):
    id: int
    name: str
    slug: str
    image_url: Optional[str] = None
    parent_id: Optional[int] = None
    item_count: int = 0


class CategoryNode(CategoryOut):
    level: int = 0


class BrandIn(BaseModel):
    name: str = Field(..., min_length=1)
    slug: Optional[str] = Field(default=None, description="Derived from the name when omitted.")
    logo_url: Optional[str] = None


class BrandOut(ORMModel):
    id: int
    name: str
    slug: str
    logo_url: Optional[str] = None


class AttributeIn(BaseModel):
    name: str = Field(..., min_length=1)
    values: Optional[List[str]] = None
    values_input: Optional[str] = Field(
        default=None, description="Comma-separated values, as typed into the admin form.", examples=["Red, Green, Blue"]
    )


class AttributeOut(ORMModel):
    id: int
    name: str
    values: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Products and variants
# ---------------------------------------------------------------------------


class ProductAttribute(BaseModel):
    name: str = Field(..., min_length=1)
    options: List[str] = Field(default_factory=list)
    for_variations: bool = False


class VariantIn(BaseModel):
    id: Optional[int] = Field(default=None, description="Existing variant id; omitted for new variants.")
    attribute_values: Dict[str, str] = Field(default_factory=dict)
    price_cents: int = Field(..., ge=0)
    original_price_cents: Optional[int] = Field(default=None, ge=0)
    sku: Optional[str] = None
    stock: int = Field(default=100, ge=0)
    image: Optional[str] = None


class VariantOut(ORMModel):
    id: int
    attribute_values: Dict[str, str]
    price_cents: int
    original_price_cents: Optional[int] = None
    sku: Optional[str] = None
    stock: int
    image: Optional[str] = None
    name: str


class ProductIn(BaseModel):
    """Admin product form."""

    name: str = Field(..., min_length=1)
    base_price_cents: int = Field(..., ge=0)
    sale_price_cents: Optional[int] = Field(default=None, ge=0, description="Applies only when below the base price.")
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    unit: Optional[str] = None
    sku: Optional[str] = None
    badge: Optional[str] = None
    is_featured: bool = False
    attributes: List[ProductAttribute] = Field(default_factory=list)
    variants: List[VariantIn] = Field(default_factory=list)


class ProductSummary(ORMModel):
    id: int
    name: str
    slug: str
    sku: Optional[str] = None
    price_cents: int
    original_price_cents: Optional[int] = None
    images: List[str] = Field(default_factory=list)
    unit: Optional[str] = None
    badge: Optional[str] = None
    is_featured: bool = False
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    brand_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def on_sale(self) -> bool:
        return pricing.is_on_sale(self.price_cents, self.original_price_cents)

    @computed_field
    @property
    def display_price(self) -> Dict[str, Optional[int]]:
        return pricing.display_price(self.price_cents, self.original_price_cents)


class ProductOut(ProductSummary):
    brand_id: Optional[int] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    attributes: List[dict] = Field(default_factory=list)
    variants: List[VariantOut] = Field(default_factory=list)


class ProductDetail(ProductOut):
    average_rating: float = 0.0
    review_count: int = 0
    related: List[ProductSummary] = Field(default_factory=list)


class ProductForm(BaseModel):
    """An existing product reshaped for the edit form."""

    name: str
    base_price_cents: int
    sale_price_cents: Optional[int] = None
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    unit: Optional[str] = None
    sku: Optional[str] = None
    badge: Optional[str] = None
    is_featured: bool = False
    attributes: List[ProductAttribute] = Field(default_factory=list)
    variants: List[VariantOut] = Field(default_factory=list)


class ProductPage(BaseModel):
    items: List[ProductSummary]
    total: int
    page: int
    page_size: int
    pages: int


class VariantGenerationRequest(BaseModel):
    name: Optional[str] = None
    base_price_cents: int = Field(default=0, ge=0)
    sale_price_cents: Optional[int] = Field(default=None, ge=0)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    images: List[str] = Field(default_factory=list)
    attributes: List[ProductAttribute] = Field(default_factory=list)


class GeneratedVariant(BaseModel):
    attribute_values: Dict[str, str]
    price_cents: int
    original_price_cents: Optional[int] = None
    sku: str
    stock: int
    image: Optional[str] = None


class SkuRegenerationResult(BaseModel):
    updated: int


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class ReviewIn(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    author_name: Optional[str] = None


class ReviewReply(BaseModel):
    reply: str = ""


class ReviewOut(ORMModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    author_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    reply: Optional[str] = None
    created_at: Optional[datetime] = None
