"""
SQLAlchemy ORM models for the storefront and admin console.

Notes:
- Money columns are integer cents.
- List/map-shaped data that is only ever read and written whole (image lists, attribute
  option lists, section layout payloads, settings values) lives in JSON columns.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, BigIntId, JSONType

ORDER_STATUSES = ("Pending", "Processing", "Shipped", "Delivered", "Cancelled")
BANNER_TYPES = ("slider", "hero_grid", "home_banner", "right_top", "right_bottom")
DISCOUNT_TYPES = ("Fixed", "Percentage")
COUPON_STATUSES = ("Active", "Inactive")
ROLES = ("admin", "customer")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _in(values: tuple) -> str:
    return ", ".join(f"'{v}'" for v in values)


class CreatedAtMixin:
    """Creation timestamp shared by every content table."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )


class Profile(Base, CreatedAtMixin):
    """profiles table (customers and admins)."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="customer", server_default="customer")
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    addresses: Mapped[List["Address"]] = relationship("Address", back_populates="user", cascade="all, delete-orphan")
    orders: Mapped[List["Order"]] = relationship("Order", back_populates="user")

    __table_args__ = (CheckConstraint(f"role in ({_in(ROLES)})", name="role"),)


class Category(Base, CreatedAtMixin):
    """categories table; `parent_id` builds the category tree."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    products: Mapped[List["Product"]] = relationship("Product", back_populates="category")


class Brand(Base, CreatedAtMixin):
    """brands table."""

    __tablename__ = "brands"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    products: Mapped[List["Product"]] = relationship("Product", back_populates="brand")


class Attribute(Base, CreatedAtMixin):
    """attributes table: global attribute names with their known option values."""

    __tablename__ = "attributes"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    values: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)


class Product(Base, CreatedAtMixin):
    """products table."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    sku: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    original_price_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    brand_id: Mapped[Optional[int]] = mapped_column(ForeignKey("brands.id", ondelete="SET NULL"), nullable=True)

    unit: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    images: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    badge: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    # [{"name": "Color", "options": ["Red", "Blue"]}, ...]
    attributes: Mapped[List[dict]] = mapped_column(JSONType, nullable=False, default=list)

    category: Mapped[Optional[Category]] = relationship("Category", back_populates="products", lazy="selectin")
    brand: Mapped[Optional[Brand]] = relationship("Brand", back_populates="products", lazy="selectin")
    variants: Mapped[List["ProductVariant"]] = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProductVariant.id",
    )

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="price_cents"),
        CheckConstraint("original_price_cents IS NULL OR original_price_cents >= 0", name="original_price_cents"),
    )

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None

    @property
    def brand_name(self) -> Optional[str]:
        return self.brand.name if self.brand else None


class ProductVariant(Base):
    """product_variants table: one purchasable attribute combination."""

    __tablename__ = "product_variants"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    sku: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    attribute_values: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    original_price_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=100, server_default="100")
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    product: Mapped[Product] = relationship("Product", back_populates="variants")

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="price_cents"),
        CheckConstraint("stock >= 0", name="stock"),
    )

    @property
    def name(self) -> str:
        return " / ".join(str(v) for v in (self.attribute_values or {}).values())


class Order(Base, CreatedAtMixin):
    """orders table; customer details are captured at checkout time."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_district: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_area: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    shipping_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    discount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    status: Mapped[str] = mapped_column(Text, nullable=False, default="Pending", server_default="Pending")
    coupon_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user: Mapped[Optional[Profile]] = relationship("Profile", back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )

    __table_args__ = (
        CheckConstraint(f"status in ({_in(ORDER_STATUSES)})", name="status"),
        CheckConstraint("subtotal_cents >= 0", name="subtotal_cents"),
        CheckConstraint("shipping_cents >= 0", name="shipping_cents"),
        CheckConstraint("discount_cents >= 0", name="discount_cents"),
        CheckConstraint("total_cents >= 0", name="total_cents"),
    )


class OrderItem(Base):
    """order_items table: a snapshot of the purchased product/variant."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)

    product_id: Mapped[Optional[int]] = mapped_column(ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    variant_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    sku: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    product_name: Mapped[str] = mapped_column(Text, nullable=False)
    variant_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped[Order] = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity"),
        CheckConstraint("unit_price_cents >= 0", name="unit_price_cents"),
        CheckConstraint("total_price_cents >= 0", name="total_price_cents"),
    )


class Coupon(Base, CreatedAtMixin):
    """coupons table. `discount_value` is cents for Fixed, a percentage for Percentage."""

    __tablename__ = "coupons"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    discount_type: Mapped[str] = mapped_column(Text, nullable=False)
    discount_value: Mapped[int] = mapped_column(Integer, nullable=False)
    minimum_spend_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="Active", server_default="Active")
    auto_apply: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    __table_args__ = (
        CheckConstraint(f"discount_type in ({_in(DISCOUNT_TYPES)})", name="discount_type"),
        CheckConstraint(f"status in ({_in(COUPON_STATUSES)})", name="status"),
        CheckConstraint("discount_value >= 0", name="discount_value"),
    )


class Banner(Base, CreatedAtMixin):
    """banners table."""

    __tablename__ = "banners"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subtitle: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")

    __table_args__ = (CheckConstraint(f"type in ({_in(BANNER_TYPES)})", name="type"),)


class HomeSection(Base, CreatedAtMixin):
    """home_sections table: one block of the homepage layout."""

    __tablename__ = "home_sections"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False)
    filter_type: Mapped[str] = mapped_column(Text, nullable=False, default="all", server_default="all")
    filter_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")

    banner: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    grid_banners: Mapped[Optional[List[dict]]] = mapped_column(JSONType, nullable=True)
    category_ids: Mapped[Optional[List[int]]] = mapped_column(JSONType, nullable=True)
    brand_names: Mapped[Optional[List[str]]] = mapped_column(JSONType, nullable=True)


class Page(Base, CreatedAtMixin):
    """pages table (CMS pages served at /<slug>)."""

    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")


class BlogPost(Base, CreatedAtMixin):
    """blog_posts table."""

    __tablename__ = "blog_posts"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)


class Review(Base, CreatedAtMixin):
    """reviews table."""

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    author_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reply: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    product: Mapped[Product] = relationship("Product", lazy="selectin")

    __table_args__ = (CheckConstraint("rating >= 1 AND rating <= 5", name="rating"),)

    @property
    def product_name(self) -> Optional[str]:
        return self.product.name if self.product else None


class WishlistItem(Base, CreatedAtMixin):
    """wishlist table."""

    __tablename__ = "wishlist"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "product_id", name="wishlist_user_id_product_id_key"),)


class Address(Base, CreatedAtMixin):
    """addresses table (a customer's saved shipping addresses)."""

    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address_line: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    district: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    area: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user: Mapped[Profile] = relationship("Profile", back_populates="addresses")


class Setting(Base):
    """settings table: JSON values keyed by name (shipping, store info, media history)."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[Any] = mapped_column(JSONType, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, server_default=func.now(), nullable=False
    )
