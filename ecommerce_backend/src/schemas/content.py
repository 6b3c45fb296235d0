"""
CMS and storefront-chrome schemas: banners, homepage sections, pages, blog posts and the
store-wide settings edited from the admin console.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

BannerType = Literal["slider", "hero_grid", "home_banner", "right_top", "right_bottom"]
FilterType = Literal["all", "category", "sale", "featured"]


class BannerIn(BaseModel):
    type: BannerType
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    link: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True


class BannerOut(BannerIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class SectionBanner(BaseModel):
    image_url: str = ""
    link: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None


class GridBanner(SectionBanner):
    category_id: Optional[int] = None


class HomeSectionIn(BaseModel):
    title: str = ""
    type: str = Field(..., min_length=1, examples=["tabbed-slider", "category-grid", "brand-tabs"])
    filter_type: FilterType = "all"
    filter_value: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    banner: Optional[SectionBanner] = None
    grid_banners: Optional[List[GridBanner]] = None
    category_ids: Optional[List[int]] = None
    brand_names: Optional[List[str]] = None


class HomeSectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: str
    filter_type: str
    filter_value: Optional[str] = None
    sort_order: int
    is_active: bool
    banner: Optional[Dict[str, Any]] = None
    grid_banners: Optional[List[Dict[str, Any]]] = None
    category_ids: Optional[List[int]] = None
    brand_names: Optional[List[str]] = None


class SectionOrder(BaseModel):
    """New `sort_order` for each section id, as produced by the drag-and-drop list."""

    ids: List[int]


class PageIn(BaseModel):
    title: str = Field(..., min_length=1)
    slug: Optional[str] = None
    content: Optional[str] = None
    is_published: bool = True


class PageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    content: Optional[str] = None
    is_published: bool
    created_at: Optional[datetime] = None


class BlogPostIn(BaseModel):
    title: str = Field(..., min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class BlogPostOut(BlogPostIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class ShippingSettings(BaseModel):
    inside_dhaka_cents: int = Field(..., ge=0)
    outside_dhaka_cents: int = Field(..., ge=0)


class Socials(BaseModel):
    facebook: str = ""
    instagram: str = ""


class FloatingWidget(BaseModel):
    is_visible: bool = False
    support_image: str = ""
    whatsapp: str = ""
    messenger: str = ""
    phone: str = ""
    facebook: str = ""
    instagram: str = ""


class AppLinks(BaseModel):
    ios: str = ""
    android: str = ""


class FooterLink(BaseModel):
    label: str
    url: str


class NavItem(BaseModel):
    id: str
    label: str
    url: str = ""
    type: Literal["link", "dropdown"] = "link"
    children: List["NavItem"] = Field(default_factory=list)


class StoreInfo(BaseModel):
    name: str = ""
    logo_url: str = ""
    favicon_url: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    meta_title: str = ""
    meta_description: str = ""
    socials: Socials = Field(default_factory=Socials)
    floating_widget: FloatingWidget = Field(default_factory=FloatingWidget)
    footer_description: str = ""
    app_links: AppLinks = Field(default_factory=AppLinks)
    footer_links: List[FooterLink] = Field(default_factory=list)
    navigation: List[NavItem] = Field(default_factory=list)


NavItem.model_rebuild()


class LocationsOut(BaseModel):
    districts: List[str]
    areas: Dict[str, List[str]]
