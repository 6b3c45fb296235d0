"""CMS writes: pages, blog posts, banners, homepage sections, coupons and review moderation."""

from __future__ import annotations

from typing import List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.db.models import Banner, BlogPost, Coupon, HomeSection, Page, Review
from src.services.slugs import slugify


def _get_or_404(session: Session, model, ident, label: str):
    row = session.get(model, ident)
    if row is None:
        raise NotFoundError(f"{label} {ident} not found.")
    return row


def _assign(row, data: dict, fields) -> None:
    for field in fields:
        if field in data:
            setattr(row, field, data[field])


def _unique_slug(session: Session, model, slug: str, exclude_id=None) -> str:
    if not slug:
        raise ValidationError("A title that produces a URL slug is required.")
    clash = session.scalar(select(model).where(model.slug == slug))
    if clash is not None and clash.id != exclude_id:
        raise ConflictError(f"The slug {slug!r} is already in use.")
    return slug


def delete_row(session: Session, model, ident, label: str) -> None:
    session.delete(_get_or_404(session, model, ident, label))
    session.commit()
    logger.info("Deleted {} {}", label.lower(), ident)


# ---------------------------------------------------------------------------
# Pages and blog
# ---------------------------------------------------------------------------


def save_page(session: Session, data: dict, page_id: Optional[int] = None) -> Page:
    """Page slugs keep symbols the admin typed; only case and separators are normalised."""
    page = _get_or_404(session, Page, page_id, "Page") if page_id is not None else Page()
    _assign(page, data, ("title", "content", "is_published"))
    page.slug = _unique_slug(session, Page, slugify(data.get("slug") or data.get("title"), strip_symbols=False), page.id)
    session.add(page)
    session.commit()
    return page


def published_page(session: Session, slug: str) -> Page:
    page = session.scalar(select(Page).where(Page.slug == slug, Page.is_published.is_(True)))
    if page is None:
        raise NotFoundError(f"Page {slug!r} not found.")
    return page


def save_blog_post(session: Session, data: dict, post_id: Optional[int] = None) -> BlogPost:
    post = _get_or_404(session, BlogPost, post_id, "Blog post") if post_id is not None else BlogPost()
    _assign(post, data, ("title", "excerpt", "content", "author", "image_url"))
    post.tags = [t.strip() for t in data.get("tags") or [] if t and t.strip()]
    post.slug = _unique_slug(session, BlogPost, slugify(data.get("slug") or data.get("title")), post.id)
    session.add(post)
    session.commit()
    return post


def blog_post_by_slug(session: Session, slug: str) -> BlogPost:
    post = session.scalar(select(BlogPost).where(BlogPost.slug == slug))
    if post is None:
        raise NotFoundError(f"Blog post {slug!r} not found.")
    return post


# ---------------------------------------------------------------------------
# Banners and homepage sections
# ---------------------------------------------------------------------------

BANNER_FIELDS = ("type", "title", "subtitle", "image_url", "link", "sort_order", "is_active")
SECTION_FIELDS = (
    "title",
    "type",
    "filter_type",
    "filter_value",
    "sort_order",
    "is_active",
    "banner",
    "grid_banners",
    "category_ids",
    "brand_names",
)


def save_banner(session: Session, data: dict, banner_id: Optional[int] = None) -> Banner:
    banner = _get_or_404(session, Banner, banner_id, "Banner") if banner_id is not None else Banner()
    _assign(banner, data, BANNER_FIELDS)
    session.add(banner)
    session.commit()
    return banner


def save_section(session: Session, data: dict, section_id: Optional[int] = None) -> HomeSection:
    section = _get_or_404(session, HomeSection, section_id, "Section") if section_id is not None else HomeSection()
    _assign(section, data, SECTION_FIELDS)
    if section_id is None and "sort_order" not in data:
        last = session.scalars(select(HomeSection.sort_order).order_by(HomeSection.sort_order.desc())).first()
        section.sort_order = (last or 0) + 1
    session.add(section)
    session.commit()
    return section


def reorder_sections(session: Session, ids: List[int]) -> List[HomeSection]:
    """Give sections `sort_order` 0..n-1 in the order of `ids`."""
    sections = {s.id: s for s in session.scalars(select(HomeSection))}
    missing = [i for i in ids if i not in sections]
    if missing:
        raise NotFoundError(f"Sections not found: {missing}.")
    for position, section_id in enumerate(ids):
        sections[section_id].sort_order = position
    session.commit()
    return sorted(sections.values(), key=lambda s: s.sort_order)


# ---------------------------------------------------------------------------
# Coupons and reviews
# ---------------------------------------------------------------------------

COUPON_FIELDS = ("code", "discount_type", "discount_value", "minimum_spend_cents", "expiry_date", "status", "auto_apply")


def save_coupon(session: Session, data: dict, coupon_id: Optional[int] = None) -> Coupon:
    coupon = _get_or_404(session, Coupon, coupon_id, "Coupon") if coupon_id is not None else Coupon()
    if data.get("discount_type") == "Percentage" and data.get("discount_value", 0) > 100:
        raise ValidationError("A percentage discount cannot exceed 100.")
    clash = session.scalar(select(Coupon).where(Coupon.code == data.get("code")))
    if clash is not None and clash.id != coupon.id:
        raise ConflictError(f"Coupon code {data.get('code')} already exists.")
    _assign(coupon, data, COUPON_FIELDS)
    session.add(coupon)
    session.commit()
    return coupon


def reply_to_review(session: Session, review_id: int, reply: str) -> Review:
    review = _get_or_404(session, Review, review_id, "Review")
    review.reply = reply.strip() or None
    session.commit()
    return review
