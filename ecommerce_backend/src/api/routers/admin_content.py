"""Admin CMS: coupons, banners, homepage sections, pages, blog posts and reviews."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_admin
from src.db.models import Banner, BlogPost, Coupon, HomeSection, Page, Review
from src.schemas.catalog import ReviewOut, ReviewReply
from src.schemas.content import (
    BannerIn,
    BannerOut,
    BlogPostIn,
    BlogPostOut,
    HomeSectionIn,
    HomeSectionOut,
    PageIn,
    PageOut,
    SectionOrder,
)
from src.schemas.promotions import CouponIn, CouponOut
from src.services import content

router = APIRouter(prefix="/admin", tags=["Admin: Content"], dependencies=[Depends(require_admin)])


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------


@router.get("/coupons", response_model=List[CouponOut], summary="All coupons")
def list_coupons(db: Session = Depends(get_db)):
    return list(db.scalars(select(Coupon).order_by(Coupon.id.desc())))


@router.post("/coupons", response_model=CouponOut, status_code=201, summary="Create a coupon")
def create_coupon(body: CouponIn, db: Session = Depends(get_db)):
    return content.save_coupon(db, body.model_dump())


@router.put("/coupons/{coupon_id}", response_model=CouponOut, summary="Update a coupon")
def update_coupon(coupon_id: int, body: CouponIn, db: Session = Depends(get_db)):
    return content.save_coupon(db, body.model_dump(), coupon_id)


@router.delete("/coupons/{coupon_id}", status_code=204, summary="Delete a coupon")
def delete_coupon(coupon_id: int, db: Session = Depends(get_db)):
    content.delete_row(db, Coupon, coupon_id, "Coupon")


# ---------------------------------------------------------------------------
# Banners
# ---------------------------------------------------------------------------


@router.get("/banners", response_model=List[BannerOut], summary="All banners")
def list_banners(db: Session = Depends(get_db)):
    return list(db.scalars(select(Banner).order_by(Banner.type, Banner.sort_order)))


@router.post("/banners", response_model=BannerOut, status_code=201, summary="Create a banner")
def create_banner(body: BannerIn, db: Session = Depends(get_db)):
    return content.save_banner(db, body.model_dump())


@router.put("/banners/{banner_id}", response_model=BannerOut, summary="Update a banner")
def update_banner(banner_id: int, body: BannerIn, db: Session = Depends(get_db)):
    return content.save_banner(db, body.model_dump(), banner_id)


@router.delete("/banners/{banner_id}", status_code=204, summary="Delete a banner")
def delete_banner(banner_id: int, db: Session = Depends(get_db)):
    content.delete_row(db, Banner, banner_id, "Banner")


# ---------------------------------------------------------------------------
# Homepage sections
# ---------------------------------------------------------------------------


@router.get("/sections", response_model=List[HomeSectionOut], summary="Homepage sections in display order")
def list_sections(db: Session = Depends(get_db)):
    return list(db.scalars(select(HomeSection).order_by(HomeSection.sort_order, HomeSection.id)))


@router.post("/sections", response_model=HomeSectionOut, status_code=201, summary="Add a homepage section")
def create_section(body: HomeSectionIn, db: Session = Depends(get_db)):
    return content.save_section(db, body.model_dump(exclude_unset=True))


@router.put("/sections/order", response_model=List[HomeSectionOut], summary="Reorder homepage sections")
def reorder_sections(body: SectionOrder, db: Session = Depends(get_db)):
    return content.reorder_sections(db, body.ids)


@router.put("/sections/{section_id}", response_model=HomeSectionOut, summary="Update a homepage section")
def update_section(section_id: int, body: HomeSectionIn, db: Session = Depends(get_db)):
    return content.save_section(db, body.model_dump(), section_id)


@router.delete("/sections/{section_id}", status_code=204, summary="Delete a homepage section")
def delete_section(section_id: int, db: Session = Depends(get_db)):
    content.delete_row(db, HomeSection, section_id, "Section")


# ---------------------------------------------------------------------------
# Pages and blog
# ---------------------------------------------------------------------------


@router.get("/pages", response_model=List[PageOut], summary="All pages, published or not")
def list_pages(db: Session = Depends(get_db)):
    return list(db.scalars(select(Page).order_by(Page.title)))


@router.post("/pages", response_model=PageOut, status_code=201, summary="Create a page")
def create_page(body: PageIn, db: Session = Depends(get_db)):
    return content.save_page(db, body.model_dump())


@router.put("/pages/{page_id}", response_model=PageOut, summary="Update a page")
def update_page(page_id: int, body: PageIn, db: Session = Depends(get_db)):
    return content.save_page(db, body.model_dump(), page_id)


@router.delete("/pages/{page_id}", status_code=204, summary="Delete a page")
def delete_page(page_id: int, db: Session = Depends(get_db)):
    content.delete_row(db, Page, page_id, "Page")


@router.get("/blog", response_model=List[BlogPostOut], summary="All blog posts")
def list_blog_posts(db: Session = Depends(get_db)):
    return list(db.scalars(select(BlogPost).order_by(BlogPost.id.desc())))


@router.post("/blog", response_model=BlogPostOut, status_code=201, summary="Create a blog post")
def create_blog_post(body: BlogPostIn, db: Session = Depends(get_db)):
    return content.save_blog_post(db, body.model_dump())


@router.put("/blog/{post_id}", response_model=BlogPostOut, summary="Update a blog post")
def update_blog_post(post_id: int, body: BlogPostIn, db: Session = Depends(get_db)):
    return content.save_blog_post(db, body.model_dump(), post_id)


@router.delete("/blog/{post_id}", status_code=204, summary="Delete a blog post")
def delete_blog_post(post_id: int, db: Session = Depends(get_db)):
    content.delete_row(db, BlogPost, post_id, "Blog post")


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@router.get("/reviews", response_model=List[ReviewOut], summary="All reviews, newest first")
def list_reviews(db: Session = Depends(get_db)):
    return list(db.scalars(select(Review).order_by(Review.created_at.desc(), Review.id.desc())))


@router.put("/reviews/{review_id}/reply", response_model=ReviewOut, summary="Reply to a review")
def reply_to_review(review_id: int, body: ReviewReply, db: Session = Depends(get_db)):
    return content.reply_to_review(db, review_id, body.reply)


@router.delete("/reviews/{review_id}", status_code=204, summary="Delete a review")
def delete_review(review_id: int, db: Session = Depends(get_db)):
    content.delete_row(db, Review, review_id, "Review")
