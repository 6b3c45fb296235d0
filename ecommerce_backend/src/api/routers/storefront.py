"""
Public storefront reads: catalog browsing, homepage, CMS pages, blog and store chrome.

Listing endpoints load the catalog and filter it in memory; the catalog of a single store
is small enough that this is simpler than composing SQL for every filter combination.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_user
from src.core.errors import NotFoundError
from src.db.models import BlogPost, Brand, Category, Product, Profile, Review
from src.schemas.catalog import (
    BrandOut,
    CategoryNode,
    ProductDetail,
    ProductPage,
    ProductSummary,
    ReviewIn,
    ReviewOut,
)
from src.schemas.content import BlogPostOut, LocationsOut, PageOut, StoreInfo
from src.services import accounts, catalog, content, locations, sections, store_settings

router = APIRouter(tags=["Storefront"])

RELATED_PRODUCTS_LIMIT = 4


def _products(db: Session) -> List[Product]:
    return list(db.scalars(select(Product).order_by(Product.id.desc())))


def _categories(db: Session) -> List[Category]:
    return list(db.scalars(select(Category).order_by(Category.id)))


@router.get("/home", summary="Resolved homepage layout")
def home(db: Session = Depends(get_db)):
    """Hero banners plus every active homepage section, resolved against the catalog."""
    return sections.render_home(db)


@router.get("/products", response_model=ProductPage, summary="Browse products")
def list_products(
    q: Optional[str] = Query(default=None, description="Matches product or category names."),
    category: Optional[str] = Query(default=None, description="Category id, slug or name; includes subcategories."),
    brand: Optional[str] = None,
    on_sale: bool = False,
    featured: bool = False,
    sort: Optional[str] = Query(default=None, description="newest, price_asc, price_desc or name."),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=24, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items = catalog.search_products(
        _products(db),
        _categories(db),
        query=q,
        category=category,
        brand=brand,
        on_sale=on_sale,
        featured=featured,
        sort=sort,
    )
    return catalog.paginate(items, page, page_size)


@router.get("/products/live-search", response_model=List[ProductSummary], summary="Search-as-you-type")
def live_search(q: str = "", db: Session = Depends(get_db)):
    return catalog.live_search(_products(db), q)


@router.get("/products/{key}", response_model=ProductDetail, summary="Product detail by slug or id")
def product_detail(key: str, db: Session = Depends(get_db)):
    product = db.scalar(select(Product).where(Product.slug == key))
    if product is None and key.isdigit():
        product = db.get(Product, int(key))
    if product is None:
        raise NotFoundError(f"Product {key!r} not found.")

    reviews = list(db.scalars(select(Review).where(Review.product_id == product.id)))
    related = []
    if product.category_id is not None:
        related = list(
            db.scalars(
                select(Product)
                .where(Product.category_id == product.category_id, Product.id != product.id)
                .order_by(Product.id.desc())
                .limit(RELATED_PRODUCTS_LIMIT)
            )
        )
    detail = ProductDetail.model_validate(product)
    detail.average_rating = catalog.average_rating(reviews)
    detail.review_count = len(reviews)
    detail.related = [ProductSummary.model_validate(p) for p in related]
    return detail


@router.get("/products/{product_id}/reviews", response_model=List[ReviewOut], summary="Reviews of a product")
def product_reviews(product_id: int, db: Session = Depends(get_db)):
    return list(db.scalars(select(Review).where(Review.product_id == product_id).order_by(Review.created_at.desc())))


@router.post("/products/{product_id}/reviews", response_model=ReviewOut, status_code=201, summary="Review a product")
def create_review(
    product_id: int,
    body: ReviewIn,
    user: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    return accounts.add_review(db, user, product_id, body.rating, body.comment, body.author_name)


@router.get("/categories", response_model=List[CategoryNode], summary="Category tree, flattened depth-first")
def list_categories(db: Session = Depends(get_db)):
    counts = catalog.product_counts(_products(db))
    return [
        CategoryNode.model_validate(node["category"]).model_copy(
            update={"level": node["level"], "item_count": counts.get(node["category"].id, 0)}
        )
        for node in catalog.build_category_tree(_categories(db))
    ]


@router.get("/brands", response_model=List[BrandOut], summary="All brands")
def list_brands(db: Session = Depends(get_db)):
    return list(db.scalars(select(Brand).order_by(Brand.name)))


@router.get("/locations", response_model=LocationsOut, summary="Delivery districts and areas")
def delivery_locations():
    return {"districts": locations.districts(), "areas": locations.DISTRICT_AREA_DATA}


@router.get("/store-info", response_model=StoreInfo, summary="Store identity, navigation and footer")
def get_store_info(db: Session = Depends(get_db)):
    return store_settings.store_info(db)


@router.get("/shipping", summary="Shipping rates in cents")
def get_shipping(db: Session = Depends(get_db)):
    return store_settings.shipping_settings(db)


@router.get("/pages/{slug}", response_model=PageOut, summary="Published CMS page")
def get_page(slug: str, db: Session = Depends(get_db)):
    return content.published_page(db, slug)


@router.get("/blog", response_model=List[BlogPostOut], summary="Blog posts, newest first")
def list_blog_posts(db: Session = Depends(get_db)):
    return list(db.scalars(select(BlogPost).order_by(BlogPost.created_at.desc(), BlogPost.id.desc())))


@router.get("/blog/{slug}", response_model=BlogPostOut, summary="Blog post by slug")
def get_blog_post(slug: str, db: Session = Depends(get_db)):
    return content.blog_post_by_slug(db, slug)
