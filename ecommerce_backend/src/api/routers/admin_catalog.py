"""Admin catalog management: products, variants, categories, brands and attributes."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_admin
from src.core.errors import NotFoundError
from src.db.models import Attribute, Brand, Category, Product
from src.schemas.catalog import (
    AttributeIn,
    AttributeOut,
    BrandIn,
    BrandOut,
    CategoryIn,
    CategoryOut,
    GeneratedVariant,
    ProductForm,
    ProductIn,
    ProductOut,
    SkuRegenerationResult,
    VariantGenerationRequest,
)
from src.services import admin_catalog, catalog

router = APIRouter(prefix="/admin", tags=["Admin: Catalog"], dependencies=[Depends(require_admin)])


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


@router.get("/products", response_model=List[ProductOut], summary="All products, newest first")
def list_products(q: str = "", db: Session = Depends(get_db)):
    products = list(db.scalars(select(Product).order_by(Product.id.desc())))
    return catalog.search_products(products, query=q) if q else products


@router.post("/products", response_model=ProductOut, status_code=201, summary="Create a product")
def create_product(body: ProductIn, db: Session = Depends(get_db)):
    return admin_catalog.save_product(db, body.model_dump())


@router.post("/products/generate-variants", response_model=List[GeneratedVariant], summary="Preview generated variants")
def generate_variants(body: VariantGenerationRequest, db: Session = Depends(get_db)):
    """One variant per combination of the options of attributes flagged for variations."""
    return admin_catalog.preview_variants(db, body.model_dump())


@router.post("/products/regenerate-skus", response_model=SkuRegenerationResult, summary="Rebuild every SKU")
def regenerate_skus(db: Session = Depends(get_db)):
    return {"updated": admin_catalog.regenerate_all_skus(db)}


@router.get("/products/{product_id}", response_model=ProductForm, summary="Product as the edit form sees it")
def get_product_form(product_id: int, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found.")
    return admin_catalog.product_form(product)


@router.put("/products/{product_id}", response_model=ProductOut, summary="Update a product")
def update_product(product_id: int, body: ProductIn, db: Session = Depends(get_db)):
    return admin_catalog.save_product(db, body.model_dump(), product_id)


@router.delete("/products/{product_id}", status_code=204, summary="Delete a product")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    admin_catalog.delete_product(db, product_id)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@router.get("/categories", response_model=List[CategoryOut], summary="All categories")
def list_categories(db: Session = Depends(get_db)):
    return list(db.scalars(select(Category).order_by(Category.id)))


@router.post("/categories", response_model=CategoryOut, status_code=201, summary="Create a category")
def create_category(body: CategoryIn, db: Session = Depends(get_db)):
    return admin_catalog.save_category(db, body.model_dump())


@router.put("/categories/{category_id}", response_model=CategoryOut, summary="Update a category")
def update_category(category_id: int, body: CategoryIn, db: Session = Depends(get_db)):
    return admin_catalog.save_category(db, body.model_dump(), category_id)


@router.delete("/categories/{category_id}", status_code=204, summary="Delete a category")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    admin_catalog.delete_category(db, category_id)


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------


@router.get("/brands", response_model=List[BrandOut], summary="All brands")
def list_brands(db: Session = Depends(get_db)):
    return list(db.scalars(select(Brand).order_by(Brand.name)))


@router.post("/brands", response_model=BrandOut, status_code=201, summary="Create a brand")
def create_brand(body: BrandIn, db: Session = Depends(get_db)):
    return admin_catalog.save_brand(db, body.model_dump())


@router.put("/brands/{brand_id}", response_model=BrandOut, summary="Update a brand")
def update_brand(brand_id: int, body: BrandIn, db: Session = Depends(get_db)):
    return admin_catalog.save_brand(db, body.model_dump(), brand_id)


@router.delete("/brands/{brand_id}", status_code=204, summary="Delete a brand")
def delete_brand(brand_id: int, db: Session = Depends(get_db)):
    admin_catalog.delete_brand(db, brand_id)


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


@router.get("/attributes", response_model=List[AttributeOut], summary="Global attributes")
def list_attributes(db: Session = Depends(get_db)):
    return list(db.scalars(select(Attribute).order_by(Attribute.name)))


@router.post("/attributes", response_model=AttributeOut, status_code=201, summary="Create an attribute")
def create_attribute(body: AttributeIn, db: Session = Depends(get_db)):
    return admin_catalog.save_attribute(db, body.model_dump())


@router.put("/attributes/{attribute_id}", response_model=AttributeOut, summary="Update an attribute")
def update_attribute(attribute_id: int, body: AttributeIn, db: Session = Depends(get_db)):
    return admin_catalog.save_attribute(db, body.model_dump(), attribute_id)


@router.delete("/attributes/{attribute_id}", status_code=204, summary="Delete an attribute")
def delete_attribute(attribute_id: int, db: Session = Depends(get_db)):
    admin_catalog.delete_attribute(db, attribute_id)
