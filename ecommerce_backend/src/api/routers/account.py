"""Signed-in customer self-service: order history, saved addresses and wishlist."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_user
from src.db.models import Order, Profile
from src.schemas.accounts import AddressIn, AddressOut
from src.schemas.catalog import ProductSummary
from src.schemas.orders import OrderOut
from src.services import accounts

router = APIRouter(prefix="/account", tags=["Account"])


@router.get("/orders", response_model=List[OrderOut], summary="My orders, newest first")
def my_orders(user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return list(db.scalars(select(Order).where(Order.user_id == user.id).order_by(Order.created_at.desc(), Order.id.desc())))


@router.get("/addresses", response_model=List[AddressOut], summary="My saved addresses")
def my_addresses(user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return accounts.list_addresses(db, user)


@router.post("/addresses", response_model=AddressOut, status_code=201, summary="Save an address")
def create_address(body: AddressIn, user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return accounts.save_address(db, user, body.model_dump())


@router.put("/addresses/{address_id}", response_model=AddressOut, summary="Update an address")
def update_address(address_id: int, body: AddressIn, user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return accounts.save_address(db, user, body.model_dump(), address_id)


@router.delete("/addresses/{address_id}", status_code=204, summary="Delete an address")
def delete_address(address_id: int, user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    accounts.delete_address(db, user, address_id)


@router.get("/wishlist", response_model=List[ProductSummary], summary="My wishlist")
def my_wishlist(user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return accounts.wishlist_products(db, user)


@router.post("/wishlist/{product_id}", summary="Add or remove a wishlist product")
def toggle_wishlist(product_id: int, user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return {"product_id": product_id, "in_wishlist": accounts.toggle_wishlist(db, user, product_id)}
