"""Customer accounts: signup, login, roles and self-service data (addresses, wishlist, reviews)."""

from __future__ import annotations

import uuid
from typing import List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.config import get_settings
from src.core.errors import AuthError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from src.core.security import create_access_token, hash_password, verify_password
from src.db.models import ROLES, Address, Product, Profile, Review, WishlistItem
from src.services.locations import validate_location


def _normalise_email(email: str) -> str:
    return (email or "").strip().lower()


def is_super_admin(email: Optional[str]) -> bool:
    configured = get_settings().super_admin_email
    return bool(configured) and _normalise_email(email) == _normalise_email(configured)


def is_admin(profile: Optional[Profile]) -> bool:
    """Admins are profiles with the admin role, plus the configured super-admin email."""
    return profile is not None and (profile.role == "admin" or is_super_admin(profile.email))


# PUBLIC_INTERFACE
def signup(session: Session, email: str, password: str, full_name: str = "") -> Profile:
    email = _normalise_email(email)
    if session.scalar(select(Profile).where(Profile.email == email)) is not None:
        raise ConflictError("An account with this email already exists.")
    profile = Profile(
        email=email,
        full_name=(full_name or "").strip() or None,
        role="admin" if is_super_admin(email) else "customer",
        password_hash=hash_password(password),
    )
    session.add(profile)
    session.commit()
    logger.info("New {} account {}", profile.role, profile.email)
    return profile


# PUBLIC_INTERFACE
def login(session: Session, email: str, password: str) -> dict:
    """Verify credentials and issue a session token."""
    profile = session.scalar(select(Profile).where(Profile.email == _normalise_email(email)))
    if profile is None or not verify_password(password, profile.password_hash):
        raise AuthError("Invalid email or password.")
    token = create_access_token(str(profile.id), {"role": profile.role})
    return {"access_token": token, "token_type": "bearer", "is_admin": is_admin(profile)}


def get_profile(session: Session, profile_id) -> Profile:
    try:
        key = profile_id if isinstance(profile_id, uuid.UUID) else uuid.UUID(str(profile_id))
    except ValueError:
        raise NotFoundError("User not found.") from None
    profile = session.get(Profile, key)
    if profile is None:
        raise NotFoundError("User not found.")
    return profile


def set_role(session: Session, profile_id, role: str, acting: Optional[Profile] = None) -> Profile:
    if role not in ROLES:
        raise ValidationError(f"Unknown role {role!r}.")
    profile = get_profile(session, profile_id)
    if is_super_admin(profile.email) and role != "admin":
        raise PermissionDeniedError("The super admin cannot be demoted.")
    profile.role = role
    session.commit()
    logger.info("{} set role of {} to {}", acting.email if acting else "system", profile.email, role)
    return profile


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------


def list_addresses(session: Session, user: Profile) -> List[Address]:
    return list(session.scalars(select(Address).where(Address.user_id == user.id).order_by(Address.id)))


def _own_address(session: Session, user: Profile, address_id: int) -> Address:
    address = session.get(Address, address_id)
    if address is None or address.user_id != user.id:
        raise NotFoundError("Address not found.")
    return address


def save_address(session: Session, user: Profile, data: dict, address_id: Optional[int] = None) -> Address:
    if data.get("district"):
        validate_location(data["district"], data.get("area"))
    address = _own_address(session, user, address_id) if address_id is not None else Address(user_id=user.id)
    for key, value in data.items():
        setattr(address, key, value)
    session.add(address)
    session.commit()
    return address


def delete_address(session: Session, user: Profile, address_id: int) -> None:
    session.delete(_own_address(session, user, address_id))
    session.commit()


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------


def wishlist_products(session: Session, user: Profile) -> List[Product]:
    return list(
        session.scalars(
            select(Product)
            .join(WishlistItem, WishlistItem.product_id == Product.id)
            .where(WishlistItem.user_id == user.id)
            .order_by(WishlistItem.id)
        )
    )


def toggle_wishlist(session: Session, user: Profile, product_id: int) -> bool:
    """Add the product when absent, remove it when present. Returns whether it is now listed."""
    if session.get(Product, product_id) is None:
        raise NotFoundError(f"Product {product_id} not found.")
    existing = session.scalar(
        select(WishlistItem).where(WishlistItem.user_id == user.id, WishlistItem.product_id == product_id)
    )
    if existing is not None:
        session.delete(existing)
        session.commit()
        return False
    session.add(WishlistItem(user_id=user.id, product_id=product_id))
    session.commit()
    return True


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


def add_review(session: Session, user: Profile, product_id: int, rating: int, comment: Optional[str], author_name: Optional[str] = None) -> Review:
    if session.get(Product, product_id) is None:
        raise NotFoundError(f"Product {product_id} not found.")
    if not 1 <= rating <= 5:
        raise ValidationError("Ratings go from 1 to 5.")
    review = Review(
        product_id=product_id,
        user_id=user.id,
        author_name=author_name or user.full_name or user.email.split("@")[0],
        rating=rating,
        comment=comment,
    )
    session.add(review)
    session.commit()
    return review
