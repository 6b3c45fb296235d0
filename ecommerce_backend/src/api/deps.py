"""Shared FastAPI dependencies: database session and the signed-in user."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.core.errors import AuthError, NotFoundError, PermissionDeniedError
from src.core.security import decode_access_token
from src.db.models import Profile
from src.db.session import get_db
from src.services.accounts import get_profile, is_admin

bearer_scheme = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_current_user", "require_user", "require_admin"]


# PUBLIC_INTERFACE
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    """The profile behind the bearer token, or None for anonymous requests."""
    if credentials is None:
        return None
    claims = decode_access_token(credentials.credentials)
    try:
        return get_profile(db, claims.get("sub"))
    except NotFoundError:
        raise AuthError("The account for this session no longer exists.") from None


# PUBLIC_INTERFACE
def require_user(user: Optional[Profile] = Depends(get_current_user)) -> Profile:
    if user is None:
        raise AuthError("Please sign in to continue.")
    return user


# PUBLIC_INTERFACE
def require_admin(user: Profile = Depends(require_user)) -> Profile:
    if not is_admin(user):
        raise PermissionDeniedError("Administrator access required.")
    return user
