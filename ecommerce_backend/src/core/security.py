"""Password hashing and session tokens."""

import time
from typing import Any, Optional

import bcrypt
from authlib.jose import JoseError, jwt

from src.core.config import get_settings
from src.core.errors import AuthError, ValidationError

_BCRYPT_MAX_BYTES = 72
_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt, returning the salted hash as text."""
    raw = password.encode("utf-8")
    if len(raw) > _BCRYPT_MAX_BYTES:
        raise ValidationError("Password must be at most 72 bytes long.")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("ascii")


def verify_password(password: str, stored: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > _BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, (stored or "").encode("ascii"))
    except ValueError:
        return False


def create_access_token(subject: str, claims: Optional[dict[str, Any]] = None, expires_in: Optional[int] = None) -> str:
    """Sign an HS256 session token for `subject` (the profile id)."""
    settings = get_settings()
    now = int(time.time())
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else settings.jwt_expires_seconds),
        **(claims or {}),
    }
    token = jwt.encode({"alg": _ALGORITHM}, payload, settings.jwt_secret)
    return token.decode("ascii")


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify a session token and return its claims, raising `AuthError` when invalid or expired."""
    try:
        claims = jwt.decode(token, get_settings().jwt_secret)
        claims.validate(now=int(time.time()), leeway=0)
    except JoseError as exc:
        raise AuthError("Invalid or expired session token.") from exc
    except ValueError as exc:
        raise AuthError("Malformed session token.") from exc
    return dict(claims)
