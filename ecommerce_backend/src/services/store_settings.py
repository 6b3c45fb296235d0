"""
Key/value store settings kept in the `settings` table.

Three keys are used:
- `shipping_settings`: `{"inside_dhaka_cents": int, "outside_dhaka_cents": int}`
- `store_info`: store identity, contact details and storefront chrome (navigation, footer, widget)
- `media_history`: uploaded image records, newest first
"""

from __future__ import annotations

import copy
from typing import Any, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.config import get_settings
from src.db.models import Setting

SHIPPING_KEY = "shipping_settings"
STORE_INFO_KEY = "store_info"
MEDIA_HISTORY_KEY = "media_history"


def get_setting(session: Session, key: str, default: Any = None) -> Any:
    row = session.get(Setting, key)
    if row is None or row.value is None:
        return default
    return row.value


def put_setting(session: Session, key: str, value: Any) -> Setting:
    """Upsert a setting; the caller commits."""
    row = session.get(Setting, key)
    if row is None:
        row = Setting(key=key, value=value)
        session.add(row)
    else:
        row.value = value
    return row


# PUBLIC_INTERFACE
def shipping_settings(session: Session) -> dict:
    """Current shipping rates in cents, falling back to the configured defaults."""
    settings = get_settings()
    stored = get_setting(session, SHIPPING_KEY, {}) or {}
    return {
        "inside_dhaka_cents": int(stored.get("inside_dhaka_cents", settings.shipping_inside_dhaka_cents)),
        "outside_dhaka_cents": int(stored.get("outside_dhaka_cents", settings.shipping_outside_dhaka_cents)),
    }


def default_store_info() -> dict:
    settings = get_settings()
    return {
        "name": settings.store_name,
        "logo_url": "",
        "favicon_url": "",
        "address": settings.store_address,
        "phone": "",
        "email": "",
        "meta_title": settings.store_name,
        "meta_description": "",
        "socials": {"facebook": "", "instagram": ""},
        "floating_widget": {
            "is_visible": False,
            "support_image": "",
            "whatsapp": "",
            "messenger": "",
            "phone": "",
            "facebook": "",
            "instagram": "",
        },
        "footer_description": "",
        "app_links": {"ios": "", "android": ""},
        "footer_links": [],
        "navigation": [],
    }


def _merge(defaults: dict, stored: dict) -> dict:
    merged = copy.deepcopy(defaults)
    for key, value in stored.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# PUBLIC_INTERFACE
def store_info(session: Session) -> dict:
    """Stored store info layered over the defaults, so older rows gain new fields."""
    stored = get_setting(session, STORE_INFO_KEY, {}) or {}
    return _merge(default_store_info(), stored)


def store_name(session: Session) -> str:
    return store_info(session).get("name") or get_settings().store_name


# ---------------------------------------------------------------------------
# Media history
# ---------------------------------------------------------------------------


def media_history(session: Session) -> List[dict]:
    history = get_setting(session, MEDIA_HISTORY_KEY, [])
    return list(history) if isinstance(history, list) else []


def record_media(session: Session, url: str, name: Optional[str] = None, limit: Optional[int] = None) -> None:
    """
    Prepend an uploaded image to the history, capped at `limit` entries.

    The upload itself has already succeeded, so a failure here is only logged.
    """
    limit = limit or get_settings().media_history_limit
    try:
        entry = {"url": url, "name": name or url.rsplit("/", 1)[-1]}
        history = [h for h in media_history(session) if h.get("url") != url]
        put_setting(session, MEDIA_HISTORY_KEY, ([entry] + history)[:limit])
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning("Could not record {} in the media history: {}", url, exc)
