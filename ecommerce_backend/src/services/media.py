"""
Image uploads to the Cloudinary CDN and the admin image library.

Uploads are unsigned: the configured upload preset authorises them. Every successful upload
is recorded in the media history so that the image library can offer it again later.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import httpx
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.config import Settings, get_settings
from src.core.errors import UploadError, describe_error
from src.db.models import Banner, BlogPost, Category, HomeSection, Product
from src.services.store_settings import media_history, record_media, store_info


def upload_url(settings: Settings) -> str:
    return f"{settings.cloudinary_api_base.rstrip('/')}/{settings.cloudinary_cloud_name}/image/upload"


# PUBLIC_INTERFACE
def upload_image(
    content: bytes,
    filename: str,
    content_type: Optional[str] = None,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """
    Upload one image and return its HTTPS URL.

    Raises:
        UploadError: the CDN is not configured, unreachable, or rejected the file. The
            CDN's own error message is passed through when it sends one.
    """
    settings = settings or get_settings()
    if not settings.cloudinary_cloud_name or not settings.cloudinary_upload_preset:
        raise UploadError("Image uploads are not configured (CLOUDINARY_CLOUD_NAME / CLOUDINARY_UPLOAD_PRESET).")
    if not content:
        raise UploadError("The uploaded file is empty.")

    http = client or httpx.Client(timeout=settings.upload_timeout_seconds)
    try:
        response = http.post(
            upload_url(settings),
            data={"upload_preset": settings.cloudinary_upload_preset, "cloud_name": settings.cloudinary_cloud_name},
            files={"file": (filename, content, content_type or "application/octet-stream")},
        )
    except httpx.HTTPError as exc:
        logger.error("Image upload of {} failed: {}", filename, exc)
        raise UploadError(f"Image upload failed: {describe_error(exc)}") from exc
    finally:
        if client is None:
            http.close()

    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if response.is_error:
        message = describe_error(payload) if payload else "Upload failed"
        logger.warning("CDN rejected {} with {}: {}", filename, response.status_code, message)
        raise UploadError(message)

    url = payload.get("secure_url") or payload.get("url")
    if not url:
        raise UploadError("The CDN response did not include an image URL.")
    logger.info("Uploaded {} -> {}", filename, url)
    return url


def upload_and_record(session: Session, content: bytes, filename: str, content_type: Optional[str] = None, client=None) -> dict:
    url = upload_image(content, filename, content_type, client=client)
    record_media(session, url, filename)
    return {"url": url, "name": filename}


def _name_from_url(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1] or url


# PUBLIC_INTERFACE
def image_library(session: Session, search: Optional[str] = None) -> List[dict]:
    """
    Every image the store knows about, deduplicated by URL.

    Uploaded images come first (newest first), followed by images referenced from products,
    variants, banners, blog posts, categories, homepage sections and the store info.
    """
    images: Dict[str, dict] = {}

    def add(url: Optional[str], name: Optional[str] = None, source: str = "Database") -> None:
        if not url or url in images:
            return
        images[url] = {"url": url, "name": name or _name_from_url(url), "source": source}

    for entry in media_history(session):
        add(entry.get("url"), entry.get("name"), "Upload")

    for product in session.scalars(select(Product)):
        for url in product.images or []:
            add(url)
        for variant in product.variants:
            add(variant.image)
    for url in session.scalars(select(Banner.image_url)):
        add(url)
    for url in session.scalars(select(BlogPost.image_url)):
        add(url)
    for url in session.scalars(select(Category.image_url)):
        add(url)
    for section in session.scalars(select(HomeSection)):
        if section.banner:
            add(section.banner.get("image_url"))
        for item in section.grid_banners or []:
            add(item.get("image_url"))
    info = store_info(session)
    add(info.get("logo_url"))
    add(info.get("favicon_url"))

    result = list(images.values())
    needle = (search or "").strip().lower()
    if needle:
        result = [img for img in result if needle in img["name"].lower()]
    return result
