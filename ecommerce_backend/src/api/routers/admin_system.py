"""Admin console: users, store settings, reports, media and the database schema script."""

from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import PlainTextResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_admin
from src.db.models import Profile
from src.db.session import schema_sql
from src.schemas.accounts import ProfileOut, RoleUpdate
from src.schemas.content import ShippingSettings, StoreInfo
from src.schemas.reports import DashboardSummary, SalesReport
from src.services import accounts, media, reports, store_settings

router = APIRouter(prefix="/admin", tags=["Admin: System"], dependencies=[Depends(require_admin)])

DEFAULT_REPORT_DAYS = 30


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=List[ProfileOut], summary="All accounts, newest first")
def list_users(db: Session = Depends(get_db)):
    return list(db.scalars(select(Profile).order_by(Profile.created_at.desc())))


@router.patch("/users/{user_id}/role", response_model=ProfileOut, summary="Promote or demote an account")
def update_role(user_id: str, body: RoleUpdate, admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    return accounts.set_role(db, user_id, body.role, acting=admin)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@router.get("/settings/shipping", response_model=ShippingSettings, summary="Shipping rates")
def get_shipping(db: Session = Depends(get_db)):
    return store_settings.shipping_settings(db)


@router.put("/settings/shipping", response_model=ShippingSettings, summary="Update shipping rates")
def put_shipping(body: ShippingSettings, db: Session = Depends(get_db)):
    store_settings.put_setting(db, store_settings.SHIPPING_KEY, body.model_dump())
    db.commit()
    return store_settings.shipping_settings(db)


@router.get("/settings/store", response_model=StoreInfo, summary="Store info")
def get_store(db: Session = Depends(get_db)):
    return store_settings.store_info(db)


@router.put("/settings/store", response_model=StoreInfo, summary="Update store info")
def put_store(body: StoreInfo, db: Session = Depends(get_db)):
    store_settings.put_setting(db, store_settings.STORE_INFO_KEY, body.model_dump())
    db.commit()
    return store_settings.store_info(db)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@router.get("/dashboard", response_model=DashboardSummary, summary="Headline numbers")
def dashboard(db: Session = Depends(get_db)):
    return reports.dashboard_summary(db)


@router.get("/reports", response_model=SalesReport, summary="Sales report for a date range")
def sales_report(start: Optional[date] = None, end: Optional[date] = None, db: Session = Depends(get_db)):
    """Defaults to the last thirty days, today included."""
    end = end or date.today()
    start = start or end - timedelta(days=DEFAULT_REPORT_DAYS)
    return reports.load_report(db, start, end)


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------


@router.post("/media", status_code=201, summary="Upload an image to the CDN")
def upload_media(file: UploadFile = File(...), db: Session = Depends(get_db)):
    content = file.file.read()
    return media.upload_and_record(db, content, file.filename or "upload", file.content_type)


@router.get("/media", summary="Image library")
def image_library(search: str = "", db: Session = Depends(get_db)):
    return media.image_library(db, search)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


@router.get("/schema", response_class=PlainTextResponse, summary="SQL script that creates every table")
def database_schema():
    return schema_sql()
