from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.api.routers import (
    account,
    admin_catalog,
    admin_content,
    admin_orders,
    admin_system,
    auth,
    orders,
    storefront,
)
from src.core.config import get_settings
from src.core.errors import setup_exception_handlers
from src.core.logging_config import setup_logging
from src.db.session import db_healthcheck, init_db

settings = get_settings()
setup_logging(settings.log_level)

openapi_tags = [
    {"name": "Health", "description": "Service and dependency health checks."},
    {"name": "Auth", "description": "Signup, login and the current user."},
    {"name": "Storefront", "description": "Catalog browsing, homepage, pages and blog."},
    {"name": "Checkout", "description": "Cart quotes, cash-on-delivery checkout and order tracking."},
    {"name": "Account", "description": "Customer order history, addresses and wishlist."},
    {"name": "Admin: Catalog", "description": "Products, variants, categories, brands and attributes."},
    {"name": "Admin: Orders", "description": "Order status, order editing and invoices."},
    {"name": "Admin: Content", "description": "Coupons, banners, homepage sections, pages, blog and reviews."},
    {"name": "Admin: System", "description": "Users, settings, reports, media and the schema script."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_create_tables:
        init_db()
    logger.info("Storefront API ready")
    yield


app = FastAPI(
    title="Storefront Backend API",
    description="Backend service for the storefront and its admin console (catalog, checkout, orders, CMS, reports).",
    version="0.2.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

for module in (auth, storefront, orders, account, admin_catalog, admin_orders, admin_content, admin_system):
    app.include_router(module.router)


@app.get("/", tags=["Health"], summary="Service health check")
def health_check():
    """Basic health check for the backend service (no external dependencies)."""
    return {"message": "Healthy"}


@app.get("/health/db", tags=["Health"], summary="Database health check")
def health_db_check():
    """
    Check database connectivity.

    Returns a JSON payload indicating whether the database is reachable.
    """
    ok = db_healthcheck()
    return {"database": "ok" if ok else "unreachable", "ok": ok}
