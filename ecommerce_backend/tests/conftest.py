import os

# Configure the application for an in-memory database before anything imports it.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SUPER_ADMIN_EMAIL"] = "owner@example.com"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo-cloud"
os.environ["CLOUDINARY_UPLOAD_PRESET"] = "unsigned-preset"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.api.main import app  # noqa: E402
from src.db.base import Base  # noqa: E402
from src.db.models import Brand, Category, Coupon, Product, ProductVariant  # noqa: E402
from src.db.session import SessionLocal, engine  # noqa: E402

ADMIN_EMAIL = "owner@example.com"
CUSTOMER_EMAIL = "shopper@example.com"
PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _token(client: TestClient, email: str, full_name: str) -> dict:
    response = client.post("/auth/signup", json={"email": email, "password": PASSWORD, "full_name": full_name})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return _token(client, ADMIN_EMAIL, "Store Owner")


@pytest.fixture
def customer_headers(client):
    return _token(client, CUSTOMER_EMAIL, "Rahim Uddin")


@pytest.fixture
def catalog(session):
    """A small catalog: Fruits > Citrus, a brand, a plain product, a sale product and a variant product."""
    fruits = Category(name="Fruits", slug="fruits")
    session.add(fruits)
    session.flush()
    citrus = Category(name="Citrus", slug="fruits-citrus", parent_id=fruits.id)
    dairy = Category(name="Dairy", slug="dairy")
    brand = Brand(name="Fresh Farm", slug="fresh-farm", logo_url="https://cdn.example.com/fresh.png")
    session.add_all([citrus, dairy, brand])
    session.flush()

    apple = Product(name="Apple", slug="apple", price_cents=25000, category_id=fruits.id, brand_id=brand.id, images=["https://cdn.example.com/apple.jpg"])
    orange = Product(
        name="Orange",
        slug="orange",
        price_cents=18000,
        original_price_cents=20000,
        category_id=citrus.id,
        images=["https://cdn.example.com/orange.jpg"],
        is_featured=True,
    )
    milk = Product(
        name="Milk",
        slug="milk",
        sku="MLK",
        price_cents=9000,
        category_id=dairy.id,
        brand_id=brand.id,
        attributes=[{"name": "Size", "options": ["500ml", "1L"]}],
        variants=[
            ProductVariant(attribute_values={"Size": "500ml"}, price_cents=9000, sku="MLK-1", image="https://cdn.example.com/milk-s.jpg"),
            ProductVariant(attribute_values={"Size": "1L"}, price_cents=16000, original_price_cents=17000, sku="MLK-2"),
        ],
    )
    session.add_all([apple, orange, milk])
    session.commit()
    return {"fruits": fruits, "citrus": citrus, "dairy": dairy, "brand": brand, "apple": apple, "orange": orange, "milk": milk}


@pytest.fixture
def coupons(session):
    future = date.today() + timedelta(days=30)
    save10 = Coupon(code="SAVE10", discount_type="Percentage", discount_value=10, minimum_spend_cents=0, expiry_date=future)
    flat = Coupon(code="FLAT50", discount_type="Fixed", discount_value=5000, minimum_spend_cents=50000, expiry_date=future)
    auto = Coupon(code="AUTO5", discount_type="Fixed", discount_value=500, expiry_date=future, auto_apply=True)
    expired = Coupon(code="OLD", discount_type="Fixed", discount_value=1000, expiry_date=date.today() - timedelta(days=1))
    session.add_all([save10, flat, auto, expired])
    session.commit()
    return {"save10": save10, "flat": flat, "auto": auto, "expired": expired}
