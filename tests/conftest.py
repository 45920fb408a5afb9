# tests/conftest.py
import os
import tempfile
import uuid

# Settings are read at import time; point them at a throwaway SQLite file
# before anything from the application is imported.
_db_dir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel, Session  # noqa: E402

from storefront.core.security import create_access_token, hash_password  # noqa: E402
from storefront.database import engine  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models.catalog import Brand, Category, Color, Size  # noqa: E402
from storefront.models.product import Product  # noqa: E402
from storefront.models.user import User  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def clean_db():
    """Every test starts from empty tables."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(session):
    def _make_user(role="customer", email=None, name="Test User", seller_status=None):
        if role == "seller" and seller_status is None:
            seller_status = "approved"
        user = User(
            name=name,
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@mail.com",
            password_hash=hash_password(PASSWORD),
            role=role,
            seller_status=seller_status,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def taxonomy(session):
    """One category, brand, size and color to hang products on."""
    category = Category(name="Shirts")
    brand = Brand(name="Acme")
    size = Size(name="M", type="clothing")
    color = Color(name="Red", hex_code="#FF0000")
    session.add_all([category, brand, size, color])
    session.commit()
    for obj in (category, brand, size, color):
        session.refresh(obj)
    return {"category": category, "brand": brand, "size": size, "color": color}


@pytest.fixture
def make_product(session, make_user, taxonomy):
    default_seller = {}

    def _make_product(name="Linen shirt", price=100.0, stock=10, seller=None, is_active=True):
        if seller is None:
            if "user" not in default_seller:
                default_seller["user"] = make_user(role="seller")
            seller = default_seller["user"]
        product = Product(
            seller_id=seller.id,
            name=name,
            price=price,
            stock=stock,
            category_id=taxonomy["category"].id,
            brand_id=taxonomy["brand"].id,
            is_active=is_active,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _auth_headers


@pytest.fixture
def shipping():
    return {
        "name": "Asha Rao",
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "KA",
        "zip_code": "560001",
        "phone": "+91 98450 00000",
    }
