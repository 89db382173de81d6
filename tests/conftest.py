# medstore/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - In-memory SQLite shared through StaticPool; schema rebuilt per test
# - get_db is overridden with a session on that engine
# - current_user is overridden with a seeded staff user, except where a
#   test asks for the raw (unauthenticated) client
# ---------------------------------------------------------------------
from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date, timedelta  # noqa: E402
from typing import Any, Dict, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from medstore.api.deps import current_user, get_db  # noqa: E402
from medstore.core.security import hash_password  # noqa: E402
from medstore.db.base import Base  # noqa: E402
from medstore.main import app  # noqa: E402
from medstore.models import User  # noqa: E402
from medstore.utils.timezone import today_local  # noqa: E402

STAFF_EMAIL = "staff@medstore.in"
STAFF_PASSWORD = "s3cret-pass"


# ---------- Database ----------
@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture()
def SessionTest(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(SessionTest):
    session = SessionTest()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def staff_user(db) -> User:
    user = User(
        name="Counter Staff",
        email=STAFF_EMAIL,
        password_hash=hash_password(STAFF_PASSWORD),
        is_active=True,
        is_admin=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ---------- Clients ----------
def _override_db(SessionTest):
    def _get_db():
        session = SessionTest()
        try:
            yield session
        finally:
            session.close()
    return _get_db


@pytest.fixture()
def anon_client(SessionTest, staff_user):
    """Real auth dependency; only the database is swapped."""
    app.dependency_overrides[get_db] = _override_db(SessionTest)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def client(SessionTest, staff_user):
    app.dependency_overrides[get_db] = _override_db(SessionTest)
    app.dependency_overrides[current_user] = lambda: staff_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- Payload helpers ----------
API = "/api"


def batch_payload(
    batch_number: str = "B-001",
    *,
    days_to_expiry: int = 365,
    stock: int = 50,
    mrp: float = 12.5,
    price: float = 9.0,
) -> Dict[str, Any]:
    return {
        "batchNumber": batch_number,
        "expiryDate": (today_local() + timedelta(days=days_to_expiry)).isoformat(),
        "stock": stock,
        "mrp": mrp,
        "price": price,
        "discount": 0,
        "saleDiscount": 0,
    }


def product_payload(
    name: str = "Paracetamol 500",
    *,
    manufacturer: str = "Acme Pharma",
    schedule: str = "none",
    min_stock: int = 0,
    category: Optional[str] = "Tablets",
    batches=None,
    **extra,
) -> Dict[str, Any]:
    data = {
        "hsnCode": "3004",
        "name": name,
        "pack": "10x10",
        "manufacturer": manufacturer,
        "salts": "Paracetamol",
        "schedule": schedule,
        "category": category,
        "minStock": min_stock,
        "batches": [batch_payload()] if batches is None else batches,
    }
    data.update(extra)
    return data


def supplier_payload(name: str = "Sri Devi Distributors", **extra) -> Dict[str, Any]:
    data = {
        "name": name,
        "address": "12 Market Road, Coimbatore",
        "contact": "9840012345",
        "gstin": "33ABCDE1234F1Z5",
        "dlNumber": "TN-DL-20B-1234",
        "foodLicenseNumber": "FSSAI-12345",
        "defaultDiscount": 5,
    }
    data.update(extra)
    return data


def sale_payload(product: Dict[str, Any], *, total: float = 100.0, **extra) -> Dict[str, Any]:
    data = {
        "type": "sale",
        "customerName": "Walk-in",
        "items": [
            {
                "productId": product["id"],
                "productName": product["name"],
                "quantity": 2,
                "price": 50,
                "batchId": product["batches"][0]["id"],
            }
        ],
        "total": total,
        "status": "paid",
        "paymentMethod": "Cash",
    }
    data.update(extra)
    return data


@pytest.fixture()
def make_product(client):
    def _make(**kwargs) -> Dict[str, Any]:
        r = client.post(f"{API}/products", json=product_payload(**kwargs))
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture()
def make_supplier(client):
    def _make(**kwargs) -> Dict[str, Any]:
        r = client.post(f"{API}/suppliers", json=supplier_payload(**kwargs))
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture()
def make_purchase(client):
    def _make(supplier: Dict[str, Any], product: Dict[str, Any], *, status: str = "paid",
              quantity: int = 10, total: float = 150.0) -> Dict[str, Any]:
        batch = product["batches"][0]
        r = client.post(
            f"{API}/purchases",
            json={
                "supplierId": supplier["id"],
                "invoiceNumber": "INV-77",
                "items": [
                    {
                        "productId": product["id"],
                        "productName": product["name"],
                        "batchId": batch["id"],
                        "quantity": quantity,
                        "price": 15,
                        "amount": total,
                    }
                ],
                "total": total,
                "status": status,
                "paymentMethod": "bank",
            },
        )
        assert r.status_code == 201, r.text
        return r.json()
    return _make


def today() -> date:
    return today_local()
