"""Pytest configuration and fixtures"""
import os

# Set test environment before the application reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from marketplace import models  # noqa: F401
from marketplace.database import Base, get_session
from marketplace.main import app

PASSWORD = "password123"


@pytest.fixture
def db_url(tmp_path):
    """A throw-away SQLite file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}"


@pytest.fixture
def session_maker(db_url):
    engine = create_async_engine(db_url, poolclass=NullPool)
    return engine, sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def client(session_maker):
    """TestClient whose requests run against the per-test database."""
    engine, maker = session_maker

    async def override_get_session():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email, role, password=PASSWORD, **extra):
    payload = {
        "email": email,
        "password": password,
        "firstName": "Test",
        "lastName": role.title(),
        "role": role,
        **extra,
    }
    return client.post("/user/register", json=payload)


def login_headers(client, email, password=PASSWORD):
    r = client.post("/user/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def seller_headers(client):
    assert register(client, "seller@example.com", "seller").status_code == 201
    return login_headers(client, "seller@example.com")


@pytest.fixture
def other_seller_headers(client):
    assert register(client, "other.seller@example.com", "seller").status_code == 201
    return login_headers(client, "other.seller@example.com")


@pytest.fixture
def buyer_headers(client):
    assert register(client, "buyer@example.com", "buyer").status_code == 201
    return login_headers(client, "buyer@example.com")


@pytest.fixture
def make_product(client, seller_headers):
    """Create a product as the default seller and return its JSON."""

    def _make(headers=None, **overrides):
        payload = {
            "name": "Test Product",
            "company": "Acme",
            "price": 10.0,
            "category": "grocery",
            "quantity": 5,
        }
        payload.update(overrides)
        r = client.post("/product/add", json=payload, headers=headers or seller_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
