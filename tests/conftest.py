"""Shared fixtures: in-memory database, Redis test doubles and an API client."""

import pytest
import redis
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from storefront.dependencies import get_tree_cache
from storefront.main import app
from storefront.models.database import (
    Base,
    build_engine,
    build_session_factory,
    create_tables,
    get_db,
    session_scope,
)
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService
from storefront.services.tree_cache import TreeCache

ALL_PERMISSIONS = ",".join([
    "read:categories",
    "create:categories",
    "update:categories",
    "delete:categories",
    "read:products",
    "create:products",
    "update:products",
    "delete:products",
    "read:inventory",
])


class FakeRedis:
    """In-memory stand-in for the few Redis commands the tree cache uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.calls = []

    def get(self, key):
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.calls.append(("set", key))
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys):
        self.calls.append(("delete", *keys))
        return sum(1 for key in keys if self.data.pop(key, None) is not None)


class UnavailableRedis:
    """A Redis client whose server cannot be reached."""

    def get(self, key):
        raise redis.ConnectionError("Connection refused")

    def set(self, key, value, ex=None):
        raise redis.ConnectionError("Connection refused")

    def delete(self, *keys):
        raise redis.ConnectionError("Connection refused")


@pytest.fixture
def session_factory():
    """Factory for sessions bound to a fresh in-memory database."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)
    yield build_session_factory(engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    with session_scope(session_factory) as session:
        yield session


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def unavailable_redis():
    return UnavailableRedis()


@pytest.fixture
def tree_cache(fake_redis):
    return TreeCache(fake_redis, key="test_category_tree", ttl_seconds=3600)


@pytest.fixture
def category_service(db, tree_cache):
    return CategoryService(db, tree_cache)


@pytest.fixture
def product_service(db):
    return ProductService(db)


@pytest.fixture
def api_keys(monkeypatch):
    """Register a staff, a customer and a permissionless caller."""
    monkeypatch.setenv("API_KEY_STAFF", "staff-key")
    monkeypatch.setenv("API_PERMISSIONS_STAFF", ALL_PERMISSIONS)
    monkeypatch.setenv("API_KEY_CUSTOMER", "customer-key")
    monkeypatch.setenv("API_PERMISSIONS_CUSTOMER", "read:categories,read:products")
    monkeypatch.setenv("API_KEY_GUEST", "guest-key")
    monkeypatch.delenv("API_PERMISSIONS_GUEST", raising=False)


@pytest.fixture
def staff_headers(api_keys):
    return {"X-API-Key": "staff-key"}


@pytest.fixture
def customer_headers(api_keys):
    return {"X-API-Key": "customer-key"}


@pytest.fixture
def guest_headers(api_keys):
    return {"X-API-Key": "guest-key"}


@pytest.fixture
def client(session_factory, tree_cache):
    """API client wired to the in-memory database and fake cache."""

    def override_get_db():
        with session_scope(session_factory) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tree_cache] = lambda: tree_cache
    yield TestClient(app)
    app.dependency_overrides.clear()
