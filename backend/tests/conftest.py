"""
Pytest fixtures and configuration for Thriftly backend tests

This file provides shared fixtures that can be used across all test modules.

Author: Thriftly
Date: 2026-10-19
"""
import pytest
from fastapi.testclient import TestClient

from thriftly.api.dependencies import build_services, get_services
from thriftly.connectors.blob_storage import InMemoryBlobStore
from thriftly.core.auth import PasswordHasher, create_access_token
from thriftly.core.database import create_db_engine, create_session_factory, init_db
from thriftly.domain.product import Product
from thriftly.domain.user import User
from thriftly.repositories import Stores
from thriftly.repositories.memory_store import InMemoryStore
from thriftly.repositories.sql_store import SqlStore
from thriftly.services.product_service import ProductService
from thriftly.services.user_service import UserService


@pytest.fixture(scope="session")
def hasher():
    """
    Provides a bcrypt hasher with minimal rounds

    Scope: session (hashing cost is the slowest part of the suite)
    """
    return PasswordHasher(schemes=["bcrypt"], bcrypt__rounds=4)


@pytest.fixture
def stores():
    """Fresh in-memory user and product stores for each test"""
    return Stores(
        users=InMemoryStore(User, "users"),
        products=InMemoryStore(Product, "products"),
    )


@pytest.fixture
def session_factory():
    """
    Provides a session factory on a private in-memory SQLite database

    Scope: function (new database per test)
    """
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_stores(session_factory):
    return Stores(
        users=SqlStore(User, session_factory, "users"),
        products=SqlStore(Product, session_factory, "products"),
    )


@pytest.fixture
def user_service(stores, hasher):
    return UserService(stores.users, stores.products, hasher)


@pytest.fixture
def product_service(stores):
    return ProductService(stores.users, stores.products, default_page_size=12)


@pytest.fixture
def sample_user_data():
    """
    Provides registration data for tests
    """
    return {
        "username": "vintagefan",
        "email": "Vintage.Fan@Example.com",
        "password": "secret123",
        "first_name": "Alex",
        "last_name": "Rivera",
    }


@pytest.fixture
def sample_product_data():
    """
    Provides listing data for tests (seller supplied separately)
    """
    return {
        "title": "Vintage Denim Jacket",
        "description": "Classic 90s denim jacket in great shape",
        "price": 45.0,
        "original_price": 120.0,
        "category": "outerwear",
        "brand": "Levi's",
        "size": "M",
        "condition": "good",
        "color": "Blue",
        "tags": "Vintage, denim, 90s",
    }


@pytest.fixture
def seller(stores):
    return stores.users.create({
        "username": "seller",
        "email": "seller@example.com",
        "password_hash": "x",
        "first_name": "Sam",
        "last_name": "Seller",
        "location": "Portland",
    })


@pytest.fixture
def buyer(stores):
    return stores.users.create({
        "username": "buyer",
        "email": "buyer@example.com",
        "password_hash": "x",
    })


@pytest.fixture
def product(product_service, seller, sample_product_data):
    return product_service.create_product(sample_product_data, seller.id)


# =============================================================================
# API fixtures
# =============================================================================

@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def services(stores, hasher, blob_store):
    return build_services(stores=stores, hasher=hasher, blob_store=blob_store)


@pytest.fixture
def client(services):
    """
    TestClient with the service container swapped for the test's stores
    """
    from thriftly.main import app

    app.dependency_overrides[get_services] = lambda: services
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Builds an Authorization header for a user id"""
    def _headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers
