"""
Unit tests for backend selection

Author: Thriftly
Date: 2026-10-19
"""
import pytest

from thriftly.core.config import Settings
from thriftly.repositories import build_stores
from thriftly.repositories.memory_store import InMemoryStore
from thriftly.repositories.sql_store import SqlStore


class TestBuildStores:

    def test_memory_backend(self):
        stores = build_stores(Settings(STORE_BACKEND="memory"))

        assert isinstance(stores.users, InMemoryStore)
        assert isinstance(stores.products, InMemoryStore)
        assert stores.users.collection == "users"

    def test_sql_backend(self):
        stores = build_stores(Settings(STORE_BACKEND="sql", DATABASE_URL="sqlite://"))

        assert isinstance(stores.products, SqlStore)
        assert stores.products.count_documents() == 0

    def test_sql_collections_are_independent(self):
        stores = build_stores(Settings(STORE_BACKEND="sql", DATABASE_URL="sqlite://"))
        stores.users.create({"username": "alex", "email": "a@b.com", "password_hash": "h"})

        assert stores.users.count_documents() == 1
        assert stores.products.count_documents() == 0

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_stores(Settings(STORE_BACKEND="mongo"))
