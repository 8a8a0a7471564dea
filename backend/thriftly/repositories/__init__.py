"""
Repository Layer - Data Access

Two interchangeable EntityStore backends, selected by configuration:
- memory: InMemoryStore (tests, demo)
- sql: SqlStore on SQLAlchemy (persistent)

Author: Thriftly
Date: 2026-10-19
"""
import logging
from dataclasses import dataclass
from typing import Optional

from thriftly.core.config import Settings, settings as default_settings
from thriftly.domain.product import Product
from thriftly.domain.user import User
from thriftly.repositories.base import EntityStore
from thriftly.repositories.memory_store import InMemoryStore
from thriftly.repositories.sql_store import SqlStore

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    users: EntityStore[User]
    products: EntityStore[Product]


def build_stores(settings: Optional[Settings] = None) -> Stores:
    """
    Construct the user and product stores for this process

    Raises:
        ValueError for an unknown STORE_BACKEND
    """
    settings = settings or default_settings
    backend = settings.STORE_BACKEND.lower()

    if backend == "memory":
        logger.info("Using in-memory store backend")
        return Stores(
            users=InMemoryStore(User, "users"),
            products=InMemoryStore(Product, "products"),
        )

    if backend == "sql":
        from thriftly.core.database import create_db_engine, create_session_factory, init_db

        engine = create_db_engine(settings.DATABASE_URL)
        init_db(engine)
        session_factory = create_session_factory(engine)
        logger.info("Using SQL store backend")
        return Stores(
            users=SqlStore(User, session_factory, "users"),
            products=SqlStore(Product, session_factory, "products"),
        )

    raise ValueError(f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}' (expected 'memory' or 'sql')")


__all__ = ['EntityStore', 'InMemoryStore', 'SqlStore', 'Stores', 'build_stores']
