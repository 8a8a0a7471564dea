"""
Database connection (SQLAlchemy)

Backs the persistent EntityStore. Any SQLAlchemy URL works:
PostgreSQL (psycopg2) in production, SQLite locally and in tests.

Author: Thriftly
Date: 2026-10-19
"""
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)


# Base for ORM models
Base = declarative_base()


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create a SQLAlchemy engine for the document tables

    Args:
        database_url: SQLAlchemy URL (defaults to settings.DATABASE_URL)

    Returns:
        Engine. In-memory SQLite URLs share a single connection so every
        session sees the same database.
    """
    url = database_url or settings.DATABASE_URL
    if not url:
        raise Exception("DATABASE_URL not configured")

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,  # Check connections before handing them out
            pool_size=10,
            max_overflow=20,
        )

    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """
    Session factory bound to `engine`

    Objects stay readable after commit since stores return detached copies.
    """
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create the document and counter tables if they don't exist yet"""
    # Register the ORM tables on Base.metadata
    from thriftly.models import document  # noqa: F401

    Base.metadata.create_all(bind=engine)
