"""
Document tables for the persistent EntityStore
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from thriftly.core.database import Base


class Document(Base):
    """
    One stored entity, serialized as JSON

    (collection, id) is the identity; position preserves insertion order
    and is kept when a document is replaced.
    """
    __tablename__ = "documents"

    collection = Column(String(50), primary_key=True)
    id = Column(Integer, primary_key=True, autoincrement=False)
    position = Column(Integer, nullable=False, index=True)
    data = Column(JSON, nullable=False)

    # Metadata
    stored_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Counter(Base):
    """
    Identity counter per collection

    Only ever incremented, so deleted ids are never handed out again.
    """
    __tablename__ = "counters"

    collection = Column(String(50), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
