"""
Persistent EntityStore on SQLAlchemy

Entities are stored as JSON documents in the `documents` table and
filtered with the same matcher as the in-memory backend, so both
backends answer queries identically.

Author: Thriftly
Date: 2026-10-19
"""
import logging
from typing import List, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from thriftly.domain.query import QueryLike, as_query
from thriftly.models.document import Counter, Document
from thriftly.repositories.base import EntityStore, T

logger = logging.getLogger(__name__)


class SqlStore(EntityStore[T]):
    """
    Document-per-row collection

    Every operation runs in its own transaction. Mutations from this
    process are additionally serialized by a lock.
    """

    def __init__(self, model: Type[T], session_factory: sessionmaker, collection: Optional[str] = None):
        super().__init__(model, collection)
        self._session_factory = session_factory

    def _to_entity(self, data: dict) -> T:
        return self.model.model_validate(data)

    def _next_id(self) -> int:
        with self.lock, self._session_factory() as session, session.begin():
            counter = session.get(Counter, self.collection, with_for_update=True)
            if counter is None:
                counter = Counter(collection=self.collection, value=0)
                session.add(counter)
            counter.value += 1
            value = counter.value
        return value

    def find_by_id(self, entity_id: int) -> Optional[T]:
        with self._session_factory() as session:
            document = session.get(Document, (self.collection, entity_id))
            if document is None:
                return None
            return self._to_entity(document.data)

    def _load_all(self) -> List[T]:
        with self._session_factory() as session:
            rows = session.execute(
                select(Document.data)
                .where(Document.collection == self.collection)
                .order_by(Document.position)
            ).scalars().all()
        return [self._to_entity(data) for data in rows]

    def find(self, query: QueryLike = None) -> List[T]:
        query = as_query(query)
        return [entity for entity in self._load_all() if query.matches(entity)]

    def count_documents(self, query: QueryLike = None) -> int:
        query = as_query(query)
        if not query.constraints:
            with self._session_factory() as session:
                return session.execute(
                    select(func.count())
                    .select_from(Document)
                    .where(Document.collection == self.collection)
                ).scalar_one()
        return sum(1 for entity in self._load_all() if query.matches(entity))

    def save(self, entity: T) -> T:
        with self.lock, self._session_factory() as session, session.begin():
            entity.touch()
            data = entity.model_dump(mode="json")

            document = session.get(Document, (self.collection, entity.id))
            if document is not None:
                document.data = data
            else:
                last_position = session.execute(
                    select(func.max(Document.position))
                    .where(Document.collection == self.collection)
                ).scalar()
                session.add(Document(
                    collection=self.collection,
                    id=entity.id,
                    position=(last_position or 0) + 1,
                    data=data,
                ))

            counter = session.get(Counter, self.collection)
            if counter is None:
                session.add(Counter(collection=self.collection, value=entity.id))
            elif counter.value < entity.id:
                counter.value = entity.id
        return entity

    def delete_by_id(self, entity_id: int) -> Optional[T]:
        with self.lock, self._session_factory() as session, session.begin():
            document = session.get(Document, (self.collection, entity_id))
            if document is None:
                return None
            removed = self._to_entity(document.data)
            session.delete(document)

        logger.debug(f"Deleted {self.collection}#{entity_id}")
        return removed
