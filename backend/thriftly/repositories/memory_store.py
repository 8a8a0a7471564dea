"""
In-memory EntityStore

Arena of records plus an identity -> position index. Used for tests and
demo mode. All access is serialized behind one re-entrant lock, so
concurrent readers see either the pre- or post-mutation state.

Author: Thriftly
Date: 2026-10-19
"""
import logging
from typing import Dict, List, Optional, Type

from thriftly.domain.query import QueryLike, as_query
from thriftly.repositories.base import EntityStore, T

logger = logging.getLogger(__name__)


class InMemoryStore(EntityStore[T]):
    """Process-local collection with insertion order and an identity index"""

    def __init__(self, model: Type[T], collection: Optional[str] = None):
        super().__init__(model, collection)
        self._records: List[T] = []
        self._index: Dict[int, int] = {}
        self._counter = 0

    def _next_id(self) -> int:
        with self.lock:
            self._counter += 1
            return self._counter

    def _reindex(self) -> None:
        self._index = {record.id: position for position, record in enumerate(self._records)}

    def find_by_id(self, entity_id: int) -> Optional[T]:
        with self.lock:
            position = self._index.get(entity_id)
            if position is None:
                return None
            return self._records[position].model_copy(deep=True)

    def find(self, query: QueryLike = None) -> List[T]:
        query = as_query(query)
        with self.lock:
            return [
                record.model_copy(deep=True)
                for record in self._records
                if query.matches(record)
            ]

    def count_documents(self, query: QueryLike = None) -> int:
        query = as_query(query)
        with self.lock:
            return sum(1 for record in self._records if query.matches(record))

    def save(self, entity: T) -> T:
        with self.lock:
            entity.touch()
            stored = entity.model_copy(deep=True)

            position = self._index.get(entity.id)
            if position is not None:
                self._records[position] = stored
            else:
                self._index[entity.id] = len(self._records)
                self._records.append(stored)

            # Identities handed in from outside build() must not collide later
            if entity.id > self._counter:
                self._counter = entity.id
            return entity

    def delete_by_id(self, entity_id: int) -> Optional[T]:
        with self.lock:
            position = self._index.get(entity_id)
            if position is None:
                return None
            removed = self._records.pop(position)
            self._reindex()
            logger.debug(f"Deleted {self.collection}#{entity_id}")
            return removed
