"""
EntityStore - storage-agnostic persistence interface

One store per collection (users, products). Every backend:
- assigns identities from its own monotonic counter (never reused)
- keeps insertion order, visible through unsorted find()
- hands out value copies; changes only persist through save()
- returns None for absent ids instead of raising

Author: Thriftly
Date: 2026-10-19
"""
import threading
from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, Type, TypeVar

from thriftly.domain.base import Entity
from thriftly.domain.query import QueryLike

T = TypeVar("T", bound=Entity)


class EntityStore(ABC, Generic[T]):
    """
    Base class for entity collections

    Subclasses implement the storage primitives; identity assignment and
    the create() convenience live here.
    """

    def __init__(self, model: Type[T], collection: Optional[str] = None):
        self.model = model
        self.collection = collection or f"{model.__name__.lower()}s"
        # Serializes read-modify-write sequences on this collection (re-entrant)
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @abstractmethod
    def _next_id(self) -> int:
        """Reserve and return the next identity value"""

    def build(self, data: dict) -> T:
        """
        Validate `data` and assign a fresh identity without persisting

        Raises:
            pydantic.ValidationError if the data violates the model
        """
        # Validated before reserving an id so rejected payloads never consume one
        entity = self.model.model_validate({**data, "id": 0})
        entity.id = self._next_id()
        return entity

    def create(self, data: dict) -> T:
        """Build and persist a new entity"""
        entity = self.build(data)
        self.save(entity)
        return entity

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def find_by_id(self, entity_id: int) -> Optional[T]:
        """Return a copy of the entity or None"""

    @abstractmethod
    def find(self, query: QueryLike = None) -> List[T]:
        """Return copies of all matching entities in insertion order"""

    @abstractmethod
    def count_documents(self, query: QueryLike = None) -> int:
        """Count matches with the same semantics as find()"""

    @abstractmethod
    def save(self, entity: T) -> T:
        """
        Upsert by identity and refresh updated_at

        An existing record is replaced in place (keeping its position);
        an unknown identity is appended.
        """

    @abstractmethod
    def delete_by_id(self, entity_id: int) -> Optional[T]:
        """Remove and return the entity, or None if it does not exist"""

    # ------------------------------------------------------------------
    # Conveniences
    # ------------------------------------------------------------------

    def find_one(self, query: QueryLike = None) -> Optional[T]:
        results = self.find(query)
        return results[0] if results else None

    def find_by_ids(self, ids: Iterable[int]) -> List[T]:
        """Entities for `ids` in the given order, skipping ids that no longer exist"""
        found = []
        for entity_id in ids:
            entity = self.find_by_id(entity_id)
            if entity is not None:
                found.append(entity)
        return found

    def ping(self) -> bool:
        """Health check - True when the backend answers"""
        self.count_documents()
        return True
