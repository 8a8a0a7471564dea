"""
Shared base for stored entities

Author: Thriftly
Date: 2026-10-19
"""
from datetime import datetime, timezone

from pydantic import BaseModel, Field, ConfigDict


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp"""
    return datetime.now(timezone.utc)


class Entity(BaseModel):
    """
    Base model for anything kept in an EntityStore

    Fields:
        id: Store-assigned identity (monotonic per collection, never reused)
        created_at: When the entity was built
        updated_at: Refreshed by the store on every save
    """

    id: int = Field(..., description="Store-assigned identity")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last save timestamp")

    model_config = ConfigDict(from_attributes=True)

    def touch(self) -> None:
        self.updated_at = utcnow()
