"""Pydantic models for entity records."""

from __future__ import annotations

import math
from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class Entity(BaseModel):
    """Instance of a runtime-defined entity type.

    ``data`` is an open bag of JSON values keyed by field name; it is only
    checked against the schema at the write boundary.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    entity_type: str
    name: str
    data: dict[str, JsonValue] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)


class EntityPage(BaseModel):
    """One page of entities plus the counts needed to paginate."""

    items: list[Entity]
    total_count: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.per_page) if self.per_page else 0


__all__ = ["Entity", "EntityPage"]
