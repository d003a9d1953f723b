"""Pydantic models for relationships."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Relationship(BaseModel):
    """Represents a directed, typed edge between two entities.

    ``relationship_type`` is a free label; it does not have to match any
    relationship declared on the source entity's schema.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    from_entity_id: str
    to_entity_id: str
    relationship_type: str
    position: int = 0
    created_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(from_attributes=True)


class RelationshipSummary(BaseModel):
    """Target of an edge as embedded in an entity's full view."""

    type: str
    id: str
    name: str

    model_config = ConfigDict(frozen=True)


class RelationshipDetail(RelationshipSummary):
    """Target of an edge as returned by the relationship listing, with its data."""

    data: dict[str, Any] = Field(default_factory=dict)

    def summary(self) -> RelationshipSummary:
        return RelationshipSummary(type=self.type, id=self.id, name=self.name)


__all__ = ["Relationship", "RelationshipDetail", "RelationshipSummary"]
