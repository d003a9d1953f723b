"""Factory helpers for constructing the entity store façade."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from entity_store.repositories.entity_repository import EntityRepository
from entity_store.repositories.filters import DEFAULT_PER_PAGE
from entity_store.repositories.relationship_graph import RelationshipGraph
from entity_store.repositories.schema_store import SchemaStore
from entity_store.validation.fields import FieldValidator

from .entity_store import EntityStore


def create_entity_store(
    session_factory: sessionmaker[Session],
    *,
    enforce_required: bool = False,
    default_per_page: int = DEFAULT_PER_PAGE,
) -> EntityStore:
    """Build an EntityStore with the default repository implementations."""
    return EntityStore(
        SchemaStore(session_factory),
        EntityRepository(session_factory),
        RelationshipGraph(session_factory),
        validator=FieldValidator(enforce_required=enforce_required),
        default_per_page=default_per_page,
    )


__all__ = ["create_entity_store"]
