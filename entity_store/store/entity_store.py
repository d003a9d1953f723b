"""Orchestration layer that composes schema, entity and relationship primitives."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from entity_store.errors import TargetNotFoundError, ValidationFailedError
from entity_store.models.entity import Entity, EntityPage
from entity_store.models.schema import Schema
from entity_store.repositories.entity_repository import EntityRepository
from entity_store.repositories.filters import DEFAULT_PER_PAGE
from entity_store.repositories.relationship_graph import RelationshipGraph
from entity_store.repositories.schema_store import SchemaStore
from entity_store.store.assembler import EntityAssembler
from entity_store.validation.fields import FieldValidator
from entity_store.validation.structure import FieldInput, RelationshipInput

logger = logging.getLogger(__name__)


class EntityStore:
    """Façade exposing the create/get/list/update/delete operations.

    Each operation either returns a value or raises one of the errors in
    ``entity_store.errors``; mapping them to responses is the caller's job.
    """

    def __init__(
        self,
        schema_store: SchemaStore,
        entity_repository: EntityRepository,
        relationship_graph: RelationshipGraph,
        *,
        validator: FieldValidator | None = None,
        default_per_page: int = DEFAULT_PER_PAGE,
    ):
        """Internal constructor; prefer ``create_entity_store`` for public use."""
        self._schemas = schema_store
        self._entities = entity_repository
        self._graph = relationship_graph
        self._validator = validator or FieldValidator()
        self._assembler = EntityAssembler(relationship_graph)
        self._default_per_page = default_per_page

    @property
    def schemas(self) -> SchemaStore:
        return self._schemas

    @property
    def entities(self) -> EntityRepository:
        return self._entities

    @property
    def relationships(self) -> RelationshipGraph:
        return self._graph

    # ----------------------------------------------------------------- Schemas
    def create_schema(
        self,
        name: str,
        fields: Sequence[FieldInput] = (),
        relationships: Sequence[RelationshipInput] = (),
    ) -> Schema:
        return self._schemas.create(name, fields, relationships)

    def get_schema(self, name: str) -> Schema:
        return self._schemas.find(name)

    def list_schemas(self) -> list[Schema]:
        return self._schemas.list()

    def update_schema(
        self,
        name: str,
        *,
        fields: Sequence[FieldInput] | None = None,
        relationships: Sequence[RelationshipInput] | None = None,
    ) -> Schema:
        return self._schemas.update(name, fields=fields, relationships=relationships)

    def delete_schema(self, name: str) -> None:
        self._schemas.delete(name)

    def add_schema_field(self, name: str, field: FieldInput) -> Schema:
        return self._schemas.add_field(name, field)

    def remove_schema_field(self, name: str, field_name: str) -> Schema:
        return self._schemas.remove_field(name, field_name)

    def add_schema_relationship(self, name: str, relationship: RelationshipInput) -> Schema:
        return self._schemas.add_relationship(name, relationship)

    def remove_schema_relationship(self, name: str, relationship_name: str) -> Schema:
        return self._schemas.remove_relationship(name, relationship_name)

    # ---------------------------------------------------------------- Entities
    def create_entity(self, entity_type: str, payload: Mapping[str, Any]) -> Entity:
        """Validate ``payload`` against the type's schema and persist it.

        Typed types take flat field keys; untyped ones take ``name`` and ``data``.
        """
        if not entity_type or not entity_type.strip():
            raise ValidationFailedError(["Entity type can't be blank"])
        schema = self._schemas.resolve(entity_type)
        validated = self._validator.validate(schema, payload)
        entity = self._entities.create(entity_type, validated.name, validated.data)
        logger.debug("Created %s %s", entity_type, entity.id)
        return entity

    def get_entity(self, entity_type: str, entity_id: str) -> Entity:
        return self._entities.get(entity_type, entity_id)

    def get_entity_view(self, entity_type: str, entity_id: str) -> dict[str, Any]:
        return self._assembler.full_view(self._entities.get(entity_type, entity_id))

    def list_entities(
        self,
        entity_type: str,
        *,
        search: str | None = None,
        page: int = 1,
        per_page: int | None = None,
    ) -> EntityPage:
        return self._entities.list_by_type(
            entity_type,
            search=search,
            page=page,
            per_page=per_page if per_page is not None else self._default_per_page,
        )

    def list_entity_views(
        self,
        entity_type: str,
        **query: Any,
    ) -> tuple[list[dict[str, Any]], EntityPage]:
        """Full views for one page of entities, plus the page for its counts."""
        page = self.list_entities(entity_type, **query)
        return [self._assembler.full_view(entity) for entity in page.items], page

    def update_entity(
        self, entity_type: str, entity_id: str, payload: Mapping[str, Any]
    ) -> Entity:
        self._entities.get(entity_type, entity_id)
        schema = self._schemas.resolve(entity_type)
        validated = self._validator.validate(schema, payload, partial=True)
        return self._entities.update(
            entity_type, entity_id, validated.data, name=validated.name
        )

    def delete_entity(self, entity_type: str, entity_id: str) -> int:
        return self._entities.delete(entity_type, entity_id)

    # ----------------------------------------------------------- Relationships
    def add_relationship(
        self,
        entity_type: str,
        entity_id: str,
        relationship_type: str,
        *,
        target_type: str,
        target_id: str,
    ) -> bool:
        """Link an entity to a target; an existing identical link is left as is."""
        source = self._entities.get(entity_type, entity_id)
        return self._graph.add(
            source.id, target_id, relationship_type, target_type=target_type
        )

    def remove_relationship(
        self,
        entity_type: str,
        entity_id: str,
        relationship_type: str,
        *,
        target_type: str,
        target_id: str,
    ) -> int:
        source = self._entities.get(entity_type, entity_id)
        target = self._entities.find(target_id)
        if target is None or target.entity_type != target_type:
            raise TargetNotFoundError("Target entity not found")
        return self._graph.remove(source.id, target.id, relationship_type)

    def list_relationships(
        self, entity_type: str, entity_id: str
    ) -> dict[str, list[dict[str, Any]]]:
        return self._assembler.relationship_listing(self._entities.get(entity_type, entity_id))

    def related_entities(
        self, entity_type: str, entity_id: str, relationship_type: str
    ) -> list[Entity]:
        source = self._entities.get(entity_type, entity_id)
        return self._graph.related_entities(source.id, relationship_type)


__all__ = ["EntityStore"]
