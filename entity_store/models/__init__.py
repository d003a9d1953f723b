"""Pydantic models exposed by the entity store."""

from .entity import Entity, EntityPage
from .relationship import Relationship, RelationshipDetail, RelationshipSummary
from .schema import (
    AnySchema,
    FieldSpec,
    FieldType,
    RelationshipKind,
    RelationshipSpec,
    Schema,
    UntypedSchema,
)

__all__ = [
    "AnySchema",
    "Entity",
    "EntityPage",
    "FieldSpec",
    "FieldType",
    "Relationship",
    "RelationshipDetail",
    "RelationshipKind",
    "RelationshipSpec",
    "RelationshipSummary",
    "Schema",
    "UntypedSchema",
]
