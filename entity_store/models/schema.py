"""Pydantic models for runtime entity-type definitions."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

RESERVED_NAME_KEY = "name"


class FieldType(str, Enum):
    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    IMAGE = "image"
    IMAGE_GALLERY = "image_gallery"


class RelationshipKind(str, Enum):
    BELONGS_TO = "belongsTo"
    HAS_MANY = "hasMany"


class FieldSpec(BaseModel):
    """Declared field of an entity type."""

    name: str
    type: FieldType
    label: str | None = None
    required: bool = False
    default: Any = None

    model_config = ConfigDict(frozen=True)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class RelationshipSpec(BaseModel):
    """Declared relationship of an entity type.

    ``target`` names another schema but is never checked against the store.
    """

    name: str
    type: RelationshipKind
    target: str
    label: str | None = None

    model_config = ConfigDict(frozen=True)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class Schema(BaseModel):
    """Named, typed definition of an entity type."""

    kind: Literal["typed"] = "typed"
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    fields: tuple[FieldSpec, ...] = Field(default_factory=tuple)
    relationships: tuple[RelationshipSpec, ...] = Field(default_factory=tuple)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    def field_by_name(self, name: str) -> FieldSpec | None:
        return next((field for field in self.fields if field.name == name), None)

    def relationship_by_name(self, name: str) -> RelationshipSpec | None:
        return next((rel for rel in self.relationships if rel.name == name), None)

    def select_data(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Keep only declared fields; ``name`` belongs to the entity, not its data."""
        allowed = set(self.field_names) - {RESERVED_NAME_KEY}
        return {key: value for key, value in payload.items() if key in allowed}


class UntypedSchema(BaseModel):
    """Fallback definition for entity types without a stored schema.

    Accepts ``name`` plus whatever mapping is supplied under ``data``.
    """

    kind: Literal["untyped"] = "untyped"
    name: str
    fields: tuple[FieldSpec, ...] = ()
    relationships: tuple[RelationshipSpec, ...] = ()

    model_config = ConfigDict(frozen=True)

    def field_by_name(self, name: str) -> FieldSpec | None:
        return None

    def relationship_by_name(self, name: str) -> RelationshipSpec | None:
        return None

    def select_data(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        data = payload.get("data")
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise TypeError(f"Data must be an object, received {type(data).__name__}.")
        return dict(data)


AnySchema = Schema | UntypedSchema


__all__ = [
    "AnySchema",
    "FieldSpec",
    "FieldType",
    "RESERVED_NAME_KEY",
    "RelationshipKind",
    "RelationshipSpec",
    "Schema",
    "UntypedSchema",
]
