"""Structural validation for schema field and relationship lists.

Every entry is checked and all violations are reported together so a caller
can show the complete list at once. Items may be ``FieldSpec`` /
``RelationshipSpec`` instances or plain mappings as they arrive from a request.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from entity_store.errors import InvalidStructureError
from entity_store.models.schema import FieldSpec, FieldType, RelationshipKind, RelationshipSpec

VALID_FIELD_TYPES = tuple(member.value for member in FieldType)
VALID_RELATIONSHIP_TYPES = tuple(member.value for member in RelationshipKind)

FieldInput = FieldSpec | Mapping[str, Any]
RelationshipInput = RelationshipSpec | Mapping[str, Any]


def _as_mapping(item: Any) -> Mapping[str, Any] | None:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    if isinstance(item, Mapping):
        return item
    return None


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _type_value(value: Any) -> Any:
    return value.value if isinstance(value, (FieldType, RelationshipKind)) else value


def _pydantic_messages(prefix: str, exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "value"
        messages.append(f"{prefix}: '{location}' {error['msg'].lower()}")
    return messages


def parse_fields(items: Sequence[FieldInput]) -> tuple[list[FieldSpec], list[str]]:
    """Return the parsed field specs and any structural violations."""
    specs: list[FieldSpec] = []
    errors: list[str] = []
    for index, item in enumerate(items):
        record = _as_mapping(item)
        if record is None or not _present(record.get("name")) or not _present(record.get("type")):
            errors.append(f"Field at index {index} must have 'name' and 'type'")
            continue
        field_type = _type_value(record.get("type"))
        if field_type not in VALID_FIELD_TYPES:
            errors.append(f"Invalid field type '{field_type}' at index {index}")
            continue
        try:
            specs.append(FieldSpec.model_validate(dict(record)))
        except ValidationError as exc:
            errors.extend(_pydantic_messages(f"Field at index {index}", exc))
    return specs, errors


def parse_relationships(
    items: Sequence[RelationshipInput],
) -> tuple[list[RelationshipSpec], list[str]]:
    """Return the parsed relationship specs and any structural violations."""
    specs: list[RelationshipSpec] = []
    errors: list[str] = []
    for index, item in enumerate(items):
        record = _as_mapping(item)
        if record is None or not all(_present(record.get(key)) for key in ("name", "type", "target")):
            errors.append(
                f"Relationship at index {index} must have 'name', 'type', and 'target'"
            )
            continue
        rel_type = _type_value(record.get("type"))
        if rel_type not in VALID_RELATIONSHIP_TYPES:
            errors.append(f"Invalid relationship type '{rel_type}' at index {index}")
            continue
        try:
            specs.append(RelationshipSpec.model_validate(dict(record)))
        except ValidationError as exc:
            errors.extend(_pydantic_messages(f"Relationship at index {index}", exc))
    return specs, errors


def validate_structure(
    name: Any,
    fields: Sequence[FieldInput],
    relationships: Sequence[RelationshipInput],
) -> tuple[list[FieldSpec], list[RelationshipSpec]]:
    """Validate a complete schema definition, raising on any violation."""
    errors: list[str] = []
    if not isinstance(name, str) or not name.strip():
        errors.append("Name can't be blank")

    field_specs, field_errors = parse_fields(fields)
    relationship_specs, relationship_errors = parse_relationships(relationships)
    errors.extend(field_errors)
    errors.extend(relationship_errors)

    if errors:
        raise InvalidStructureError(errors)
    return field_specs, relationship_specs


__all__ = [
    "VALID_FIELD_TYPES",
    "VALID_RELATIONSHIP_TYPES",
    "parse_fields",
    "parse_relationships",
    "validate_structure",
]
