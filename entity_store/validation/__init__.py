"""Schema structure and entity payload validation."""

from .fields import FieldValidator, ValidatedPayload
from .structure import parse_fields, parse_relationships, validate_structure

__all__ = [
    "FieldValidator",
    "ValidatedPayload",
    "parse_fields",
    "parse_relationships",
    "validate_structure",
]
