"""Error taxonomy shared by the schema store, repositories and façade."""

from __future__ import annotations

from typing import Iterable


class EntityStoreError(RuntimeError):
    """Base class for entity store errors."""


class NotFoundError(EntityStoreError):
    """Raised when a lookup by name or identifier fails."""


class SchemaNotFoundError(NotFoundError):
    """Raised when no schema exists under the requested name."""


class EntityNotFoundError(NotFoundError):
    """Raised when an entity of the requested type and id does not exist."""


class TargetNotFoundError(NotFoundError):
    """Raised when the target of a relationship operation does not exist."""


class DuplicateNameError(EntityStoreError):
    """Raised when a schema name is already taken."""


class SelfRelationshipError(EntityStoreError):
    """Raised when a relationship would point an entity at itself."""


class _AggregatedError(EntityStoreError):
    """Error carrying every violation found in one call."""

    def __init__(self, messages: Iterable[str]):
        self.messages: tuple[str, ...] = tuple(messages)
        super().__init__("; ".join(self.messages))


class InvalidStructureError(_AggregatedError):
    """Raised when a schema's field or relationship list is malformed."""


class ValidationFailedError(_AggregatedError):
    """Raised when an entity payload violates its schema's field constraints."""


__all__ = [
    "DuplicateNameError",
    "EntityNotFoundError",
    "EntityStoreError",
    "InvalidStructureError",
    "NotFoundError",
    "SchemaNotFoundError",
    "SelfRelationshipError",
    "TargetNotFoundError",
    "ValidationFailedError",
]
