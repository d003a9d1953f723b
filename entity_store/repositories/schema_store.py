"""SQLAlchemy-backed store for named entity-type schemas."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from entity_store.db.schema import DbSchema
from entity_store.errors import DuplicateNameError, SchemaNotFoundError
from entity_store.models.schema import (
    FieldSpec,
    RelationshipSpec,
    Schema,
    UntypedSchema,
)
from entity_store.validation.structure import (
    FieldInput,
    RelationshipInput,
    validate_structure,
)

logger = logging.getLogger(__name__)


class SchemaStore:
    """Repository that persists and hydrates Schema models.

    Every mutation validates the complete resulting definition before anything
    is written, so a rejected change leaves the stored schema untouched.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    # ------------------------------------------------------------------ Queries
    def get(self, name: str) -> Schema | None:
        with self._session_factory() as session:
            row = self._row_by_name(session, name)
            return self._to_model(row) if row is not None else None

    def find(self, name: str) -> Schema:
        schema = self.get(name)
        if schema is None:
            raise SchemaNotFoundError(f"Schema '{name}' not found.")
        return schema

    def resolve(self, name: str) -> Schema | UntypedSchema:
        """Return the stored schema, or the untyped fallback for ``name``.

        A stored schema that declares no fields has nothing to filter by and
        resolves to the untyped fallback as well.
        """
        schema = self.get(name)
        if schema is None or not schema.fields:
            return UntypedSchema(name=name)
        return schema

    def list(self) -> list[Schema]:
        with self._session_factory() as session:
            rows = session.query(DbSchema).order_by(DbSchema.name).all()
            return [self._to_model(row) for row in rows]

    # ----------------------------------------------------------- Mutating ops
    def create(
        self,
        name: str,
        fields: Sequence[FieldInput] = (),
        relationships: Sequence[RelationshipInput] = (),
    ) -> Schema:
        field_specs, relationship_specs = validate_structure(name, fields, relationships)

        now = _utcnow()
        row = DbSchema(
            id=str(uuid4()),
            name=name,
            fields=[spec.to_record() for spec in field_specs],
            relationships=[spec.to_record() for spec in relationship_specs],
            created_at=now,
            updated_at=now,
        )
        with self._session_factory() as session:
            if self._row_by_name(session, name) is not None:
                raise DuplicateNameError(f"Schema '{name}' already exists.")
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateNameError(f"Schema '{name}' already exists.") from exc
            logger.info("Created schema %s with %d field(s)", name, len(field_specs))
            return self._to_model(row)

    def update(
        self,
        name: str,
        fields: Sequence[FieldInput] | None = None,
        relationships: Sequence[RelationshipInput] | None = None,
    ) -> Schema:
        """Replace whichever of ``fields``/``relationships`` is supplied."""
        with self._session_factory() as session:
            row = self._require_row(session, name)
            field_specs, relationship_specs = validate_structure(
                name,
                fields if fields is not None else row.fields or [],
                relationships if relationships is not None else row.relationships or [],
            )
            return self._commit_specs(session, row, field_specs, relationship_specs)

    def add_field(self, name: str, field: FieldInput) -> Schema:
        with self._session_factory() as session:
            row = self._require_row(session, name)
            field_specs, relationship_specs = validate_structure(
                name, [*(row.fields or []), field], row.relationships or []
            )
            return self._commit_specs(session, row, field_specs, relationship_specs)

    def remove_field(self, name: str, field_name: str) -> Schema:
        with self._session_factory() as session:
            row = self._require_row(session, name)
            remaining = [item for item in row.fields or [] if item.get("name") != field_name]
            field_specs, relationship_specs = validate_structure(
                name, remaining, row.relationships or []
            )
            return self._commit_specs(session, row, field_specs, relationship_specs)

    def add_relationship(self, name: str, relationship: RelationshipInput) -> Schema:
        with self._session_factory() as session:
            row = self._require_row(session, name)
            field_specs, relationship_specs = validate_structure(
                name, row.fields or [], [*(row.relationships or []), relationship]
            )
            return self._commit_specs(session, row, field_specs, relationship_specs)

    def remove_relationship(self, name: str, relationship_name: str) -> Schema:
        with self._session_factory() as session:
            row = self._require_row(session, name)
            remaining = [
                item for item in row.relationships or [] if item.get("name") != relationship_name
            ]
            field_specs, relationship_specs = validate_structure(
                name, row.fields or [], remaining
            )
            return self._commit_specs(session, row, field_specs, relationship_specs)

    def delete(self, name: str) -> None:
        """Remove the schema; entities of that type are left as they are."""
        with self._session_factory() as session:
            row = self._require_row(session, name)
            session.delete(row)
            session.commit()
            logger.info("Deleted schema %s", name)

    # ----------------------------------------------------------------- Helpers
    @staticmethod
    def _row_by_name(session: Session, name: str) -> DbSchema | None:
        return session.query(DbSchema).filter(DbSchema.name == name).one_or_none()

    def _require_row(self, session: Session, name: str) -> DbSchema:
        row = self._row_by_name(session, name)
        if row is None:
            raise SchemaNotFoundError(f"Schema '{name}' not found.")
        return row

    def _commit_specs(
        self,
        session: Session,
        row: DbSchema,
        field_specs: Sequence[FieldSpec],
        relationship_specs: Sequence[RelationshipSpec],
    ) -> Schema:
        row.fields = [spec.to_record() for spec in field_specs]
        row.relationships = [spec.to_record() for spec in relationship_specs]
        row.updated_at = _utcnow()
        session.commit()
        return self._to_model(row)

    @staticmethod
    def _to_model(record: DbSchema) -> Schema:
        return Schema(
            id=record.id,
            name=record.name,
            fields=tuple(FieldSpec.model_validate(item) for item in record.fields or []),
            relationships=tuple(
                RelationshipSpec.model_validate(item) for item in record.relationships or []
            ),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["SchemaStore"]
