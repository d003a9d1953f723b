"""SQLAlchemy-backed repository for Entity models."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import uuid4

from sqlalchemy.orm import Session, sessionmaker

from entity_store.db.schema import DbEntity
from entity_store.errors import EntityNotFoundError
from entity_store.models.entity import Entity, EntityPage
from entity_store.repositories.filters import (
    DEFAULT_PER_PAGE,
    Pagination,
    apply_search,
)
from entity_store.repositories.relationship_graph import delete_edges_touching

logger = logging.getLogger(__name__)


class EntityRepository:
    """Repository that persists and hydrates Entity models from the database."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    # ------------------------------------------------------------------ Queries
    def get(self, entity_type: str, entity_id: str) -> Entity:
        """Fetch an entity of ``entity_type`` by id."""
        with self._session_factory() as session:
            return self._to_model(self._require_row(session, entity_type, entity_id))

    def find(self, entity_id: str) -> Entity | None:
        """Fetch an entity by id regardless of its type."""
        with self._session_factory() as session:
            row = session.get(DbEntity, str(entity_id))
            return self._to_model(row) if row is not None else None

    def list_by_type(
        self,
        entity_type: str,
        *,
        search: str | None = None,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> EntityPage:
        """Return one page of entities of ``entity_type``.

        Ordering is (created_at, id) so pages stay stable for a fixed snapshot.
        """
        window = Pagination(page=page, per_page=per_page)
        with self._session_factory() as session:
            query = session.query(DbEntity).filter(DbEntity.entity_type == entity_type)
            query = apply_search(query, DbEntity, search)

            total_count = query.count()
            rows = (
                query.order_by(DbEntity.created_at, DbEntity.id)
                .offset(window.offset)
                .limit(window.per_page)
                .all()
            )

        return EntityPage(
            items=[self._to_model(row) for row in rows],
            total_count=total_count,
            page=window.page,
            per_page=window.per_page,
        )

    # ----------------------------------------------------------- Mutating ops
    def create(self, entity_type: str, name: str, data: Mapping[str, Any] | None = None) -> Entity:
        now = _utcnow()
        row = DbEntity(
            id=str(uuid4()),
            entity_type=entity_type,
            name=name,
            data=dict(data or {}),
            created_at=now,
            updated_at=now,
        )
        with self._session_factory() as session:
            session.add(row)
            session.commit()
            return self._to_model(row)

    def update(
        self,
        entity_type: str,
        entity_id: str,
        data: Mapping[str, Any] | None = None,
        *,
        name: str | None = None,
    ) -> Entity:
        """Shallow-merge ``data`` into the stored data; absent keys are preserved."""
        with self._session_factory() as session:
            row = self._require_row(session, entity_type, entity_id)
            if data:
                row.data = {**(row.data or {}), **data}
            if name is not None:
                row.name = name
            row.updated_at = _utcnow()
            session.commit()
            return self._to_model(row)

    def delete(self, entity_type: str, entity_id: str) -> int:
        """Delete the entity and every edge touching it in one transaction.

        Returns the number of relationships removed alongside the entity.
        """
        with self._session_factory() as session:
            row = self._require_row(session, entity_type, entity_id)
            removed_edges = delete_edges_touching(session, row.id)
            session.delete(row)
            session.commit()
        logger.info(
            "Deleted %s %s and %d relationship(s)", entity_type, entity_id, removed_edges
        )
        return removed_edges

    # ----------------------------------------------------------------- Helpers
    @staticmethod
    def _require_row(session: Session, entity_type: str, entity_id: str) -> DbEntity:
        row = session.get(DbEntity, str(entity_id))
        if row is None or row.entity_type != entity_type:
            raise EntityNotFoundError(f"{entity_type.capitalize()} not found")
        return row

    @staticmethod
    def _to_model(record: DbEntity) -> Entity:
        return Entity(
            id=record.id,
            entity_type=record.entity_type,
            name=record.name,
            data=dict(record.data or {}),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["EntityRepository"]
