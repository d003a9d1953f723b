"""SQLAlchemy-backed graph of directed, typed relationships between entities."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, TypeVar
from uuid import uuid4

from sqlalchemy import func, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from entity_store.db.schema import DbEntity, DbRelationship
from entity_store.errors import (
    EntityNotFoundError,
    SelfRelationshipError,
    TargetNotFoundError,
    ValidationFailedError,
)
from entity_store.models.entity import Entity
from entity_store.models.relationship import (
    Relationship,
    RelationshipDetail,
    RelationshipSummary,
)

logger = logging.getLogger(__name__)

_UNIQUE_KEY = ["from_entity_id", "to_entity_id", "relationship_type"]
_DIRECTIONS = {"all", "outgoing", "incoming"}

T = TypeVar("T")


def delete_edges_touching(session: Session, entity_id: str) -> int:
    """Delete every edge where ``entity_id`` is either endpoint, inside ``session``.

    The caller owns the transaction; nothing is committed here.
    """
    return (
        session.query(DbRelationship)
        .filter(
            or_(
                DbRelationship.from_entity_id == entity_id,
                DbRelationship.to_entity_id == entity_id,
            )
        )
        .delete(synchronize_session=False)
    )


class RelationshipGraph:
    """Repository that owns relationship edges and answers graph queries."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    # ----------------------------------------------------------- Mutating ops
    def add(
        self,
        from_entity_id: str,
        to_entity_id: str,
        relationship_type: str,
        *,
        target_type: str | None = None,
    ) -> bool:
        """Create an edge; returns False when the identical edge already exists.

        ``target_type``, when given, must match the target entity's type.
        """
        if not relationship_type or not relationship_type.strip():
            raise ValidationFailedError(["Relationship type can't be blank"])
        if str(from_entity_id) == str(to_entity_id):
            raise SelfRelationshipError("Cannot create relationship to self")

        with self._session_factory() as session:
            if session.get(DbEntity, str(from_entity_id)) is None:
                raise EntityNotFoundError(f"Entity {from_entity_id} not found.")
            target = session.get(DbEntity, str(to_entity_id))
            if target is None or (target_type is not None and target.entity_type != target_type):
                raise TargetNotFoundError("Target entity not found")

            position = (
                session.query(func.coalesce(func.max(DbRelationship.position), 0))
                .filter(DbRelationship.from_entity_id == str(from_entity_id))
                .scalar()
            )
            payload = {
                "id": str(uuid4()),
                "from_entity_id": str(from_entity_id),
                "to_entity_id": str(to_entity_id),
                "relationship_type": relationship_type,
                "position": position + 1,
                "created_at": datetime.now(timezone.utc),
            }
            created = self._insert_ignoring_duplicates(session, payload)

        if not created:
            logger.debug(
                "Relationship %s -[%s]-> %s already exists",
                from_entity_id,
                relationship_type,
                to_entity_id,
            )
        return created

    def remove(self, from_entity_id: str, to_entity_id: str, relationship_type: str) -> int:
        """Delete matching edges; removing a missing edge is a no-op."""
        with self._session_factory() as session:
            removed = (
                session.query(DbRelationship)
                .filter(
                    DbRelationship.from_entity_id == str(from_entity_id),
                    DbRelationship.to_entity_id == str(to_entity_id),
                    DbRelationship.relationship_type == relationship_type,
                )
                .delete(synchronize_session=False)
            )
            session.commit()
            return removed

    def cascade_delete(self, entity_id: str) -> int:
        """Remove every edge touching ``entity_id`` in its own transaction."""
        with self._session_factory() as session:
            removed = delete_edges_touching(session, str(entity_id))
            session.commit()
            return removed

    # ------------------------------------------------------------------ Queries
    def get_relationships(self, entity_id: str, direction: str = "all") -> list[Relationship]:
        """Get edges for an entity filtered by direction ('all', 'outgoing', 'incoming')."""
        if direction not in _DIRECTIONS:
            raise ValueError(f"Unsupported direction: {direction}")

        with self._session_factory() as session:
            query = session.query(DbRelationship)
            e_id = str(entity_id)
            if direction == "outgoing":
                query = query.filter(DbRelationship.from_entity_id == e_id)
            elif direction == "incoming":
                query = query.filter(DbRelationship.to_entity_id == e_id)
            else:
                query = query.filter(
                    or_(
                        DbRelationship.from_entity_id == e_id,
                        DbRelationship.to_entity_id == e_id,
                    )
                )
            rows = query.order_by(DbRelationship.position, DbRelationship.created_at).all()
            return [Relationship.model_validate(row) for row in rows]

    def outgoing_grouped_by_type(self, from_entity_id: str) -> dict[str, list[RelationshipDetail]]:
        """Targets of outgoing edges grouped by type, including target data."""
        return self._grouped(from_entity_id, _to_detail)

    def outgoing_summaries(self, from_entity_id: str) -> dict[str, list[RelationshipSummary]]:
        """Targets of outgoing edges grouped by type, as type/id/name only."""
        return self._grouped(from_entity_id, _to_summary)

    def related_entities(self, from_entity_id: str, relationship_type: str) -> list[Entity]:
        """Entities reached from ``from_entity_id`` over edges of ``relationship_type``."""
        with self._session_factory() as session:
            rows = (
                session.query(DbEntity)
                .join(DbRelationship, DbRelationship.to_entity_id == DbEntity.id)
                .filter(
                    DbRelationship.from_entity_id == str(from_entity_id),
                    DbRelationship.relationship_type == relationship_type,
                )
                .order_by(DbRelationship.position, DbRelationship.created_at)
                .all()
            )
            return [Entity.model_validate(row) for row in rows]

    # ----------------------------------------------------------------- Helpers
    def _grouped(
        self,
        from_entity_id: str,
        project: Callable[[DbEntity], T],
    ) -> dict[str, list[T]]:
        # Inner join drops edges whose target row has gone missing.
        with self._session_factory() as session:
            rows = (
                session.query(DbRelationship.relationship_type, DbEntity)
                .join(DbEntity, DbRelationship.to_entity_id == DbEntity.id)
                .filter(DbRelationship.from_entity_id == str(from_entity_id))
                .order_by(
                    DbRelationship.position,
                    DbRelationship.created_at,
                    DbRelationship.id,
                )
                .all()
            )
            grouped: dict[str, list[T]] = {}
            for relationship_type, target in rows:
                grouped.setdefault(relationship_type, []).append(project(target))
            return grouped

    @staticmethod
    def _insert_ignoring_duplicates(session: Session, payload: dict[str, object]) -> bool:
        dialect = session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = pg_insert(DbRelationship).values(payload).on_conflict_do_nothing(
                index_elements=_UNIQUE_KEY
            )
        elif dialect == "sqlite":
            stmt = sqlite_insert(DbRelationship).values(payload).on_conflict_do_nothing(
                index_elements=_UNIQUE_KEY
            )
        else:
            session.add(DbRelationship(**payload))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                return False
            return True

        result = session.execute(stmt)
        session.commit()
        return result.rowcount > 0


def _to_summary(target: DbEntity) -> RelationshipSummary:
    return RelationshipSummary(type=target.entity_type, id=target.id, name=target.name)


def _to_detail(target: DbEntity) -> RelationshipDetail:
    return RelationshipDetail(
        type=target.entity_type,
        id=target.id,
        name=target.name,
        data=dict(target.data or {}),
    )


__all__ = ["RelationshipGraph", "delete_edges_touching"]
