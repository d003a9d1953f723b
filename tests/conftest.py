from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Any, Callable

import pytest
from sqlalchemy.engine import Engine

from entity_store.db.engine import create_engine, create_session_factory
from entity_store.db.schema import Base, DbEntity, DbRelationship, DbSchema, create_all
from entity_store.models.entity import Entity
from entity_store.repositories.entity_repository import EntityRepository
from entity_store.repositories.relationship_graph import RelationshipGraph
from entity_store.repositories.schema_store import SchemaStore
from entity_store.store import EntityStore, create_entity_store


@pytest.fixture(scope="session")
def postgres_url() -> str | None:
    """Return the Postgres test URL if provided via env."""
    return os.getenv("POSTGRES_TEST_URL") or os.getenv("DATABASE_URL")


@pytest.fixture
def engine(postgres_url: str | None) -> Iterator[Engine]:
    """Yield an engine targeting Postgres when configured; otherwise SQLite in-memory."""
    engine = create_engine(postgres_url) if postgres_url else create_engine()
    create_all(engine)
    try:
        yield engine
    finally:
        with engine.begin() as connection:
            if engine.dialect.name == "sqlite":
                Base.metadata.drop_all(bind=connection)
            else:
                connection.execute(DbRelationship.__table__.delete())
                connection.execute(DbEntity.__table__.delete())
                connection.execute(DbSchema.__table__.delete())


@pytest.fixture
def session_factory(engine: Engine):
    return create_session_factory(engine)


@pytest.fixture
def schema_store(session_factory) -> SchemaStore:
    return SchemaStore(session_factory)


@pytest.fixture
def entity_repository(session_factory) -> EntityRepository:
    return EntityRepository(session_factory)


@pytest.fixture
def relationship_graph(session_factory) -> RelationshipGraph:
    return RelationshipGraph(session_factory)


@pytest.fixture
def entity_store(session_factory) -> EntityStore:
    return create_entity_store(session_factory)


@pytest.fixture
def entity_factory(entity_repository: EntityRepository) -> Callable[..., Entity]:
    def _factory(
        name: str = "Sample",
        *,
        entity_type: str = "category",
        data: dict[str, Any] | None = None,
    ) -> Entity:
        return entity_repository.create(entity_type, name, data or {})

    return _factory
