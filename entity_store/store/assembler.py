"""Compose external representations of entities and their relationships."""

from __future__ import annotations

from typing import Any

from entity_store.models.entity import Entity
from entity_store.repositories.relationship_graph import RelationshipGraph


class EntityAssembler:
    """Build the dictionaries a boundary layer serialises for entities.

    The full view embeds relationships as ``{type, id, name}`` while the
    relationship listing also carries each target's ``data``.
    """

    def __init__(self, relationship_graph: RelationshipGraph):
        self._graph = relationship_graph

    def full_view(self, entity: Entity) -> dict[str, Any]:
        view: dict[str, Any] = {
            "id": entity.id,
            "entity_type": entity.entity_type,
            "name": entity.name,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }
        # Data keys win over the reserved keys above.
        view.update(entity.data)

        relationships = {
            rel_type: [summary.model_dump() for summary in summaries]
            for rel_type, summaries in self._graph.outgoing_summaries(entity.id).items()
        }
        if relationships:
            view["relationships"] = relationships
        return view

    def relationship_listing(self, entity: Entity) -> dict[str, list[dict[str, Any]]]:
        return {
            rel_type: [detail.model_dump() for detail in details]
            for rel_type, details in self._graph.outgoing_grouped_by_type(entity.id).items()
        }


__all__ = ["EntityAssembler"]
