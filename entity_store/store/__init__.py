"""Entity store orchestration helpers."""

from .assembler import EntityAssembler
from .entity_store import EntityStore
from .factory import create_entity_store

__all__ = ["EntityAssembler", "EntityStore", "create_entity_store"]
