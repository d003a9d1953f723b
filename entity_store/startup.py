"""Startup helpers for bootstrapping schemas and a sample catalog."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from entity_store.models.schema import Schema
from entity_store.store.entity_store import EntityStore

CATALOG_SCHEMAS: dict[str, dict[str, list[dict[str, Any]]]] = {
    "product": {
        "fields": [
            {"name": "name", "type": "string", "required": True, "label": "Product Name"},
            {"name": "description", "type": "text", "required": False, "label": "Description"},
            {"name": "price", "type": "number", "required": True, "label": "Price"},
            {"name": "image", "type": "image", "required": False, "label": "Product Image"},
            {"name": "gallery", "type": "image_gallery", "required": False, "label": "Image Gallery"},
            {"name": "active", "type": "boolean", "required": False, "label": "Active", "default": True},
        ],
        "relationships": [
            {"name": "category", "type": "belongsTo", "target": "category", "label": "Category"},
            {"name": "tags", "type": "hasMany", "target": "tag", "label": "Tags"},
        ],
    },
    "category": {
        "fields": [
            {"name": "name", "type": "string", "required": True, "label": "Category Name"},
            {"name": "description", "type": "text", "required": False, "label": "Description"},
            {"name": "image", "type": "image", "required": False, "label": "Category Image"},
            {"name": "active", "type": "boolean", "required": False, "label": "Active", "default": True},
        ],
        "relationships": [
            {"name": "parent", "type": "belongsTo", "target": "category", "label": "Parent Category"},
            {"name": "products", "type": "hasMany", "target": "product", "label": "Products"},
        ],
    },
    "tag": {
        "fields": [
            {"name": "name", "type": "string", "required": True, "label": "Tag Name"},
            {"name": "color", "type": "string", "required": False, "label": "Color"},
        ],
        "relationships": [
            {"name": "products", "type": "hasMany", "target": "product", "label": "Products"},
        ],
    },
}


def ensure_schema(
    store: EntityStore,
    name: str,
    *,
    fields: Sequence[Mapping[str, Any]] = (),
    relationships: Sequence[Mapping[str, Any]] = (),
) -> Schema:
    """Return the schema called ``name``, creating it when missing.

    An existing schema is returned as stored; its fields are not reconciled
    with the ones supplied here.
    """
    existing = store.schemas.get(name)
    if existing is not None:
        return existing
    return store.create_schema(name, fields, relationships)


def seed_catalog(store: EntityStore) -> dict[str, Schema]:
    """Create the product/category/tag schemas and, on first run, sample data.

    Sample entities are only added when no category exists yet, so calling
    this repeatedly is safe.
    """
    schemas = {
        name: ensure_schema(store, name, **definition)
        for name, definition in CATALOG_SCHEMAS.items()
    }
    if store.list_entities("category", per_page=1).total_count:
        return schemas

    electronics = store.create_entity(
        "category",
        {"name": "Electronics", "description": "Electronic devices and accessories", "active": True},
    )
    laptops = store.create_entity(
        "category",
        {"name": "Laptops", "description": "Portable computers", "active": True},
    )
    store.add_relationship(
        "category", laptops.id, "parent", target_type="category", target_id=electronics.id
    )

    technology = store.create_entity("tag", {"name": "Technology", "color": "#007bff"})
    popular = store.create_entity("tag", {"name": "Popular", "color": "#28a745"})

    macbook = store.create_entity(
        "product",
        {
            "name": 'MacBook Pro 14"',
            "description": "Powerful laptop for professionals",
            "price": 1999.99,
            "active": True,
        },
    )
    store.add_relationship(
        "product", macbook.id, "category", target_type="category", target_id=laptops.id
    )
    for tag in (technology, popular):
        store.add_relationship("product", macbook.id, "tags", target_type="tag", target_id=tag.id)

    return schemas


__all__ = ["CATALOG_SCHEMAS", "ensure_schema", "seed_catalog"]
