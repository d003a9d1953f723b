from __future__ import annotations

import pytest

from entity_store.errors import (
    DuplicateNameError,
    InvalidStructureError,
    SchemaNotFoundError,
)
from entity_store.models.schema import (
    FieldSpec,
    FieldType,
    RelationshipKind,
    RelationshipSpec,
    UntypedSchema,
)

PRODUCT_FIELDS = [
    {"name": "name", "type": "string", "required": True, "label": "Product Name"},
    {"name": "price", "type": "number", "required": True, "label": "Price"},
    {"name": "active", "type": "boolean", "label": "Active", "default": True},
]
PRODUCT_RELATIONSHIPS = [
    {"name": "category", "type": "belongsTo", "target": "category", "label": "Category"},
    {"name": "tags", "type": "hasMany", "target": "tag", "label": "Tags"},
]


def test_create_then_find_round_trips_fields_in_order(schema_store):
    schema_store.create("product", PRODUCT_FIELDS, PRODUCT_RELATIONSHIPS)

    schema = schema_store.find("product")

    assert schema.name == "product"
    assert schema.field_names == ["name", "price", "active"]
    assert schema.fields[1] == FieldSpec(
        name="price", type=FieldType.NUMBER, label="Price", required=True
    )
    assert schema.fields[2].default is True
    assert [rel.name for rel in schema.relationships] == ["category", "tags"]
    assert schema.relationships[1] == RelationshipSpec(
        name="tags", type=RelationshipKind.HAS_MANY, target="tag", label="Tags"
    )


def test_create_accepts_spec_models(schema_store):
    schema = schema_store.create(
        "tag",
        [FieldSpec(name="color", type=FieldType.STRING)],
        [RelationshipSpec(name="products", type=RelationshipKind.HAS_MANY, target="product")],
    )

    stored = schema_store.find("tag")
    assert stored.fields == schema.fields
    assert stored.relationships == schema.relationships


def test_duplicate_name_is_rejected_and_existing_schema_kept(schema_store):
    schema_store.create("product", PRODUCT_FIELDS)

    with pytest.raises(DuplicateNameError):
        schema_store.create("product", [{"name": "sku", "type": "string"}])

    assert schema_store.find("product").field_names == ["name", "price", "active"]


def test_schema_names_are_case_sensitive(schema_store):
    schema_store.create("product")
    schema_store.create("Product")

    assert {schema.name for schema in schema_store.list()} == {"Product", "product"}


def test_structural_errors_are_reported_together(schema_store):
    with pytest.raises(InvalidStructureError) as excinfo:
        schema_store.create(
            "",
            [
                {"name": "title", "type": "string"},
                {"type": "string"},
                {"name": "hue", "type": "color"},
            ],
            [
                {"name": "owner", "type": "belongsTo"},
                {"name": "peers", "type": "manyToMany", "target": "user"},
            ],
        )

    assert excinfo.value.messages == (
        "Name can't be blank",
        "Field at index 1 must have 'name' and 'type'",
        "Invalid field type 'color' at index 2",
        "Relationship at index 0 must have 'name', 'type', and 'target'",
        "Invalid relationship type 'manyToMany' at index 1",
    )
    assert schema_store.list() == []


def test_find_missing_schema_raises(schema_store):
    with pytest.raises(SchemaNotFoundError):
        schema_store.find("ghost")


def test_resolve_falls_back_to_untyped_schema(schema_store):
    schema_store.create("product", PRODUCT_FIELDS)

    assert schema_store.resolve("product").kind == "typed"
    fallback = schema_store.resolve("widget")
    assert isinstance(fallback, UntypedSchema)
    assert fallback.name == "widget"


def test_schema_without_fields_resolves_to_untyped(schema_store):
    schema_store.create("category")

    assert isinstance(schema_store.resolve("category"), UntypedSchema)
    assert schema_store.find("category").kind == "typed"


def test_schema_timestamps_match_between_create_and_find(schema_store):
    created = schema_store.create("product", PRODUCT_FIELDS)
    updated = schema_store.add_field("product", {"name": "sku", "type": "string"})

    assert schema_store.find("product").created_at == created.created_at
    assert updated.created_at == created.created_at
    assert updated.updated_at >= updated.created_at


def test_update_replaces_only_supplied_lists(schema_store):
    schema_store.create("product", PRODUCT_FIELDS, PRODUCT_RELATIONSHIPS)

    updated = schema_store.update("product", fields=[{"name": "sku", "type": "string"}])

    assert updated.field_names == ["sku"]
    assert [rel.name for rel in updated.relationships] == ["category", "tags"]


def test_update_validates_result(schema_store):
    schema_store.create("product", PRODUCT_FIELDS)

    with pytest.raises(InvalidStructureError):
        schema_store.update("product", relationships=[{"name": "x", "type": "hasOne", "target": "y"}])

    with pytest.raises(SchemaNotFoundError):
        schema_store.update("ghost", fields=[])


def test_add_field_appends(schema_store):
    schema_store.create("product", PRODUCT_FIELDS)

    schema = schema_store.add_field("product", {"name": "released", "type": "date", "label": "Released"})

    assert schema.field_names == ["name", "price", "active", "released"]
    assert schema_store.find("product").field_by_name("released").type is FieldType.DATE


def test_add_field_with_bad_type_leaves_schema_unchanged(schema_store):
    original = schema_store.create("product", PRODUCT_FIELDS)

    with pytest.raises(InvalidStructureError) as excinfo:
        schema_store.add_field("product", {"name": "hue", "type": "color"})

    assert excinfo.value.messages == ("Invalid field type 'color' at index 3",)
    assert schema_store.find("product").fields == original.fields


def test_remove_field_is_idempotent(schema_store):
    schema_store.create("product", PRODUCT_FIELDS)

    schema_store.remove_field("product", "price")
    schema = schema_store.remove_field("product", "price")

    assert schema.field_names == ["name", "active"]

    with pytest.raises(SchemaNotFoundError):
        schema_store.remove_field("ghost", "price")


def test_add_and_remove_relationship_spec(schema_store):
    schema_store.create("category")

    schema = schema_store.add_relationship(
        "category", {"name": "parent", "type": "belongsTo", "target": "category"}
    )
    assert schema.relationship_by_name("parent").target == "category"

    schema = schema_store.remove_relationship("category", "parent")
    assert schema.relationships == ()


def test_delete_schema(schema_store):
    schema_store.create("product", PRODUCT_FIELDS)

    schema_store.delete("product")

    assert schema_store.get("product") is None
    with pytest.raises(SchemaNotFoundError):
        schema_store.delete("product")
