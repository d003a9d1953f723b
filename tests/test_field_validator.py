from __future__ import annotations

from datetime import datetime

import pytest

from entity_store.errors import ValidationFailedError
from entity_store.models.schema import FieldSpec, FieldType, Schema, UntypedSchema
from entity_store.validation.fields import FieldValidator

PRODUCT = Schema(
    name="product",
    fields=(
        FieldSpec(name="name", type=FieldType.STRING, required=True),
        FieldSpec(name="description", type=FieldType.TEXT),
        FieldSpec(name="price", type=FieldType.NUMBER, required=True),
        FieldSpec(name="active", type=FieldType.BOOLEAN, default=True, required=True),
        FieldSpec(name="released", type=FieldType.DATE),
        FieldSpec(name="image", type=FieldType.IMAGE),
    ),
)


def test_typed_schema_keeps_only_declared_fields():
    payload = {"name": "Desk", "price": 120, "colour": "oak", "active": False}

    validated = FieldValidator().validate(PRODUCT, payload)

    assert validated.name == "Desk"
    assert validated.data == {"price": 120, "active": False}


def test_name_never_lands_in_data():
    validated = FieldValidator().validate(PRODUCT, {"name": "Desk"})

    assert "name" not in validated.data


def test_type_errors_are_aggregated():
    payload = {"name": "", "price": "12", "active": "yes", "released": 20240101}

    with pytest.raises(ValidationFailedError) as excinfo:
        FieldValidator().validate(PRODUCT, payload)

    assert excinfo.value.messages == (
        "Name can't be blank",
        "Field 'price' must be a number, got str",
        "Field 'active' must be a boolean, got str",
        "Field 'released' must be a date string, got int",
    )


def test_boolean_is_not_a_number():
    with pytest.raises(ValidationFailedError):
        FieldValidator().validate(PRODUCT, {"name": "Desk", "price": True})


def test_null_clears_declared_field():
    validated = FieldValidator().validate(PRODUCT, {"name": "Desk", "description": None})

    assert validated.data == {"description": None}


def test_images_are_opaque():
    image = {"url": "data:image/png;base64,AAAA", "alt": "front"}

    validated = FieldValidator().validate(PRODUCT, {"name": "Desk", "image": image})

    assert validated.data["image"] == image


def test_values_must_be_json():
    with pytest.raises(ValidationFailedError) as excinfo:
        FieldValidator().validate(PRODUCT, {"name": "Desk", "image": datetime(2024, 1, 1)})

    assert excinfo.value.messages == ("Field 'image' is not a JSON value",)


def test_missing_required_is_accepted_by_default():
    validated = FieldValidator().validate(PRODUCT, {"name": "Desk"})

    assert validated.data == {}


def test_enforce_required_reports_missing_fields_without_default():
    validator = FieldValidator(enforce_required=True)

    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(PRODUCT, {"name": "Desk"})

    assert excinfo.value.messages == ("Field 'price' is required",)
    # updates are never checked for required fields
    assert validator.validate(PRODUCT, {"description": "x"}, partial=True).data == {"description": "x"}


def test_partial_payload_only_checks_supplied_name():
    validator = FieldValidator()

    validated = validator.validate(PRODUCT, {"price": 10}, partial=True)
    assert validated.name is None
    assert validated.data == {"price": 10}

    with pytest.raises(ValidationFailedError):
        validator.validate(PRODUCT, {"name": "  "}, partial=True)


def test_untyped_schema_takes_free_form_data_bag():
    schema = UntypedSchema(name="widget")
    payload = {"name": "Gizmo", "data": {"anything": [1, 2, {"deep": True}]}, "extra": 1}

    validated = FieldValidator().validate(schema, payload)

    assert validated.name == "Gizmo"
    assert validated.data == {"anything": [1, 2, {"deep": True}]}


def test_untyped_schema_rejects_non_mapping_data():
    with pytest.raises(ValidationFailedError) as excinfo:
        FieldValidator().validate(UntypedSchema(name="widget"), {"name": "Gizmo", "data": [1]})

    assert excinfo.value.messages == ("Data must be an object, received list.",)
