"""Payload validation for entity writes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import JsonValue, TypeAdapter, ValidationError

from entity_store.errors import ValidationFailedError
from entity_store.models.schema import RESERVED_NAME_KEY, AnySchema, FieldType

_DATA_ADAPTER = TypeAdapter(dict[str, JsonValue])


@dataclass(frozen=True, slots=True)
class ValidatedPayload:
    """Entity name and data extracted from a request payload."""

    name: str | None
    data: dict[str, Any] = field(default_factory=dict)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_opaque(value: Any) -> bool:
    return True


_TYPE_CHECKS: dict[FieldType, tuple[Callable[[Any], bool], str]] = {
    FieldType.STRING: (_is_str, "a string"),
    FieldType.TEXT: (_is_str, "a string"),
    FieldType.DATE: (_is_str, "a date string"),
    FieldType.NUMBER: (_is_number, "a number"),
    FieldType.BOOLEAN: (_is_bool, "a boolean"),
    FieldType.IMAGE: (_is_opaque, "an image"),
    FieldType.IMAGE_GALLERY: (_is_opaque, "an image gallery"),
}


class FieldValidator:
    """Filter and check an entity payload against a typed or untyped schema.

    Typed schemas act as an allow-list: keys that are not declared fields are
    dropped without complaint. Untyped schemas take ``name`` plus the free-form
    mapping under ``data``.

    ``enforce_required`` is off by default, so a missing required field is
    accepted. When enabled, a create without a required field that also has
    no default is rejected.
    """

    def __init__(self, *, enforce_required: bool = False):
        self._enforce_required = enforce_required

    @property
    def enforce_required(self) -> bool:
        return self._enforce_required

    def validate(
        self,
        schema: AnySchema,
        payload: Mapping[str, Any],
        *,
        partial: bool = False,
    ) -> ValidatedPayload:
        """Return the accepted name/data or raise with every violation found.

        ``partial`` marks an update: ``name`` and required fields are only
        checked when supplied.
        """
        errors: list[str] = []

        name = payload.get(RESERVED_NAME_KEY)
        if RESERVED_NAME_KEY in payload or not partial:
            if not isinstance(name, str) or not name.strip():
                errors.append("Name can't be blank")

        try:
            data = schema.select_data(payload)
        except TypeError as exc:
            errors.append(str(exc))
            data = {}

        for spec in schema.fields:
            if spec.name == RESERVED_NAME_KEY:
                continue
            if spec.name not in data:
                if (
                    self._enforce_required
                    and not partial
                    and spec.required
                    and spec.default is None
                ):
                    errors.append(f"Field '{spec.name}' is required")
                continue
            value = data[spec.name]
            if value is None:
                continue
            check, expected = _TYPE_CHECKS[spec.type]
            if not check(value):
                errors.append(
                    f"Field '{spec.name}' must be {expected}, got {type(value).__name__}"
                )

        try:
            data = _DATA_ADAPTER.validate_python(data)
        except ValidationError as exc:
            bad_keys = dict.fromkeys(
                error["loc"][0] if error["loc"] else "data" for error in exc.errors()
            )
            errors.extend(f"Field '{key}' is not a JSON value" for key in bad_keys)

        if errors:
            raise ValidationFailedError(errors)
        return ValidatedPayload(name=name if isinstance(name, str) else None, data=data)


__all__ = ["FieldValidator", "ValidatedPayload"]
