from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from nexuserp.config import KEY_PATTERN
from nexuserp.errors import SchemaDefinitionError


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    DATE = "date"
    SELECT = "select"
    CHECKBOX = "checkbox"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldSchema:
    key: str
    label: str = ""
    type: FieldType = FieldType.TEXT
    required: bool = False
    options: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", FieldType(self.type))
        object.__setattr__(self, "required", bool(self.required))
        if self.type is FieldType.SELECT:
            object.__setattr__(self, "options", normalize_options(self.options))
        else:
            object.__setattr__(self, "options", ())

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> FieldSchema:
        return cls(
            key=str(raw.get("key") or ""),
            label=str(raw.get("label") or ""),
            type=FieldType(str(raw.get("type") or "").strip()),
            required=bool(raw.get("required")),
            options=normalize_options(raw.get("options")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "key": self.key,
            "label": self.label,
            "type": self.type.value,
            "required": self.required,
        }
        if self.type is FieldType.SELECT:
            payload["options"] = list(self.options)
        return payload


def normalize_options(raw: Any) -> tuple[str, ...]:
    """Accept a list of strings or the designer's comma separated text."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = raw.split(",")
    return tuple(
        value.strip()
        for value in raw
        if isinstance(value, str) and value.strip()
    )


def validate_definition(fields: Sequence[FieldSchema]) -> list[SchemaDefinitionError]:
    errors: list[SchemaDefinitionError] = []
    seen_keys: set[str] = set()
    reported: set[str] = set()
    for index, item in enumerate(fields):
        key = item.key.strip()
        if not key:
            errors.append(SchemaDefinitionError.missing_key(index))
            continue
        if not KEY_PATTERN.fullmatch(item.key):
            errors.append(SchemaDefinitionError.invalid_key(item.key))
            continue
        if key in seen_keys:
            if key not in reported:
                errors.append(SchemaDefinitionError.duplicate_key(key))
                reported.add(key)
        else:
            seen_keys.add(key)
    return errors


def parse_fields(raw_fields: Any) -> tuple[list[FieldSchema], list[str]]:
    errors: list[str] = []
    if raw_fields is None:
        return [], []
    if not isinstance(raw_fields, list):
        return [], ["fields must be a list"]

    fields: list[FieldSchema] = []
    for index, raw in enumerate(raw_fields, start=1):
        loc = f"field {index}"
        if not isinstance(raw, dict):
            errors.append(f"{loc}: expected an object")
            continue
        field_type = str(raw.get("type", "")).strip()
        try:
            fields.append(FieldSchema.from_dict(raw))
        except ValueError:
            errors.append(f"{loc}: invalid type ({field_type})")
    return fields, errors


def _text_property(item: FieldSchema) -> dict[str, Any]:
    return {"type": "string"}


def _textarea_property(item: FieldSchema) -> dict[str, Any]:
    return {"type": "string", "x-multiline": True}


def _number_property(item: FieldSchema) -> dict[str, Any]:
    return {"type": "number"}


def _date_property(item: FieldSchema) -> dict[str, Any]:
    return {"type": "string", "format": "date"}


def _select_property(item: FieldSchema) -> dict[str, Any]:
    enum: list[str] = list(item.options)
    if not item.required:
        enum.append("")
    return {"type": "string", "enum": enum}


def _checkbox_property(item: FieldSchema) -> dict[str, Any]:
    return {"type": "boolean"}


PROPERTY_BUILDERS: dict[FieldType, Callable[[FieldSchema], dict[str, Any]]] = {
    FieldType.TEXT: _text_property,
    FieldType.TEXTAREA: _textarea_property,
    FieldType.NUMBER: _number_property,
    FieldType.DATE: _date_property,
    FieldType.SELECT: _select_property,
    FieldType.CHECKBOX: _checkbox_property,
}


def build_property(item: FieldSchema) -> dict[str, Any]:
    prop = PROPERTY_BUILDERS[item.type](item)
    prop["title"] = item.label or item.key
    prop["x-field-type"] = item.type.value
    return prop
