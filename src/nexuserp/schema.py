from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from jsonschema import Draft7Validator

from nexuserp.config import ALLOWED_TYPES, DEFAULT_ICON, KEY_PATTERN
from nexuserp.fields import FieldSchema, build_property
from nexuserp.icons import resolve_icon

# Structural contract for a field list arriving from the designer.
FIELD_LIST_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["key", "type"],
        "properties": {
            "key": {"type": "string", "pattern": KEY_PATTERN.pattern},
            "label": {"type": "string"},
            "type": {"type": "string", "enum": list(ALLOWED_TYPES)},
            "required": {"type": "boolean"},
            "options": {"type": "array", "items": {"type": "string"}},
        },
    },
}

_FIELD_LIST_VALIDATOR = Draft7Validator(FIELD_LIST_SCHEMA)


def check_fields_payload(raw_fields: Any) -> list[str]:
    errors = sorted(_FIELD_LIST_VALIDATOR.iter_errors(raw_fields), key=lambda err: list(err.path))
    messages: list[str] = []
    for error in errors:
        location = ".".join(str(part) for part in error.path)
        messages.append(f"fields.{location}: {error.message}" if location else error.message)
    return messages


@dataclass(frozen=True)
class FormSchema:
    id: int
    module_id: int
    name: str
    description: str = ""
    fields: tuple[FieldSchema, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def with_fields(self, new_fields: Iterable[FieldSchema]) -> FormSchema:
        return replace(self, fields=tuple(new_fields))

    def get_field(self, key: str) -> FieldSchema | None:
        for item in self.fields:
            if item.key == key:
                return item
        return None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> FormSchema:
        return cls(
            id=raw["id"],
            module_id=raw["module_id"],
            name=raw.get("name") or "",
            description=raw.get("description") or "",
            fields=tuple(FieldSchema.from_dict(item) for item in raw.get("fields") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "module_id": self.module_id,
            "name": self.name,
            "description": self.description,
            "fields": [item.to_dict() for item in self.fields],
        }


@dataclass(frozen=True)
class Module:
    id: int
    name: str
    description: str = ""
    icon: str = DEFAULT_ICON

    @property
    def glyph(self) -> str:
        return resolve_icon(self.icon)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Module:
        return cls(
            id=raw["id"],
            name=raw.get("name") or "",
            description=raw.get("description") or "",
            icon=raw.get("icon") or DEFAULT_ICON,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "glyph": self.glyph,
        }


@dataclass(frozen=True)
class Record:
    id: int
    form_id: int
    data: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Record:
        return cls(id=raw["id"], form_id=raw["form_id"], data=dict(raw.get("data") or {}))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "form_id": self.form_id, "data": dict(self.data)}


@dataclass(frozen=True)
class DocumentTemplate:
    id: int
    module_id: int
    name: str
    content: str = ""
    styles: str = ""
    form_id: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> DocumentTemplate:
        return cls(
            id=raw["id"],
            module_id=raw["module_id"],
            name=raw.get("name") or "",
            content=raw.get("content") or "",
            styles=raw.get("styles") or "",
            form_id=raw.get("form_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "module_id": self.module_id,
            "form_id": self.form_id,
            "name": self.name,
            "content": self.content,
            "styles": self.styles,
        }


def form_json_schema(form: FormSchema) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    field_order: list[str] = []
    for item in form.fields:
        field_order.append(item.key)
        properties[item.key] = build_property(item)
        if item.required:
            required.append(item.key)
    schema: dict[str, Any] = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": form.name,
        "type": "object",
        "properties": properties,
        "x-field-order": field_order,
    }
    if form.description:
        schema["description"] = form.description
    if required:
        schema["required"] = required
    return schema
