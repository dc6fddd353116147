"""Form designer editing session.

A session holds the draft field list for one form. It is either ``Idle`` or
``Editing(index)``; a successful :meth:`DesignerSession.save` closes it. The
draft is only written through the persistence collaborator on save, and a
failed save leaves the draft untouched so it can be retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Union

from nexuserp.errors import NexusError, SchemaDefinitionError, SessionClosedError, TransportError
from nexuserp.fields import FieldSchema, FieldType, normalize_options, validate_definition
from nexuserp.persistence import FormPersistence
from nexuserp.schema import FormSchema
from nexuserp.utils import generate_field_key

logger = logging.getLogger(__name__)

EDITABLE_ATTRIBUTES = ("key", "label", "type", "required", "options")


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Editing:
    index: int


DesignerState = Union[Idle, Editing]


@dataclass
class SaveResult:
    form: FormSchema | None = None
    errors: list[NexusError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.form is not None and not self.errors


class DesignerSession:
    def __init__(self, form: FormSchema, persistence: FormPersistence) -> None:
        self.form = form
        self._persistence = persistence
        self._draft: list[FieldSchema] = list(form.fields)
        self.state: DesignerState = Idle()
        self.closed = False

    @property
    def fields(self) -> tuple[FieldSchema, ...]:
        return tuple(self._draft)

    @property
    def selected(self) -> FieldSchema | None:
        if isinstance(self.state, Editing):
            return self._draft[self.state.index]
        return None

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("designer session was already saved")

    def _in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._draft)

    def add_field(self) -> FieldSchema:
        self._ensure_open()
        new_field = FieldSchema(
            key=generate_field_key(item.key for item in self._draft),
            label="New Field",
            type=FieldType.TEXT,
            required=False,
        )
        self._draft.append(new_field)
        self.state = Editing(len(self._draft) - 1)
        return new_field

    def select_field(self, index: int) -> DesignerState:
        self._ensure_open()
        self.state = Editing(index) if self._in_bounds(index) else Idle()
        return self.state

    def update_field(self, index: int, **changes: Any) -> SchemaDefinitionError | None:
        self._ensure_open()
        if not self._in_bounds(index):
            return SchemaDefinitionError(f"no field at position {index}")
        unknown = sorted(set(changes) - set(EDITABLE_ATTRIBUTES))
        if unknown:
            return SchemaDefinitionError(f"unknown field attribute: {', '.join(unknown)}")

        current = self._draft[index]
        if "type" in changes:
            try:
                changes["type"] = FieldType(str(changes["type"]))
            except ValueError:
                return SchemaDefinitionError(
                    f"invalid type: {changes['type']}", key=current.key
                )
        if "required" in changes and not isinstance(changes["required"], bool):
            return SchemaDefinitionError(
                f"required must be a boolean: {changes['required']!r}", key=current.key
            )
        if "options" in changes:
            changes["options"] = normalize_options(changes["options"])
        if "key" in changes:
            changes["key"] = str(changes["key"]).strip()
        if "label" in changes:
            changes["label"] = str(changes["label"])

        # FieldSchema drops options for every type except select.
        self._draft[index] = replace(current, **changes)
        self.state = Editing(index)
        return None

    def remove_field(self, index: int) -> DesignerState:
        self._ensure_open()
        if self._in_bounds(index):
            del self._draft[index]
        self.state = Idle()
        return self.state

    def move_field(self, index: int, new_index: int) -> DesignerState:
        self._ensure_open()
        if not self._in_bounds(index):
            self.state = Idle()
            return self.state
        new_index = max(0, min(new_index, len(self._draft) - 1))
        moved = self._draft.pop(index)
        self._draft.insert(new_index, moved)
        self.state = Editing(new_index)
        return self.state

    def validate(self) -> list[SchemaDefinitionError]:
        return validate_definition(self._draft)

    async def save(self) -> SaveResult:
        self._ensure_open()
        errors = self.validate()
        if errors:
            return SaveResult(errors=list(errors))

        fields = tuple(self._draft)
        try:
            saved = await self._persistence.save_form(self.form.id, fields)
        except Exception as exc:
            logger.exception("Saving fields for form %s failed", self.form.id)
            return SaveResult(errors=[TransportError(f"failed to save form: {exc}")])

        logger.info("Saved %d fields for form %s", len(fields), self.form.id)
        self.form = saved
        self.closed = True
        return SaveResult(form=saved)
