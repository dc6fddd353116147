"""Persistence collaborator consumed by the designer and the record API.

Storage repositories speak plain dicts; this adapter converts them to the
schema value types and reports absent rows as ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from nexuserp.fields import FieldSchema
from nexuserp.protocols import Storage
from nexuserp.schema import FormSchema, Record


class FormPersistence(Protocol):
    async def get_form(self, form_id: int) -> FormSchema | None: ...

    async def save_form(self, form_id: int, fields: Sequence[FieldSchema]) -> FormSchema: ...

    async def create_record(self, form_id: int, data: Mapping[str, Any]) -> Record: ...

    async def list_records(self, form_id: int) -> list[Record]: ...


class StoragePersistence:
    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def get_form(self, form_id: int) -> FormSchema | None:
        form = self._storage.forms.get_form(form_id)
        return FormSchema.from_dict(form) if form else None

    async def save_form(self, form_id: int, fields: Sequence[FieldSchema]) -> FormSchema:
        updated = self._storage.forms.update_form(
            form_id, {"fields": [item.to_dict() for item in fields]}
        )
        if updated is None:
            raise LookupError(f"form {form_id} does not exist")
        return FormSchema.from_dict(updated)

    async def create_record(self, form_id: int, data: Mapping[str, Any]) -> Record:
        record = self._storage.records.create_record({"form_id": form_id, "data": dict(data)})
        return Record.from_dict(record)

    async def list_records(self, form_id: int) -> list[Record]:
        return [Record.from_dict(item) for item in self._storage.records.list_records(form_id)]
