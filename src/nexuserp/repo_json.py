from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from filelock import FileLock
from tinydb import Query, TinyDB
from tinydb.table import Document

logger = logging.getLogger(__name__)

MODULE_COLUMNS = {"name", "description", "icon"}
FORM_COLUMNS = {"module_id", "name", "description", "fields"}
TEMPLATE_COLUMNS = {"form_id", "name", "content", "styles"}


class JSONRepoBase:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterator[TinyDB]:
        with self._lock:
            db = TinyDB(self._path)
            try:
                yield db
            finally:
                db.close()

    def _update(self, table_name: str, doc_id: int, updates: dict[str, Any], columns: set[str]) -> Document | None:
        changes = {key: value for key, value in updates.items() if key in columns}
        with self._db() as db:
            table = db.table(table_name)
            if not table.contains(doc_id=doc_id):
                return None
            if changes:
                table.update(changes, doc_ids=[doc_id])
            return table.get(doc_id=doc_id)


class JSONModuleRepo(JSONRepoBase):
    def list_modules(self) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("modules").all()
        return sorted((self._from_record(item) for item in items), key=lambda x: x["id"])

    def get_module(self, module_id: int) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("modules").get(doc_id=module_id)
        return self._from_record(item) if item else None

    def create_module(self, module: dict[str, Any]) -> dict[str, Any]:
        record = {
            "name": module["name"],
            "description": module.get("description", ""),
            "icon": module.get("icon") or "Box",
        }
        with self._db() as db:
            doc_id = db.table("modules").insert(record)
        return {"id": doc_id, **record}

    def update_module(self, module_id: int, updates: dict[str, Any]) -> dict[str, Any] | None:
        item = self._update("modules", module_id, updates, MODULE_COLUMNS)
        return self._from_record(item) if item else None

    def delete_module(self, module_id: int) -> None:
        with self._db() as db:
            forms = db.table("forms")
            form_ids = [item.doc_id for item in forms.search(Query().module_id == module_id)]
            if form_ids:
                db.table("records").remove(Query().form_id.one_of(form_ids))
                forms.remove(doc_ids=form_ids)
            db.table("templates").remove(Query().module_id == module_id)
            modules = db.table("modules")
            if modules.contains(doc_id=module_id):
                modules.remove(doc_ids=[module_id])
                logger.info("Deleted module %s with its forms and templates", module_id)

    @staticmethod
    def _from_record(item: Document) -> dict[str, Any]:
        return {
            "id": item.doc_id,
            "name": item.get("name", ""),
            "description": item.get("description", ""),
            "icon": item.get("icon") or "Box",
        }


class JSONFormRepo(JSONRepoBase):
    def list_forms(self, module_id: int) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("forms").search(Query().module_id == module_id)
        return sorted((self._from_record(item) for item in items), key=lambda x: x["id"])

    def get_form(self, form_id: int) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(doc_id=form_id)
        return self._from_record(item) if item else None

    def create_form(self, form: dict[str, Any]) -> dict[str, Any]:
        record = {
            "module_id": form["module_id"],
            "name": form["name"],
            "description": form.get("description", ""),
            "fields": form.get("fields") or [],
        }
        with self._db() as db:
            doc_id = db.table("forms").insert(record)
        return {"id": doc_id, **record}

    def update_form(self, form_id: int, updates: dict[str, Any]) -> dict[str, Any] | None:
        item = self._update("forms", form_id, updates, FORM_COLUMNS)
        return self._from_record(item) if item else None

    def delete_form(self, form_id: int) -> None:
        with self._db() as db:
            db.table("records").remove(Query().form_id == form_id)
            db.table("templates").update({"form_id": None}, Query().form_id == form_id)
            forms = db.table("forms")
            if forms.contains(doc_id=form_id):
                forms.remove(doc_ids=[form_id])

    @staticmethod
    def _from_record(item: Document) -> dict[str, Any]:
        return {
            "id": item.doc_id,
            "module_id": item["module_id"],
            "name": item.get("name", ""),
            "description": item.get("description", ""),
            "fields": item.get("fields") or [],
        }


class JSONRecordRepo(JSONRepoBase):
    def list_records(self, form_id: int) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("records").search(Query().form_id == form_id)
        return sorted((self._from_record(item) for item in items), key=lambda x: x["id"])

    def get_record(self, record_id: int) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("records").get(doc_id=record_id)
        return self._from_record(item) if item else None

    def create_record(self, record: dict[str, Any]) -> dict[str, Any]:
        payload = {"form_id": record["form_id"], "data": dict(record["data"])}
        with self._db() as db:
            doc_id = db.table("records").insert(payload)
        return {"id": doc_id, **payload}

    def delete_record(self, record_id: int) -> None:
        with self._db() as db:
            records = db.table("records")
            if records.contains(doc_id=record_id):
                records.remove(doc_ids=[record_id])

    @staticmethod
    def _from_record(item: Document) -> dict[str, Any]:
        return {
            "id": item.doc_id,
            "form_id": item["form_id"],
            "data": item.get("data") or {},
        }


class JSONTemplateRepo(JSONRepoBase):
    def list_templates(self, module_id: int) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("templates").search(Query().module_id == module_id)
        return sorted((self._from_record(item) for item in items), key=lambda x: x["id"])

    def get_template(self, template_id: int) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("templates").get(doc_id=template_id)
        return self._from_record(item) if item else None

    def create_template(self, template: dict[str, Any]) -> dict[str, Any]:
        record = {
            "module_id": template["module_id"],
            "form_id": template.get("form_id"),
            "name": template["name"],
            "content": template.get("content", ""),
            "styles": template.get("styles", ""),
        }
        with self._db() as db:
            doc_id = db.table("templates").insert(record)
        return {"id": doc_id, **record}

    def update_template(self, template_id: int, updates: dict[str, Any]) -> dict[str, Any] | None:
        item = self._update("templates", template_id, updates, TEMPLATE_COLUMNS)
        return self._from_record(item) if item else None

    def delete_template(self, template_id: int) -> None:
        with self._db() as db:
            templates = db.table("templates")
            if templates.contains(doc_id=template_id):
                templates.remove(doc_ids=[template_id])

    @staticmethod
    def _from_record(item: Document) -> dict[str, Any]:
        return {
            "id": item.doc_id,
            "module_id": item["module_id"],
            "form_id": item.get("form_id"),
            "name": item.get("name", ""),
            "content": item.get("content", ""),
            "styles": item.get("styles", ""),
        }


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock")
        self.modules = JSONModuleRepo(path, self._lock)
        self.forms = JSONFormRepo(path, self._lock)
        self.records = JSONRecordRepo(path, self._lock)
        self.templates = JSONTemplateRepo(path, self._lock)

    def dispose(self) -> None:
        return None
