from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from nexuserp.models import Base, DocumentTemplateModel, FormModel, ModuleModel, RecordModel
from nexuserp.utils import dumps_json, loads_json

logger = logging.getLogger(__name__)

MODULE_COLUMNS = {"name", "description", "icon"}
FORM_COLUMNS = {"module_id", "name", "description"}
TEMPLATE_COLUMNS = {"form_id", "name", "content", "styles"}


class SQLiteModuleRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_modules(self) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = session.query(ModuleModel).order_by(ModuleModel.id).all()
            return [self._to_dict(row) for row in rows]

    def get_module(self, module_id: int) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(ModuleModel, module_id)
            return self._to_dict(row) if row else None

    def create_module(self, module: dict[str, Any]) -> dict[str, Any]:
        with self._Session() as session:
            row = ModuleModel(
                name=module["name"],
                description=module.get("description", ""),
                icon=module.get("icon") or "Box",
            )
            session.add(row)
            session.commit()
            return self._to_dict(row)

    def update_module(self, module_id: int, updates: dict[str, Any]) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(ModuleModel, module_id)
            if not row:
                return None
            for key, value in updates.items():
                if key in MODULE_COLUMNS:
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def delete_module(self, module_id: int) -> None:
        with self._Session() as session:
            row = session.get(ModuleModel, module_id)
            if row:
                session.delete(row)
                session.commit()
                logger.info("Deleted module %s with its forms and templates", module_id)

    @staticmethod
    def _to_dict(row: ModuleModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "name": row.name,
            "description": row.description or "",
            "icon": row.icon or "Box",
        }


class SQLiteFormRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_forms(self, module_id: int) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(FormModel)
                .filter(FormModel.module_id == module_id)
                .order_by(FormModel.id)
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def get_form(self, form_id: int) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            return self._to_dict(row) if row else None

    def create_form(self, form: dict[str, Any]) -> dict[str, Any]:
        with self._Session() as session:
            row = FormModel(
                module_id=form["module_id"],
                name=form["name"],
                description=form.get("description", ""),
                fields_json=dumps_json(form.get("fields") or []),
            )
            session.add(row)
            session.commit()
            return self._to_dict(row)

    def update_form(self, form_id: int, updates: dict[str, Any]) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            if not row:
                return None
            for key, value in updates.items():
                if key == "fields":
                    row.fields_json = dumps_json(value)
                elif key in FORM_COLUMNS:
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def delete_form(self, form_id: int) -> None:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            if row:
                session.query(DocumentTemplateModel).filter(
                    DocumentTemplateModel.form_id == form_id
                ).update({DocumentTemplateModel.form_id: None})
                session.delete(row)
                session.commit()

    @staticmethod
    def _to_dict(row: FormModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "module_id": row.module_id,
            "name": row.name,
            "description": row.description or "",
            "fields": loads_json(row.fields_json) or [],
        }


class SQLiteRecordRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_records(self, form_id: int) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(RecordModel)
                .filter(RecordModel.form_id == form_id)
                .order_by(RecordModel.id)
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def get_record(self, record_id: int) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(RecordModel, record_id)
            return self._to_dict(row) if row else None

    def create_record(self, record: dict[str, Any]) -> dict[str, Any]:
        with self._Session() as session:
            row = RecordModel(form_id=record["form_id"], data_json=dumps_json(record["data"]))
            session.add(row)
            session.commit()
            return self._to_dict(row)

    def delete_record(self, record_id: int) -> None:
        with self._Session() as session:
            row = session.get(RecordModel, record_id)
            if row:
                session.delete(row)
                session.commit()

    @staticmethod
    def _to_dict(row: RecordModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "form_id": row.form_id,
            "data": loads_json(row.data_json) or {},
        }


class SQLiteTemplateRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_templates(self, module_id: int) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(DocumentTemplateModel)
                .filter(DocumentTemplateModel.module_id == module_id)
                .order_by(DocumentTemplateModel.id)
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def get_template(self, template_id: int) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(DocumentTemplateModel, template_id)
            return self._to_dict(row) if row else None

    def create_template(self, template: dict[str, Any]) -> dict[str, Any]:
        with self._Session() as session:
            row = DocumentTemplateModel(
                module_id=template["module_id"],
                form_id=template.get("form_id"),
                name=template["name"],
                content=template.get("content", ""),
                styles=template.get("styles", ""),
            )
            session.add(row)
            session.commit()
            return self._to_dict(row)

    def update_template(self, template_id: int, updates: dict[str, Any]) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(DocumentTemplateModel, template_id)
            if not row:
                return None
            for key, value in updates.items():
                if key in TEMPLATE_COLUMNS:
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def delete_template(self, template_id: int) -> None:
        with self._Session() as session:
            row = session.get(DocumentTemplateModel, template_id)
            if row:
                session.delete(row)
                session.commit()

    @staticmethod
    def _to_dict(row: DocumentTemplateModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "module_id": row.module_id,
            "form_id": row.form_id,
            "name": row.name,
            "content": row.content or "",
            "styles": row.styles or "",
        }


class SQLiteStorage:
    def __init__(self, db_path: Path) -> None:
        self._engine = create_engine(f"sqlite:///{db_path}", future=True)
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.modules = SQLiteModuleRepo(self._Session)
        self.forms = SQLiteFormRepo(self._Session)
        self.records = SQLiteRecordRepo(self._Session)
        self.templates = SQLiteTemplateRepo(self._Session)

    def dispose(self) -> None:
        self._engine.dispose()
