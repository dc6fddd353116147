from __future__ import annotations

from typing import Any, Protocol


class ModuleRepository(Protocol):
    def list_modules(self) -> list[dict[str, Any]]: ...

    def get_module(self, module_id: int) -> dict[str, Any] | None: ...

    def create_module(self, module: dict[str, Any]) -> dict[str, Any]: ...

    def update_module(self, module_id: int, updates: dict[str, Any]) -> dict[str, Any] | None: ...

    def delete_module(self, module_id: int) -> None: ...


class FormRepository(Protocol):
    def list_forms(self, module_id: int) -> list[dict[str, Any]]: ...

    def get_form(self, form_id: int) -> dict[str, Any] | None: ...

    def create_form(self, form: dict[str, Any]) -> dict[str, Any]: ...

    def update_form(self, form_id: int, updates: dict[str, Any]) -> dict[str, Any] | None: ...

    def delete_form(self, form_id: int) -> None: ...


class RecordRepository(Protocol):
    def list_records(self, form_id: int) -> list[dict[str, Any]]: ...

    def get_record(self, record_id: int) -> dict[str, Any] | None: ...

    def create_record(self, record: dict[str, Any]) -> dict[str, Any]: ...

    def delete_record(self, record_id: int) -> None: ...


class TemplateRepository(Protocol):
    def list_templates(self, module_id: int) -> list[dict[str, Any]]: ...

    def get_template(self, template_id: int) -> dict[str, Any] | None: ...

    def create_template(self, template: dict[str, Any]) -> dict[str, Any]: ...

    def update_template(self, template_id: int, updates: dict[str, Any]) -> dict[str, Any] | None: ...

    def delete_template(self, template_id: int) -> None: ...


class Storage(Protocol):
    modules: ModuleRepository
    forms: FormRepository
    records: RecordRepository
    templates: TemplateRepository
