from __future__ import annotations

from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from nexuserp.documents import interpolate, render_document, unresolved_placeholders
from nexuserp.routes.payloads import optional_int, read_object, required_text
from nexuserp.schema import DocumentTemplate

router = APIRouter()


def template_output(template: dict[str, Any]) -> dict[str, Any]:
    return DocumentTemplate.from_dict(template).to_dict()


def _resolve_form_id(storage: Any, payload: dict[str, Any]) -> int | None:
    form_id = optional_int(payload, "form_id")
    if form_id is not None and not storage.forms.get_form(form_id):
        raise HTTPException(status_code=400, detail="form_id does not exist")
    return form_id


def _get_template(storage: Any, template_id: int) -> DocumentTemplate:
    template = storage.templates.get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return DocumentTemplate.from_dict(template)


@router.get("/api/modules/{module_id}/templates", tags=["api/templates"])
async def api_list_templates(request: Request, module_id: int) -> JSONResponse:
    storage = request.app.state.storage
    if not storage.modules.get_module(module_id):
        raise HTTPException(status_code=404, detail="Module not found")
    items = storage.templates.list_templates(module_id)
    return JSONResponse([template_output(item) for item in items])


@router.post("/api/modules/{module_id}/templates", tags=["api/templates"])
async def api_create_template(request: Request, module_id: int) -> JSONResponse:
    storage = request.app.state.storage
    if not storage.modules.get_module(module_id):
        raise HTTPException(status_code=404, detail="Module not found")
    payload = await read_object(request)
    template = storage.templates.create_template(
        {
            "module_id": module_id,
            "form_id": _resolve_form_id(storage, payload),
            "name": required_text(payload, "name"),
            "content": str(payload.get("content") or ""),
            "styles": str(payload.get("styles") or ""),
        }
    )
    return JSONResponse(template_output(template), status_code=201)


@router.get("/api/templates/{template_id}", tags=["api/templates"])
async def api_get_template(request: Request, template_id: int) -> JSONResponse:
    template = _get_template(request.app.state.storage, template_id)
    return JSONResponse(template.to_dict())


@router.put("/api/templates/{template_id}", tags=["api/templates"])
async def api_update_template(request: Request, template_id: int) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_object(request)
    updates: dict[str, Any] = {}
    if "name" in payload:
        updates["name"] = required_text(payload, "name")
    if "content" in payload:
        updates["content"] = str(payload.get("content") or "")
    if "styles" in payload:
        updates["styles"] = str(payload.get("styles") or "")
    if "form_id" in payload:
        updates["form_id"] = _resolve_form_id(storage, payload)
    template = storage.templates.update_template(template_id, updates)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return JSONResponse(template_output(template))


@router.delete("/api/templates/{template_id}", tags=["api/templates"])
async def api_delete_template(request: Request, template_id: int) -> Response:
    storage = request.app.state.storage
    _get_template(storage, template_id)
    storage.templates.delete_template(template_id)
    return Response(status_code=204)


@router.post("/api/templates/{template_id}/preview", tags=["api/templates"])
async def api_preview_template(request: Request, template_id: int) -> JSONResponse:
    template = _get_template(request.app.state.storage, template_id)
    payload = await read_object(request)
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="data must be an object")
    return JSONResponse(
        {
            "content": interpolate(template.content, data),
            "styles": template.styles,
            "unresolved": unresolved_placeholders(template.content, data),
        }
    )


@router.get("/api/templates/{template_id}/render/{record_id}", tags=["api/templates"])
async def api_render_template(request: Request, template_id: int, record_id: int) -> HTMLResponse:
    storage = request.app.state.storage
    template = _get_template(storage, template_id)
    record = storage.records.get_record(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    data = record.get("data") or {}
    headers: dict[str, str] = {}
    unresolved = unresolved_placeholders(template.content, data)
    if unresolved:
        headers["X-Unresolved-Placeholders"] = quote(",".join(unresolved), safe=",")
    return HTMLResponse(render_document(template, data), headers=headers)
