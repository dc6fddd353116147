from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from nexuserp.fields import parse_fields
from nexuserp.routes.payloads import optional_int, read_object, required_text
from nexuserp.schema import FormSchema, check_fields_payload, form_json_schema

logger = logging.getLogger(__name__)

router = APIRouter()


def form_output(form: dict[str, Any]) -> dict[str, Any]:
    return FormSchema.from_dict(form).to_dict()


@router.get("/api/modules/{module_id}/forms", tags=["api/forms"])
async def api_list_forms(request: Request, module_id: int) -> JSONResponse:
    storage = request.app.state.storage
    if not storage.modules.get_module(module_id):
        raise HTTPException(status_code=404, detail="Module not found")
    return JSONResponse([form_output(form) for form in storage.forms.list_forms(module_id)])


@router.post("/api/modules/{module_id}/forms", tags=["api/forms"])
async def api_create_form(request: Request, module_id: int) -> JSONResponse:
    storage = request.app.state.storage
    if not storage.modules.get_module(module_id):
        raise HTTPException(status_code=404, detail="Module not found")
    payload = await read_object(request)
    form = storage.forms.create_form(
        {
            "module_id": module_id,
            "name": required_text(payload, "name"),
            "description": str(payload.get("description") or "").strip(),
            "fields": [],
        }
    )
    return JSONResponse(form_output(form), status_code=201)


@router.get("/api/forms/{form_id}", tags=["api/forms"])
async def api_get_form(request: Request, form_id: int) -> JSONResponse:
    storage = request.app.state.storage
    form = storage.forms.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return JSONResponse(form_output(form))


@router.get("/api/forms/{form_id}/schema", tags=["api/forms"])
async def api_form_json_schema(request: Request, form_id: int) -> JSONResponse:
    form = await request.app.state.persistence.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return JSONResponse(form_json_schema(form))


@router.put("/api/forms/{form_id}", tags=["api/forms"])
async def api_update_form(request: Request, form_id: int) -> JSONResponse:
    storage = request.app.state.storage
    persistence = request.app.state.persistence
    if not storage.forms.get_form(form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    payload = await read_object(request)

    fields = None
    if "fields" in payload:
        problems = check_fields_payload(payload["fields"])
        if problems:
            raise HTTPException(status_code=400, detail=problems[0])
        fields, problems = parse_fields(payload["fields"])
        if problems:
            raise HTTPException(status_code=400, detail=problems[0])

    updates: dict[str, Any] = {}
    if "name" in payload:
        updates["name"] = required_text(payload, "name")
    if "description" in payload:
        updates["description"] = str(payload.get("description") or "").strip()
    if "module_id" in payload:
        module_id = optional_int(payload, "module_id")
        if module_id is None or not storage.modules.get_module(module_id):
            raise HTTPException(status_code=400, detail="module_id does not exist")
        updates["module_id"] = module_id

    updated = storage.forms.update_form(form_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Form not found")
    if fields is not None:
        saved = await persistence.save_form(form_id, fields)
        logger.info("Replaced fields of form %s (%d fields)", form_id, len(saved.fields))
        return JSONResponse(saved.to_dict())
    return JSONResponse(form_output(updated))


@router.delete("/api/forms/{form_id}", tags=["api/forms"])
async def api_delete_form(request: Request, form_id: int) -> Response:
    storage = request.app.state.storage
    if not storage.forms.get_form(form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    storage.forms.delete_form(form_id)
    return Response(status_code=204)
