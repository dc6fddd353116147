from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from nexuserp.config import DEFAULT_ICON
from nexuserp.routes.payloads import read_object, required_text
from nexuserp.schema import Module

router = APIRouter()


def module_output(module: dict[str, Any]) -> dict[str, Any]:
    return Module.from_dict(module).to_dict()


@router.get("/api/modules", tags=["api/modules"])
async def api_list_modules(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    return JSONResponse([module_output(item) for item in storage.modules.list_modules()])


@router.get("/api/modules/{module_id}", tags=["api/modules"])
async def api_get_module(request: Request, module_id: int) -> JSONResponse:
    storage = request.app.state.storage
    module = storage.modules.get_module(module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    return JSONResponse(module_output(module))


@router.post("/api/modules", tags=["api/modules"])
async def api_create_module(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_object(request)
    module = storage.modules.create_module(
        {
            "name": required_text(payload, "name"),
            "description": str(payload.get("description") or "").strip(),
            "icon": str(payload.get("icon") or DEFAULT_ICON).strip(),
        }
    )
    return JSONResponse(module_output(module), status_code=201)


@router.put("/api/modules/{module_id}", tags=["api/modules"])
async def api_update_module(request: Request, module_id: int) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_object(request)
    updates: dict[str, Any] = {}
    if "name" in payload:
        updates["name"] = required_text(payload, "name")
    if "description" in payload:
        updates["description"] = str(payload.get("description") or "").strip()
    if "icon" in payload:
        updates["icon"] = str(payload.get("icon") or DEFAULT_ICON).strip()
    module = storage.modules.update_module(module_id, updates)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    return JSONResponse(module_output(module))


@router.delete("/api/modules/{module_id}", tags=["api/modules"])
async def api_delete_module(request: Request, module_id: int) -> Response:
    storage = request.app.state.storage
    if not storage.modules.get_module(module_id):
        raise HTTPException(status_code=404, detail="Module not found")
    storage.modules.delete_module(module_id)
    return Response(status_code=204)
