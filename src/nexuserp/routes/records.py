from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from nexuserp.records import validate_record
from nexuserp.routes.payloads import read_object
from nexuserp.schema import Record

router = APIRouter()


@router.get("/api/forms/{form_id}/records", tags=["api/records"])
async def api_list_records(request: Request, form_id: int) -> JSONResponse:
    persistence = request.app.state.persistence
    if not await persistence.get_form(form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    records = await persistence.list_records(form_id)
    return JSONResponse([record.to_dict() for record in records])


@router.post("/api/forms/{form_id}/records", tags=["api/records"])
async def api_create_record(request: Request, form_id: int) -> JSONResponse:
    persistence = request.app.state.persistence
    form = await persistence.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    payload = await read_object(request)
    raw = payload.get("data", {})
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="data must be an object")

    data = validate_record(form, raw)
    record = await persistence.create_record(form.id, data)
    return JSONResponse(record.to_dict(), status_code=201)


@router.get("/api/records/{record_id}", tags=["api/records"])
async def api_get_record(request: Request, record_id: int) -> JSONResponse:
    storage = request.app.state.storage
    record = storage.records.get_record(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    return JSONResponse(Record.from_dict(record).to_dict())


@router.delete("/api/records/{record_id}", tags=["api/records"])
async def api_delete_record(request: Request, record_id: int) -> Response:
    storage = request.app.state.storage
    if not storage.records.get_record(record_id):
        raise HTTPException(status_code=404, detail="Record not found")
    storage.records.delete_record(record_id)
    return Response(status_code=204)
