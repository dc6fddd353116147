from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nexuserp.config import Settings
from nexuserp.errors import RecordValidationError
from nexuserp.persistence import StoragePersistence
from nexuserp.routes.documents import router as documents_router
from nexuserp.routes.forms import router as forms_router
from nexuserp.routes.modules import router as modules_router
from nexuserp.routes.records import router as records_router
from nexuserp.seed import seed_demo_data
from nexuserp.storage import init_storage

logger = logging.getLogger(__name__)


async def record_validation_handler(request: Request, exc: RecordValidationError) -> JSONResponse:
    logger.info("Rejected record for %s: %s", request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=400)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    storage = init_storage(settings)
    if settings.seed_data:
        seed_demo_data(storage)

    app = FastAPI(
        title="Nexus ERP",
        openapi_tags=[
            {"name": "api/modules", "description": "Modules"},
            {"name": "api/forms", "description": "Form schemas"},
            {"name": "api/records", "description": "Records"},
            {"name": "api/templates", "description": "Document templates"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.storage = storage
    app.state.settings = settings
    app.state.persistence = StoragePersistence(storage)

    app.add_exception_handler(RecordValidationError, record_validation_handler)

    app.include_router(modules_router)
    app.include_router(forms_router)
    app.include_router(records_router)
    app.include_router(documents_router)

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
