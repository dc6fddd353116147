from __future__ import annotations

import logging

from nexuserp.config import Settings, ensure_dirs
from nexuserp.protocols import Storage
from nexuserp.repo_json import JSONStorage
from nexuserp.repo_sqlite import SQLiteStorage

logger = logging.getLogger(__name__)


def init_storage(settings: Settings) -> Storage:
    ensure_dirs(settings)
    if settings.storage_backend == "json":
        logger.info("Using JSON storage at %s", settings.json_path)
        return JSONStorage(settings.json_path)
    logger.info("Using SQLite storage at %s", settings.sqlite_path)
    return SQLiteStorage(settings.sqlite_path)
