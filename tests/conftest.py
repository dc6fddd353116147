from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from nexuserp.app import create_app
from nexuserp.config import Settings
from nexuserp.storage import init_storage


@pytest.fixture(params=["sqlite", "json"])
def settings(request, tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", request.param)
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "data" / "test.db"))
    monkeypatch.setenv("JSON_PATH", str(tmp_path / "data" / "test.json"))
    monkeypatch.setenv("SEED_DATA", "0")
    return Settings()


@pytest.fixture()
def storage(settings):
    store = init_storage(settings)
    yield store
    store.dispose()


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
    app.state.storage.dispose()
