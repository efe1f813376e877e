from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from student_api.core.config import Settings
from student_api.main import create_app
from student_api.storage.sqlite import SQLiteStorage


def _make_settings(**overrides) -> Settings:
    values = {
        "ENV": "test",
        "HTTP_ADDRESS": "127.0.0.1:8082",
        "DB_DRIVER": "sqlite",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_settings():
    return _make_settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return _make_settings(STORAGE_PATH=str(tmp_path / "data" / "students.db"))


@pytest.fixture
def storage(settings):
    store = SQLiteStorage(settings)
    yield store
    store.close()


@pytest.fixture
def client(storage, settings):
    app = create_app(storage, settings)
    with TestClient(app) as test_client:
        yield test_client
