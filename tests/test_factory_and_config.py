from __future__ import annotations

import pytest
from pydantic import ValidationError

from student_api.core.config import Settings, must_load_settings, resolve_config_path
from student_api.core.exceptions import UnsupportedDriverError
from student_api.storage import factory
from student_api.storage.sqlite import SQLiteStorage


def test_new_storage_builds_sqlite(settings):
    store = factory.new_storage(settings)
    try:
        assert isinstance(store, SQLiteStorage)
        assert store.get_students() == []
    finally:
        store.close()


def test_factories_are_bound_zero_argument_constructors(settings, monkeypatch):
    built = []
    monkeypatch.setitem(factory.ADAPTERS, "postgres", lambda s: built.append(s) or "pg-store")

    constructors = factory.storage_factories(settings)

    assert set(constructors) == {"sqlite", "postgres"}
    assert constructors["postgres"]() == "pg-store"
    assert built == [settings]


@pytest.mark.parametrize("driver", ["mysql", ""])
def test_unknown_driver_is_rejected(make_settings, driver):
    with pytest.raises(UnsupportedDriverError) as excinfo:
        factory.new_storage(make_settings(DB_DRIVER=driver))

    assert excinfo.value.driver == driver
    assert excinfo.value.supported == ["postgres", "sqlite"]
    assert excinfo.value.code == "UNSUPPORTED_DRIVER"


def test_database_url_per_driver(make_settings, tmp_path):
    sqlite_url = factory.database_url(make_settings(STORAGE_PATH=str(tmp_path / "s.db")))
    assert sqlite_url.drivername == "sqlite"
    assert sqlite_url.database == str(tmp_path / "s.db")

    pg_url = factory.database_url(make_settings(DB_DRIVER="Postgres", POSTGRES_DB="school"))
    assert pg_url.drivername == "postgresql+psycopg2"
    assert pg_url.database == "school"

    with pytest.raises(UnsupportedDriverError):
        factory.database_url(make_settings(DB_DRIVER="oracle"))


def test_settings_require_env_and_address(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.delenv("HTTP_ADDRESS", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("address", ["localhost", "localhost:http", ":8080"])
def test_settings_reject_bad_address(make_settings, address):
    with pytest.raises(ValidationError):
        make_settings(HTTP_ADDRESS=address)


def test_bind_address(make_settings):
    assert make_settings(HTTP_ADDRESS="0.0.0.0:9000").bind_address == ("0.0.0.0", 9000)


def test_config_file_with_env_override(tmp_path, monkeypatch):
    config_file = tmp_path / "local.env"
    config_file.write_text(
        "ENV=local\nHTTP_ADDRESS=localhost:8082\nDB_DRIVER=sqlite\nSTORAGE_PATH=storage/storage.db\n"
    )
    monkeypatch.setenv("STORAGE_PATH", "/var/lib/students.db")

    loaded = must_load_settings(str(config_file))

    assert loaded.ENV == "local"
    assert loaded.HTTP_ADDRESS == "localhost:8082"
    assert loaded.STORAGE_PATH == "/var/lib/students.db"


def test_config_path_resolution(monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", "from-env.env")

    assert resolve_config_path("cli.env") == "cli.env"
    assert resolve_config_path() == "from-env.env"

    monkeypatch.delenv("CONFIG_PATH")
    assert resolve_config_path() == ".env"


def test_missing_config_file_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        must_load_settings(str(tmp_path / "nope.env"))

    assert excinfo.value.code == 1


def test_invalid_config_exits(tmp_path, monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.delenv("HTTP_ADDRESS", raising=False)
    config_file = tmp_path / "broken.env"
    config_file.write_text("DB_DRIVER=sqlite\n")

    with pytest.raises(SystemExit) as excinfo:
        must_load_settings(str(config_file))

    assert excinfo.value.code == 1


def test_log_level_is_normalized(make_settings):
    assert make_settings(LOG_LEVEL=" debug ").LOG_LEVEL == "DEBUG"


def test_unknown_log_level_is_rejected(make_settings):
    with pytest.raises(ValidationError):
        make_settings(LOG_LEVEL="VERBOSE")


def test_unknown_log_level_in_config_file_exits(tmp_path):
    config_file = tmp_path / "verbose.env"
    config_file.write_text("ENV=test\nHTTP_ADDRESS=localhost:8082\nLOG_LEVEL=VERBOSE\n")

    with pytest.raises(SystemExit) as excinfo:
        must_load_settings(str(config_file))

    assert excinfo.value.code == 1
