import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import URL, Engine

from student_api.core.config import Settings
from student_api.core.exceptions import StorageConnectionError
from student_api.storage.sql import SQLStorage

logger = logging.getLogger(__name__)


class SQLiteStorage(SQLStorage):
    """Students stored in a single SQLite file."""

    name = "sqlite"

    @classmethod
    def build_url(cls, settings: Settings) -> URL:
        return URL.create("sqlite", database=settings.STORAGE_PATH)

    def _check_settings(self):
        if not self.settings.STORAGE_PATH:
            raise StorageConnectionError("storage path not provided in config")

    def _prepare(self):
        # Open or create the DB file; sqlite creates the file but not its directory
        parent = Path(self.settings.STORAGE_PATH).expanduser().parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageConnectionError(f"cannot create storage directory {parent}: {e}") from e

    def _engine_options(self) -> dict:
        # Requests are served from a thread pool
        return {"connect_args": {"check_same_thread": False}}

    def _on_engine_created(self, engine: Engine):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            """Enforce enrollments -> students/courses foreign keys."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        logger.info(f"SQLite storage at {self.settings.STORAGE_PATH}")
