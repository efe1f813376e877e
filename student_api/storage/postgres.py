import logging
import re

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.pool import NullPool, QueuePool

from student_api.core.config import Settings
from student_api.core.database import build_engine
from student_api.core.exceptions import StorageConnectionError
from student_api.storage.sql import SQLStorage

logger = logging.getLogger(__name__)

ADMIN_DATABASE = "postgres"
DUPLICATE_DATABASE = "42P04"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]{0,62}$")


def _is_duplicate_database(error: DBAPIError) -> bool:
    if getattr(error.orig, "pgcode", None) == DUPLICATE_DATABASE:
        return True
    return "already exists" in str(error.orig)


class PostgresStorage(SQLStorage):
    """Students stored in a PostgreSQL database, created on first start if missing."""

    name = "postgres"

    @classmethod
    def build_url(cls, settings: Settings, database: str = None) -> URL:
        return URL.create(
            "postgresql+psycopg2",
            username=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD or None,
            host=settings.POSTGRES_HOST,
            port=settings.POSTGRES_PORT,
            database=database or settings.POSTGRES_DB,
            query={"sslmode": settings.POSTGRES_SSLMODE},
        )

    def _check_settings(self):
        if not self.settings.POSTGRES_HOST or not self.settings.POSTGRES_DB:
            raise StorageConnectionError("postgres host or database not provided in config")
        if not _IDENTIFIER.match(self.settings.POSTGRES_DB):
            raise StorageConnectionError(
                f"invalid postgres database name: {self.settings.POSTGRES_DB!r}"
            )

    def _prepare(self):
        self.ensure_database()

    def ensure_database(self):
        """
        Create the target database through the administrative ``postgres`` DB.

        An "already exists" failure is ignored; anything else is raised.
        """
        admin_engine = build_engine(
            self.build_url(self.settings, database=ADMIN_DATABASE),
            echo=self.settings.DB_ECHO_SQL,
            poolclass=NullPool,
            isolation_level="AUTOCOMMIT",
            connect_args={"connect_timeout": 10},
        )
        # DDL cannot take bind parameters; the name is validated in _check_settings
        db_name = admin_engine.dialect.identifier_preparer.quote(self.settings.POSTGRES_DB)
        try:
            with admin_engine.connect() as connection:
                connection.execute(text(f"CREATE DATABASE {db_name}"))
            logger.info(f"Created database {self.settings.POSTGRES_DB}")
        except DBAPIError as e:
            if not _is_duplicate_database(e):
                raise StorageConnectionError(f"failed to create database: {e.orig}") from e
            logger.debug(f"Database {self.settings.POSTGRES_DB} already exists")
        except SQLAlchemyError as e:
            raise StorageConnectionError(f"failed to create database: {e}") from e
        finally:
            admin_engine.dispose()

    def _engine_options(self) -> dict:
        return {
            "poolclass": QueuePool,
            "pool_size": self.settings.DB_POOL_SIZE,
            "max_overflow": self.settings.DB_MAX_OVERFLOW,
            "pool_timeout": self.settings.DB_POOL_TIMEOUT,
            "pool_recycle": self.settings.DB_POOL_RECYCLE,
            "connect_args": {"connect_timeout": 10},
        }
