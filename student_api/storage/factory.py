from typing import Callable, Dict, Type

from sqlalchemy.engine import URL

from student_api.core.config import Settings
from student_api.core.exceptions import UnsupportedDriverError
from student_api.storage.base import Storage
from student_api.storage.postgres import PostgresStorage
from student_api.storage.sql import SQLStorage
from student_api.storage.sqlite import SQLiteStorage

# Register each database's adapter
ADAPTERS: Dict[str, Type[SQLStorage]] = {
    "sqlite": SQLiteStorage,
    "postgres": PostgresStorage,
}


def _adapter_for(driver: str) -> Type[SQLStorage]:
    try:
        return ADAPTERS[driver]
    except KeyError:
        raise UnsupportedDriverError(driver, ADAPTERS) from None


def storage_factories(settings: Settings) -> Dict[str, Callable[[], Storage]]:
    """Zero-argument constructors bound to ``settings``, keyed by driver name."""
    return {
        driver: (lambda adapter=adapter: adapter(settings))
        for driver, adapter in ADAPTERS.items()
    }


def new_storage(settings: Settings) -> Storage:
    """Open the storage selected by ``DB_DRIVER``."""
    factories = storage_factories(settings)
    if settings.DB_DRIVER not in factories:
        raise UnsupportedDriverError(settings.DB_DRIVER, factories)
    return factories[settings.DB_DRIVER]()


def database_url(settings: Settings) -> URL:
    """SQLAlchemy URL for the configured driver (used by Alembic)."""
    return _adapter_for(settings.DB_DRIVER).build_url(settings)
