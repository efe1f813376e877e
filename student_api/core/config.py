import logging
import os
import sys
from typing import Literal, Optional, Tuple

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".env"


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values are read from a dotenv file (see ``must_load_settings``) and
    environment variables override anything set in that file.
    """

    # =============================================================================
    # APPLICATION
    # =============================================================================
    PROJECT_NAME: str = "Student API"
    APP_VERSION: str = "1.0.0"
    ENV: str

    # =============================================================================
    # SERVER
    # =============================================================================
    HTTP_ADDRESS: str
    SHUTDOWN_TIMEOUT: int = Field(default=5, ge=0)

    # =============================================================================
    # STORAGE
    # =============================================================================
    DB_DRIVER: str = "sqlite"

    # SQLite
    STORAGE_PATH: str = ""

    # PostgreSQL - individual components
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "students"
    POSTGRES_SSLMODE: str = "disable"

    # =============================================================================
    # DATABASE POOL SETTINGS
    # =============================================================================
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_ECHO_SQL: bool = False

    # =============================================================================
    # LOGGING
    # =============================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("HTTP_ADDRESS")
    @classmethod
    def check_http_address(cls, v: str) -> str:
        """Require ``host:port`` with a numeric port."""
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError("must be in the form host:port")
        return v

    @field_validator("DB_DRIVER", mode="before")
    @classmethod
    def normalize_driver(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def bind_address(self) -> Tuple[str, int]:
        host, _, port = self.HTTP_ADDRESS.rpartition(":")
        return host, int(port)

    model_config = SettingsConfigDict(
        env_file=DEFAULT_CONFIG_PATH,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def resolve_config_path(cli_path: Optional[str] = None) -> str:
    """
    Pick the configuration file.

    Priority:
    1. ``--config`` passed on the command line
    2. ``CONFIG_PATH`` environment variable
    3. ``.env`` in the working directory (optional)
    """
    return cli_path or os.environ.get("CONFIG_PATH") or DEFAULT_CONFIG_PATH


def must_load_settings(config_path: Optional[str] = None) -> Settings:
    """Load settings or terminate the process with a logged message."""
    path = resolve_config_path(config_path)
    explicit = path != DEFAULT_CONFIG_PATH
    if explicit and not os.path.isfile(path):
        logger.critical(f"Config file does not exist: {path}")
        sys.exit(1)

    try:
        return Settings(_env_file=path)
    except ValidationError as e:
        logger.critical(f"Cannot read config file {path}: {e}")
        sys.exit(1)


def log_config(settings: Settings):
    """Log current configuration (hide sensitive data)."""
    logger.info(f"Project: {settings.PROJECT_NAME} v{settings.APP_VERSION} ({settings.ENV})")
    logger.info(f"HTTP address: {settings.HTTP_ADDRESS}")
    logger.info(f"Storage driver: {settings.DB_DRIVER}")
    if settings.DB_DRIVER == "sqlite":
        logger.info(f"Storage path: {settings.STORAGE_PATH}")
    elif settings.DB_DRIVER == "postgres":
        logger.info(
            f"Database: {settings.POSTGRES_USER}:{'*' * len(settings.POSTGRES_PASSWORD)}"
            f"@{settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}"
            f" (sslmode={settings.POSTGRES_SSLMODE})"
        )
        logger.info(f"Pool size: {settings.DB_POOL_SIZE}, max overflow: {settings.DB_MAX_OVERFLOW}")
