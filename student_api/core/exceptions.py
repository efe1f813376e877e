from typing import Any, Dict, Iterable, Optional
from fastapi import status

class BaseAPIException(Exception):
    """
    Base class for every error the API turns into a JSON error envelope.
    Keeps the shape returned to clients uniform.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. HTTP ERRORS
# =========================================================

class BadRequestException(BaseAPIException):
    """400: malformed request (bad JSON, invalid identifier...)"""
    def __init__(self, message: str = "Bad Request", details: dict = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )

class StorageFailureException(BaseAPIException):
    """
    A storage error surfaced at the handler boundary.

    The envelope keeps the storage error's own code; the HTTP status is
    chosen by the route that caught it.
    """
    def __init__(self, error: "StorageError", status_code: int):
        super().__init__(
            message=error.message,
            code=error.code,
            status_code=status_code,
            details=error.details
        )

# =========================================================
# 2. STORAGE ERRORS
# =========================================================

class StorageError(Exception):
    """Base class for failures raised by storage adapters."""
    code = "STORAGE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)

class NotFoundError(StorageError):
    """No row matches the requested identifier."""
    code = "NOT_FOUND"

class ConstraintViolationError(StorageError):
    """The engine rejected a write (duplicate email)."""
    code = "CONSTRAINT_VIOLATION"

class StorageConnectionError(StorageError):
    """The database is unreachable or the connection target is not configured."""
    code = "CONNECTION_ERROR"

class UnsupportedDriverError(StorageError):
    """The configured storage driver has no adapter."""
    code = "UNSUPPORTED_DRIVER"

    def __init__(self, driver: str, supported: Iterable[str]):
        self.driver = driver
        self.supported = sorted(supported)
        super().__init__(
            f"unsupported db driver: {driver!r} (supported: {', '.join(self.supported)})",
            details={"driver": driver, "supported": self.supported},
        )
