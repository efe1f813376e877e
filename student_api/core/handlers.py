# student_api/core/handlers.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from student_api.core.exceptions import BadRequestException, BaseAPIException
from student_api.core.logging import logger


def error_envelope(code: str, message: str, details=None) -> dict:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details
        }
    }


# 1. Errors raised on purpose by the endpoints
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.code, exc.message, exc.details),
    )


def _describe_validation_failure(errors, details: dict) -> BaseAPIException:
    """Turn a list of pydantic errors into the API error to return."""
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if error["type"] == "json_invalid":
            return BadRequestException(f"invalid JSON: {error['msg']}", details=details)
        if error["type"] == "missing" and loc == ("body",):
            return BadRequestException("empty body", details=details)
        if loc[:1] == ("path",):
            return BadRequestException(f"invalid id {error.get('input')}", details=details)
    return BaseAPIException(
        message="Input validation failed",
        code="VALIDATION_ERROR",
        status_code=status.HTTP_400_BAD_REQUEST,
        details=details,
    )


# 2. Request validation errors (bad JSON, empty body, bad path id, field constraints)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        # Get field name (e.g., "body.email" becomes "email")
        field = ".".join(str(x) for x in error["loc"] if x != "body") or "body"
        details[field] = error["msg"]

    api_error = _describe_validation_failure(exc.errors(), details)
    logger.info(f"Rejected {request.method} {request.url.path}: {api_error.message}")

    return await custom_api_exception_handler(request, api_error)


# 3. Standard HTTP errors (unknown route, method not allowed)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


# 4. Anything else
async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled Exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please contact support.",
        ),
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
