"""HTTP exception handlers.

Domain exceptions become ``{"error": message, "code": ERROR_CODE}`` responses.
Each exception class picks its status through ``http_status_code`` and
``error_code``.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from keydash.core.domain.exceptions import DomainException, InternalError


def error_response(status_code: int, message: str, error_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": error_code},
    )


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions using the class-level status and code."""
    status_code = getattr(exc, "http_status_code", status.HTTP_400_BAD_REQUEST)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{error_code}: {exc.message}")
    return error_response(status_code, exc.message, error_code)


def validation_error_message(exc: RequestValidationError) -> str:
    """First validation error as ``"loc: msg"``."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return message


async def request_validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies and params as 400."""
    return error_response(
        status.HTTP_400_BAD_REQUEST, validation_error_message(exc), "VALIDATION_ERROR"
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions without leaking details."""
    logger.exception(f"Unhandled exception: {exc}")
    internal = InternalError()
    return error_response(
        internal.http_status_code, internal.message, internal.error_code
    )
