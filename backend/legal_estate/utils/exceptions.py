"""
Custom exception classes and the application-wide error mapper
"""
from typing import List

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from legal_estate.core.logger import logger
from legal_estate.utils.helpers import utcnow


class NotFoundError(HTTPException):
    """Raised when a referenced entity does not exist"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """Raised when a request breaks a rule enforced in code"""
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class CaseNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Case not found")


class ClientNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Client not found")


class UserNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("User not found")


class UploadFailedError(HTTPException):
    """Raised when document storage fails"""
    def __init__(self, reason: str = "Unknown error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Upload failed: {reason}"
        )


# ============================================================================
# Error envelope
# ============================================================================

def _envelope(request: Request, status_code: int, message, **extra) -> JSONResponse:
    body = {
        "statusCode": status_code,
        "timestamp": utcnow().isoformat() + "Z",
        "path": request.url.path,
        "method": request.method,
        "message": message,
    }
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def format_validation_errors(exc: RequestValidationError) -> List[str]:
    """Flatten pydantic errors to ``"<field>: <reason>"`` strings."""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return messages


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    response = _envelope(request, exc.status_code, exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc)
    logger.info(f"Validation failed for {request.method} {request.url.path}: {errors}")
    return _envelope(request, status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _envelope(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
