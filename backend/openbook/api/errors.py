from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging
import traceback

from openbook.core.config import settings

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with structured error response"""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - {request.method} {request.url.path}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "status_code": exc.status_code,
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None)
    )


async def not_found_handler(request: Request, exc: HTTPException):
    """Unknown routes get a fixed message; explicit 404s keep their own"""
    if exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "message": "Route not found",
                "status_code": 404,
                "path": str(request.url.path)
            }
        )
    return await http_exception_handler(request, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed error information"""
    logger.warning(f"Validation error: {exc.errors()} - {request.url.path}")

    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Validation error",
            "status_code": 422,
            "errors": jsonable_encoder(exc.errors()),
            "path": str(request.url.path)
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions; details are only exposed in development"""
    logger.error(f"Unexpected error: {str(exc)} - {request.method} {request.url.path}", exc_info=True)

    content = {
        "success": False,
        "message": "Internal server error",
        "status_code": 500,
        "path": str(request.url.path)
    }
    if settings.is_development:
        content["error"] = str(exc)
        content["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    return JSONResponse(status_code=500, content=content)


# Operational errors: expected, client-facing failures
class WikiError(HTTPException):
    is_operational = True

    def __init__(self, status_code: int, message: str, headers: dict = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)


class BadRequestError(WikiError):
    def __init__(self, message: str = "Bad request"):
        super().__init__(400, message)


class AuthenticationError(WikiError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(401, message, headers={"WWW-Authenticate": "Bearer"})


class PermissionDeniedError(WikiError):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(403, message)


class NotFoundError(WikiError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(404, message)


class PageNotFoundError(NotFoundError):
    def __init__(self, ref=None):
        super().__init__("Page not found" if ref is None else f"Page '{ref}' not found")


class ConflictError(WikiError):
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(409, message)
