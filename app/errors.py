"""
Error taxonomy and the FastAPI exception handlers that render it.

Services raise the domain errors below; routers never build error
responses themselves.  Every error body has the shape
``{"error": "<message>"}``.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthenticationError(BlogAPIError):
    """Credential absent, malformed, unverifiable or expired.

    The message is deliberately the same for every cause.
    """

    status_code = HTTP_401_UNAUTHORIZED
    default_detail = "token missing or invalid"


class AuthorizationError(BlogAPIError):
    status_code = HTTP_401_UNAUTHORIZED
    default_detail = "this user is not allowed to modify this blog"


class ValidationError(BlogAPIError):
    status_code = HTTP_400_BAD_REQUEST
    default_detail = "invalid request"


class NotFoundError(BlogAPIError):
    status_code = HTTP_404_NOT_FOUND
    default_detail = "not found"


class ConflictError(BlogAPIError):
    status_code = HTTP_409_CONFLICT
    default_detail = "resource already exists"


class InfrastructureError(BlogAPIError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "internal server error"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def blog_api_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s on %s %s", exc.detail, request.method, request.url.path)
    else:
        logger.warning("%s on %s %s", exc.detail, request.method, request.url.path)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies, missing fields and malformed path ids are all 400."""
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    logger.info("Rejected request to %s: invalid %s", request.url.path, ", ".join(fields))
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"error": "request validation failed", "fields": fields},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=HTTP_409_CONFLICT,
        content={"error": ConflictError.default_detail},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": InfrastructureError.default_detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogAPIError, blog_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
