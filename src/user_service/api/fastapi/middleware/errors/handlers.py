from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .....exceptions import RepositoryError
from .....utils.validation import first_error_message
from ...responses import error_response

logger = logging.getLogger(__name__)


def _http_extra(request: Request, status_code: int) -> dict:
    return {"http_method": request.method, "path": request.url.path, "status_code": status_code}


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"success": false, "message": ...}``."""

    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        message = first_error_message(exc.errors())
        logger.warning("Validation failed on %s: %s", request.url.path, message, extra=_http_extra(request, 400))
        return error_response(400, message)

    @app.exception_handler(RepositoryError)
    async def _repository(request: Request, exc: RepositoryError):
        if exc.status_code >= 500:
            logger.error(
                "%s on %s: %s (details=%s)",
                type(exc).__name__, request.url.path, exc.message, exc.details,
                extra=_http_extra(request, exc.status_code),
            )
        else:
            logger.warning(
                "%s on %s: %s", type(exc).__name__, request.url.path, exc.message,
                extra=_http_extra(request, exc.status_code),
            )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))
