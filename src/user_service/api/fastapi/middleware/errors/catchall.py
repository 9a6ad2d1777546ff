import logging

from starlette.middleware.base import BaseHTTPMiddleware

from ...responses import error_response

logger = logging.getLogger(__name__)


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            if not isinstance(status_code, int):
                status_code = 500
            logger.error(
                f"{type(exc).__name__} on {request.url.path} ({status_code}): {exc}",
                exc_info=True,
                extra={"http_method": request.method, "path": request.url.path, "status_code": status_code},
            )
            return error_response(status_code, str(exc) or "Internal Server Error")
