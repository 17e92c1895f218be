"""Request logging middleware."""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("printquote.requests")

SKIP_LOG_PATHS = {"/health"}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Tags each response with a request id and logs one line per request.

    The line names the authenticated caller when the route resolved one;
    server errors are logged at ERROR, client errors at WARNING.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = uuid.uuid4().hex
        started = time.perf_counter()
        request.state.request_id = request_id

        response: Response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)

        if request.url.path in SKIP_LOG_PATHS:
            return response

        user_id = getattr(request.state, "user_id", None)
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "%s %s -> %s as %s",
            request.method,
            request.url.path,
            response.status_code,
            user_id or "anonymous",
            extra={
                "request_id": request_id,
                "user_id": user_id,
                "http_method": request.method,
                "http_path": request.url.path,
                "http_status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
