"""Request ID middleware."""

import time
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from school_admin.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ID (the caller's ``X-Request-ID`` when given).

    The ID is stored on ``request.state`` for error envelopes and audit rows,
    set as the logging context for everything logged while the request runs,
    and echoed in the response header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_ctx.set(request_id)
        fields: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        started = time.perf_counter()
        logger.info("Request started", extra=fields)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={**fields, "status_code": 500, "latency_ms": _elapsed_ms(started), "error": str(e)},
                exc_info=True,
            )
            raise
        finally:
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            extra={**fields, "status_code": response.status_code, "latency_ms": _elapsed_ms(started)},
        )
        return response
