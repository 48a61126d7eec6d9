"""Request Logging — one log line per HTTP request with status and latency.

Invariants:
    - Logs method, path, status_code and duration_ms for every request,
      including requests whose handler raised (logged as 500, then re-raised)
    - Never logs request or response bodies (shipping addresses are personal data)
"""

import logging
import time

from fastapi import FastAPI, Request, status

logger = logging.getLogger(__name__)


def register_request_logging(app: FastAPI) -> None:
    """Attach the request logging middleware to the app."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 1)
            logger.log(
                logging.ERROR if status_code >= 500 else logging.INFO,
                f"{request.method} {request.url.path} -> {status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )
