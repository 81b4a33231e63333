import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from openbook.core.config import settings

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Logs how long each request took and exposes it as X-Process-Time.
    Requests slower than SLOW_REQUEST_SECONDS are logged as warnings.
    """

    def __init__(self, app, slow_threshold: float = None):
        super().__init__(app)
        self.slow_threshold = settings.SLOW_REQUEST_SECONDS if slow_threshold is None else slow_threshold

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        message = f"{request.method} {request.url.path} -> {response.status_code} in {elapsed * 1000:.1f}ms"
        if elapsed > self.slow_threshold:
            logger.warning(f"Slow request: {message}")
        else:
            logger.debug(message)
        return response
