import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class HTTPLogMiddleware(BaseHTTPMiddleware):
    """Debug-level request timing, enabled with REQUEST_DEBUG=1."""

    def __init__(self, app, logger_name: str = "hsync.http", timing_header: str = "X-Response-Time-Ms"):
        super().__init__(app)
        self._logger = logging.getLogger(logger_name)
        self._timing_header = timing_header

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        try:
            response: Response = await call_next(request)
        except Exception as e:
            self._logger.warning("http %s failed after %.1fms err=%r", route, _elapsed_ms(start), e)
            raise
        dur_ms = _elapsed_ms(start)
        response.headers[self._timing_header] = f"{dur_ms:.1f}"
        self._logger.debug("http %s status=%s dur_ms=%.1f", route, response.status_code, dur_ms)
        return response


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
