"""Request logging middleware."""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("deckport.api")


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for the service.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status, duration and payload sizes.

    Export responses embed rasterized images, so the response size is worth
    seeing next to the timing.
    """

    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/health"]

    async def dispatch(self, request: Request, call_next) -> Response:
        if any(request.url.path.startswith(p) for p in self.exclude_paths):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        label = f"[{request_id}] {request.method} {request.url.path}"
        started = time.perf_counter()

        logger.info(
            f"{label} - Client: {self._client_ip(request)}, "
            f"{request.headers.get('content-length', '0')} bytes in"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{label} - ERROR after {self._elapsed_ms(started):.2f}ms - {e}")
            raise

        status = response.status_code
        log_level = logging.INFO if status < 400 else logging.WARNING if status < 500 else logging.ERROR
        logger.log(
            log_level,
            f"{label} - {status} - {self._elapsed_ms(started):.2f}ms, "
            f"{response.headers.get('content-length', '?')} bytes out",
        )

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000

    @staticmethod
    def _client_ip(request: Request) -> str:
        """First forwarded address, else the socket peer."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.headers.get("X-Real-IP") or (request.client.host if request.client else "unknown")
