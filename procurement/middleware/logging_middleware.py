"""
Logging Middleware
Logs all HTTP requests and responses
"""

import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from procurement.utils.logger import setup_logger

logger = setup_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses"""

    async def dispatch(self, request: Request, call_next):
        """Process request and log method, path, status and duration"""
        start_time = time.time()

        logger.info(
            f"Request: {request.method} {request.url.path} | "
            f"Client: {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
        except Exception:
            duration = time.time() - start_time
            logger.exception(
                f"Error: {request.method} {request.url.path} | "
                f"Duration: {duration:.3f}s"
            )
            raise

        duration = time.time() - start_time
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"Response: {request.method} {request.url.path} | "
            f"Status: {response.status_code} | "
            f"Duration: {duration:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        return response
