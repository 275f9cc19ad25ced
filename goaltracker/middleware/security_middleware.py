from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from goaltracker.config import get_settings
from goaltracker.utils.logger import get_logger
import uuid

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers and a request id to all responses."""

    def __init__(self, app):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        if self.settings.SECURITY_HEADERS_ENABLED:
            self._add_security_headers(request, response)

        response.headers["X-Request-ID"] = request_id
        return response

    def _add_security_headers(self, request: Request, response: Response):
        for header, value in self.settings.security_headers.items():
            response.headers[header] = value
        logger.debug(f"Security headers added to response for {request.url.path}")
