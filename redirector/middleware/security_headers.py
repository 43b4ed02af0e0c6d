"""
Security Headers Middleware

Adds headers that stop the service's pages from being framed
(clickjacking) and stop browsers from MIME-sniffing responses.
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Sets SECURITY_HEADERS on every response, errors included."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response


def add_security_headers_middleware(app):
    app.add_middleware(SecurityHeadersMiddleware)
