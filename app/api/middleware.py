"""Response hardening headers and the catch-all for unhandled errors."""

from starlette.middleware.base import BaseHTTPMiddleware

from app.api.exception_handlers import unexpected_error_response

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": "default-src 'self'",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn any exception that escapes the routes into the generic 500 body.

    Must sit inside SecurityHeadersMiddleware so the 500 gets the headers too.
    """

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return unexpected_error_response(exc)
