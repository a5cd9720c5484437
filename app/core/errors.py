"""Domain error kinds raised by the auth core and translated to HTTP responses at the boundary.

Every error carries a client-safe ``message`` and the ``status_code`` it maps to.
Internal detail (parse errors, driver exceptions, the reason a token was rejected)
is logged where it happens and never stored on these objects.
"""


class AuthError(Exception):
    """Base class for errors that are safe to surface to the client."""

    status_code: int = 500
    default_message: str = "An error occurred while processing your request."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    """Unknown username, wrong password, inactive account or unusable stored hash."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(AuthError):
    """No bearer token was presented."""

    status_code = 401
    default_message = "Not authenticated"


class TokenInvalid(AuthError):
    """Bearer token failed verification (signature, issuer, audience, expiry or structure)."""

    status_code = 401
    default_message = "Invalid or expired token"


class Forbidden(AuthError):
    """Authenticated caller lacks the role or ownership the operation requires."""

    status_code = 403
    default_message = "Access denied"


class NotFound(AuthError):
    """The requested account does not exist or is inactive."""

    status_code = 404
    default_message = "User not found"


class DuplicateAccount(AuthError):
    """Username or email already registered. The message names which one."""

    status_code = 409
    default_message = "Account already exists"


class RateLimited(AuthError):
    """Too many anonymous login or register attempts from one client."""

    status_code = 429
    default_message = "Too many requests. Try again later."


class StoreUnavailable(AuthError):
    """The credential store failed; details stay in the server log."""

    status_code = 503
    default_message = "Service temporarily unavailable"
