"""Domain errors raised by the identity core.

Each error carries the HTTP status and the user-facing message the gateway
answers with, so nothing below the gateway needs to know about HTTP.
"""


class AuthCoreError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthCoreError):
    """Missing or malformed input; the caller may resubmit."""
    status_code = 400
    default_message = "All required fields must be provided"


class ConflictError(AuthCoreError):
    """An account with this email already exists."""
    status_code = 409
    default_message = "A user with this email already exists"


class AuthError(AuthCoreError):
    status_code = 401
    default_message = "Authentication failed"


class NotFoundError(AuthCoreError):
    """The token is fine but the user it names is gone."""
    status_code = 401
    default_message = "User not found"


class InvalidTokenError(AuthCoreError):
    status_code = 401
    default_message = "Invalid token"


class ExpiredTokenError(InvalidTokenError):
    default_message = "Token has expired"


class InternalError(AuthCoreError):
    status_code = 500
