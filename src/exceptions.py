"""Application error taxonomy.

Expected outcomes of request handling are raised as ``AppError`` subclasses and
translated to a status code plus a short ``{"message": ...}`` body by the
error-translation stage. Anything else surfaces as a generic 500.
"""


class AppError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = 500
    default_message: str = "Something went wrong, please try again later"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert to the JSON body sent to the client."""
        return {"message": self.message}


class BadRequestError(AppError):
    """Malformed or unacceptable client input."""

    status_code = 400
    default_message = "Bad request"


class PayloadTooLargeError(AppError):
    """Request body exceeds the configured ceiling."""

    status_code = 413
    default_message = "Request body too large"


class DuplicateUserError(AppError):
    """Registration with an email that already belongs to a user."""

    status_code = 400
    default_message = "User already exists"


class UserNotFoundError(AppError):
    status_code = 404
    default_message = "User not found"


class InvalidCredentialsError(AppError):
    status_code = 400
    default_message = "Invalid credentials"


class AccessDeniedError(AppError):
    """No bearer token supplied to a protected route."""

    status_code = 403
    default_message = "Access denied"


class TokenExpiredError(AppError):
    status_code = 401
    default_message = "Token expired"


class TokenInvalidError(AppError):
    status_code = 401
    default_message = "Invalid token"


class HashingError(Exception):
    """The password hasher failed internally. Never shown to clients."""


class ConfigurationError(Exception):
    """Required configuration is missing or unusable at startup."""


class DatabaseConnectionError(Exception):
    """The document store could not be reached at startup."""
