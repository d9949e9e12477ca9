"""Application error taxonomy. Every error maps to one HTTP status and label."""


class AppError(Exception):
    """Base class for errors surfaced to the HTTP boundary as {message, error, statusCode}."""

    status_code: int = 500
    error: str = "Internal Server Error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(AppError):
    """Payload failed validation or a precondition on its contents."""

    status_code = 400
    error = "Bad Request"
    default_message = "Bad request"


class InvalidCredentials(BadRequest):
    """Submitted password does not match the stored hash."""

    default_message = "Invalid credentials"


class InvalidOrExpiredToken(BadRequest):
    """Signed token has a bad signature, a malformed structure, or has expired."""

    default_message = "Your token is not valid or expired"


class Unauthorized(AppError):
    """Missing, invalid or stale bearer credential."""

    status_code = 401
    error = "Unauthorized"
    default_message = "Invalid or expired authorization token"


class Forbidden(AppError):
    """Authenticated but not allowed to perform the action."""

    status_code = 403
    error = "Forbidden"
    default_message = "Forbidden resource"


class NotFound(AppError):
    status_code = 404
    error = "Not Found"
    default_message = "Resource not found"


class Conflict(AppError):
    """Uniqueness violation or a no-op change."""

    status_code = 409
    error = "Conflict"
    default_message = "Conflict"


class TooManyRequests(AppError):
    status_code = 429
    error = "Too Many Requests"
    default_message = "ThrottlerException: Too Many Requests"


class MailDeliveryError(AppError):
    """SMTP server refused or could not be reached."""

    status_code = 503
    error = "Service Unavailable"
    default_message = "Email could not be sent"
