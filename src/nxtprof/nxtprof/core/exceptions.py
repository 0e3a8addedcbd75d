class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the callable error status surfaced to clients and
    ``http_status`` the matching HTTP response code.
    """

    code = "INTERNAL"
    http_status = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "INVALID_ARGUMENT"
    http_status = 400


class AuthenticationError(DomainError):
    """Raised when the caller identity is missing or cannot be verified."""

    code = "UNAUTHENTICATED"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "PERMISSION_DENIED"
    http_status = 403


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    http_status = 404


class FailedPreconditionError(DomainError):
    """Raised when an operation is attempted out of its allowed state."""

    code = "FAILED_PRECONDITION"
    http_status = 400


class InternalError(DomainError):
    """Infrastructure failure (spreadsheet API, credentials, network)."""

    code = "INTERNAL"
    http_status = 500
