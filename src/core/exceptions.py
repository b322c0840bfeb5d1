"""Custom exception classes for the Currency Exchange API.

Managers raise these; the API layer maps them to HTTP responses through the
handlers in core.error_handlers. Each class carries the status code it maps to.
"""


class CurrencyExchangeError(Exception):
    """Base exception for all Currency Exchange API errors."""

    status_code = 500

    def __init__(self, message: str = "Server Error"):
        """Initialize the exception.

        Args:
            message: Human readable message returned to the client.
        """
        self.message = message
        super().__init__(message)


class ValidationError(CurrencyExchangeError):
    """Raised when request data is missing or malformed."""

    status_code = 400


class AuthenticationError(CurrencyExchangeError):
    """Raised on bad credentials or an invalid/expired token."""

    status_code = 401


class AuthorizationError(CurrencyExchangeError):
    """Raised when an authenticated user lacks the required role."""

    status_code = 403


class NotFoundError(CurrencyExchangeError):
    """Raised when a requested resource cannot be found."""

    status_code = 404


class ConflictError(CurrencyExchangeError):
    """Raised when creating a resource that already exists.

    Duplicates are reported as 400, matching the rest of the API's
    duplicate-key handling.
    """

    status_code = 400
