from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class CsrfMismatchError(AccessDeniedError):
    """Raised when a state-changing request carries no CSRF token or a token not matching its session."""

    def __init__(self, message: str = "Invalid or missing CSRF token") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ServiceError(ABC, Exception):
    """Base class for server-side failures whose messages are safe to show.

    Rendered as 500 responses; never retried inline.
    """


class SessionUnavailableError(ServiceError):
    """Raised when the session store is unreachable, misconfigured or too slow."""

    def __init__(self, message: str = "Session store unavailable") -> None:
        super().__init__(message)


class LogoutError(ServiceError):
    """Raised when a session could not be destroyed; client cookies are left untouched."""

    def __init__(self, message: str = "Failed to logout") -> None:
        super().__init__(message)
