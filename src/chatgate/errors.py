from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class AuthenticationError(UserError):
    """Raised when a request carries no valid session token."""

    def __init__(self, message: str = "Invalid or expired session") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email and password do not match an account."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DuplicateAccountError(UserError):
    """Raised when registering an email that already has an account."""

    def __init__(self, message: str = "Email is already registered") -> None:
        super().__init__(message)


class ServiceUnavailableError(UserError):
    """Raised when no upstream API key is configured."""

    def __init__(self, message: str = "No API key available") -> None:
        super().__init__(message)


class RateLimitedError(UserError):
    """Raised when the upstream API throttles or refuses the key. Clients should retry."""

    def __init__(self, message: str = "Rate limited. Please try again.") -> None:
        super().__init__(message)


class UpstreamError(UserError):
    """Raised for any other upstream failure or malformed upstream response."""
