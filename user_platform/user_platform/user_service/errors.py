"""
Exceptions raised by the user service.

Credential failures (WrongCredentials, UserNotFound, InvalidTokenError) are normal
outcomes of a request. StorageUnavailable and HashingError are server-side failures
and are never reported as credential failures.
"""


class UserServiceError(Exception):
    """Base class for all user service errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class HashingError(UserServiceError):
    """Raised when a password hash could not be produced."""


class WrongCredentials(UserServiceError):
    """Raised when a password does not verify against the stored record."""


class UserNotFound(UserServiceError):
    """Raised when no user matches a lookup."""


class InvalidTokenError(UserServiceError):
    """Raised when a bearer token is malformed, tampered with or signed with another key."""


class EmailAlreadyRegistered(UserServiceError):
    """Raised when creating a user whose email is already stored."""


class StorageUnavailable(UserServiceError):
    """Raised when the database cannot be reached or the driver fails."""
