"""
Authentication and authorization errors.

Every login failure shares one public message; the subclass only tells the
logs which kind of failure happened.
"""

PUBLIC_AUTH_MESSAGE = "Incorrect credentials or connection error"


class AuthError(Exception):
    """Base class for failures that leave the caller unauthenticated."""

    kind = "auth_error"

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(reason or self.kind)

    @property
    def public_message(self) -> str:
        return PUBLIC_AUTH_MESSAGE


class Unauthenticated(AuthError):
    kind = "unauthenticated"


class InvalidCredentials(AuthError):
    """The directory found no user for the email, or the password did not match."""

    kind = "invalid_credentials"


class DirectoryUnavailable(AuthError):
    """The user directory could not be reached or returned an unusable record."""

    kind = "directory_unavailable"


class StorageUnavailable(AuthError):
    """The persisted-identity backend failed."""

    kind = "storage_unavailable"


class MalformedPersistedState(Exception):
    """A persisted identity could not be decoded. Never shown to users."""


class PolicyConfigError(Exception):
    """The feature access file is missing, unreadable or names unknown values."""
