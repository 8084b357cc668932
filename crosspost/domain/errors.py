"""
Publish error taxonomy.

Adapters and the token lifecycle manager raise these internally; they are
converted into PublishFailure results before reaching the caller.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of per-platform publish failures."""

    NOT_CONNECTED = "NOT_CONNECTED"
    MISSING_CREDENTIAL_FIELDS = "MISSING_CREDENTIAL_FIELDS"
    AUTH_FAILED = "AUTH_FAILED"
    AUTH_EXPIRED = "AUTH_EXPIRED"
    REFRESH_FAILED = "REFRESH_FAILED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    UNKNOWN_PLATFORM = "UNKNOWN_PLATFORM"
    NETWORK_ERROR = "NETWORK_ERROR"

    @property
    def requires_reauth(self) -> bool:
        """Whether the user must reconnect the account to recover."""
        return self in (ErrorKind.AUTH_EXPIRED, ErrorKind.REFRESH_FAILED)


class PublishError(Exception):
    """Base exception for publish flow failures."""

    kind: ErrorKind = ErrorKind.PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        details: str | None = None,
        invalidate_credentials: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.invalidate_credentials = invalidate_credentials


class NotConnectedError(PublishError):
    kind = ErrorKind.NOT_CONNECTED


class MissingCredentialFieldsError(PublishError):
    kind = ErrorKind.MISSING_CREDENTIAL_FIELDS


class AuthFailedError(PublishError):
    kind = ErrorKind.AUTH_FAILED


class InvalidStateError(AuthFailedError):
    """OAuth state was never issued, already used, expired or belongs to another tenant."""


class AuthExpiredError(PublishError):
    """Provider rejected a previously valid credential; it must be purged."""

    kind = ErrorKind.AUTH_EXPIRED

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message, details=details, invalidate_credentials=True)


class RefreshFailedError(PublishError):
    kind = ErrorKind.REFRESH_FAILED


class NoRefreshTokenError(RefreshFailedError):
    """The stored token bundle carries no refresh token."""


class ProviderError(PublishError):
    kind = ErrorKind.PROVIDER_ERROR


class MalformedResponseError(PublishError):
    kind = ErrorKind.MALFORMED_RESPONSE


class UnknownPlatformError(PublishError):
    kind = ErrorKind.UNKNOWN_PLATFORM


class NetworkError(PublishError):
    kind = ErrorKind.NETWORK_ERROR
