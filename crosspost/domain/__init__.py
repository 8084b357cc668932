from .credentials import (
    CredentialRecord,
    FacebookCredentials,
    InstagramCredentials,
    LinkedInTokenBundle,
    TwitterCredentials,
)
from .errors import ErrorKind, PublishError
from .models import (
    MediaReference,
    PlatformResult,
    PublishFailure,
    PublishReport,
    PublishRequest,
    PublishSuccess,
)
from .platform import Platform

__all__ = [
    "CredentialRecord",
    "ErrorKind",
    "FacebookCredentials",
    "InstagramCredentials",
    "LinkedInTokenBundle",
    "MediaReference",
    "Platform",
    "PlatformResult",
    "PublishError",
    "PublishFailure",
    "PublishReport",
    "PublishRequest",
    "PublishSuccess",
    "TwitterCredentials",
]
