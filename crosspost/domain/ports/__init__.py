from .credential_store import CredentialStore
from .oauth_provider import OAuthProvider, TokenGrant
from .platform_adapter import PlatformAdapter

__all__ = [
    "CredentialStore",
    "OAuthProvider",
    "PlatformAdapter",
    "TokenGrant",
]
