from .adapter_factory import PlatformAdapterFactory
from .credential_store import InMemoryCredentialStore

__all__ = [
    "InMemoryCredentialStore",
    "PlatformAdapterFactory",
]
