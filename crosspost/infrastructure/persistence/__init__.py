from .credential_repository import SqlAlchemyCredentialStore
from .database import Database
from .models import Base, CredentialModel

__all__ = [
    "Base",
    "CredentialModel",
    "Database",
    "SqlAlchemyCredentialStore",
]
