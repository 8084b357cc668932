"""
Outbound port for credential storage.

Records are keyed by (tenant, platform). Implementations live in the
infrastructure layer.
"""

from abc import ABC, abstractmethod

from ..credentials import CredentialRecord


class CredentialStore(ABC):
    """
    Outbound port for per-tenant, per-platform publishing credentials.

    Records are opaque: shape validation happens at publish time in the
    platform adapters, not on write.
    """

    @abstractmethod
    async def get(self, tenant_id: str, platform: str) -> CredentialRecord | None:
        """
        Retrieve the record for a platform.

        Returns:
            A copy of the stored record, or None when not connected
        """
        ...

    @abstractmethod
    async def set(self, tenant_id: str, platform: str, record: CredentialRecord) -> None:
        """Store a record, replacing any previous one for the platform."""
        ...

    @abstractmethod
    async def delete(self, tenant_id: str, platform: str) -> None:
        """Remove the record for a platform. Missing records are ignored."""
        ...

    @abstractmethod
    async def list_platforms(self, tenant_id: str) -> list[str]:
        """Return the platforms the tenant has connected."""
        ...
