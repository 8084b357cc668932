"""
Outbound port for platform publishing.

This is the interface the orchestrator uses to publish to one platform.
Concrete adapters live in ``crosspost.channels``.
"""

from abc import ABC, abstractmethod

from ..credentials import CredentialRecord
from ..models import MediaReference, PlatformResult
from ..platform import Platform


class PlatformAdapter(ABC):
    """
    Outbound port for publishing content to a single platform.

    Implementations must not raise: every failure is returned as a
    PublishFailure.
    """

    # Platforms without a posting API publish without stored credentials
    requires_credentials: bool = True

    @property
    @abstractmethod
    def platform(self) -> Platform:
        """Return the platform this adapter handles."""
        ...

    @abstractmethod
    async def publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None = None,
    ) -> PlatformResult:
        """
        Publish content with the given stored credentials.

        Args:
            record: Stored credential record for the platform
            content: Post text
            media: Optional image attachment

        Returns:
            PublishSuccess or PublishFailure
        """
        ...
