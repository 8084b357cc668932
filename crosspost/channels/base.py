from abc import abstractmethod
from typing import Any

import httpx
import structlog

from ..domain.credentials import CredentialRecord
from ..domain.errors import ErrorKind, PublishError
from ..domain.models import MediaReference, PlatformResult, PublishFailure, PublishSuccess
from ..domain.ports import PlatformAdapter

logger = structlog.get_logger()


class ChannelAdapter(PlatformAdapter):
    """
    Base for platform adapters.

    Subclasses implement ``_publish`` and may raise PublishError freely;
    ``publish`` turns every exception into a PublishFailure.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Create an HTTP client for one publish attempt."""
        kwargs: dict[str, Any] = {"transport": self._transport}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return httpx.AsyncClient(**kwargs)

    async def publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None = None,
    ) -> PlatformResult:
        platform = self.platform.value
        try:
            return await self._publish(record, content, media)

        except PublishError as e:
            logger.error(
                "Platform publish failed",
                platform=platform,
                error_kind=e.kind.value,
                error=e.message,
                details=e.details,
            )
            return PublishFailure(
                platform=platform,
                error_kind=e.kind,
                message=e.message,
                details=e.details,
                invalidate_credentials=e.invalidate_credentials,
            )

        except httpx.HTTPError as e:
            logger.error("Platform publish failed", platform=platform, error=str(e))
            return PublishFailure(
                platform=platform,
                error_kind=ErrorKind.NETWORK_ERROR,
                message=f"Could not reach {platform}",
                details=str(e) or type(e).__name__,
            )

        except Exception as e:
            logger.error("Platform publish failed", platform=platform, error=str(e), exc_info=True)
            return PublishFailure(
                platform=platform,
                error_kind=ErrorKind.PROVIDER_ERROR,
                message=f"Failed to post to {platform}",
                details=str(e),
            )

    @abstractmethod
    async def _publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None,
    ) -> PublishSuccess:
        """Publish and return the success result, raising on failure."""
        ...
