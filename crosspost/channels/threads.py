import structlog

from ..domain.credentials import CredentialRecord
from ..domain.models import MediaReference, PublishSuccess
from ..domain.platform import Platform
from .base import ChannelAdapter

logger = structlog.get_logger()

THREADS_UNSUPPORTED_MESSAGE = "Threads posting is not supported (no official API)."


class ThreadsAdapter(ChannelAdapter):
    """Threads has no public posting API; publishing is a reported no-op."""

    requires_credentials = False

    @property
    def platform(self) -> Platform:
        return Platform.THREADS

    async def _publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None,
    ) -> PublishSuccess:
        logger.info("Threads publish skipped", reason="no official API")
        return PublishSuccess(platform=self.platform.value, message=THREADS_UNSUPPORTED_MESSAGE)
