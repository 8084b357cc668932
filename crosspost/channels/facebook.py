import structlog

from ..domain.credentials import CredentialRecord, FacebookCredentials
from ..domain.models import MediaReference, PublishSuccess
from ..domain.platform import Platform
from .graph import GraphApiAdapter

logger = structlog.get_logger()


class FacebookAdapter(GraphApiAdapter):
    """Facebook Graph API adapter for Page feed posts."""

    @property
    def platform(self) -> Platform:
        return Platform.FACEBOOK

    async def _publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None,
    ) -> PublishSuccess:
        """Post text to the Page feed. Media is not attached."""
        creds = FacebookCredentials.from_record(record)

        payload = {
            "message": content,
            "access_token": creds.page_access_token,
        }

        async with self._client() as client:
            data = await self._graph_post(client, self._url(creds.page_id, "feed"), payload)

        post_id = data["id"]
        logger.info("Facebook post created", post_id=post_id, page_id=creds.page_id)
        return PublishSuccess(platform=self.platform.value, remote_id=post_id)
