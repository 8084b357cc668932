import structlog

from ..domain.credentials import CredentialRecord, InstagramCredentials
from ..domain.models import MediaReference, PublishSuccess
from ..domain.platform import Platform
from .graph import GraphApiAdapter

logger = structlog.get_logger()


class InstagramAdapter(GraphApiAdapter):
    """Instagram Graph API adapter for content publishing."""

    @property
    def platform(self) -> Platform:
        return Platform.INSTAGRAM

    async def _publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None,
    ) -> PublishSuccess:
        """Publish to Instagram in two phases: media container, then publish."""
        creds = InstagramCredentials.from_record(record)
        account_id = creds.business_account_id

        async with self._client() as client:
            # Step 1: Create media container (only remote image URLs are accepted)
            container_payload = {
                "caption": content,
                "access_token": creds.page_access_token,
            }
            if media and media.url:
                container_payload["image_url"] = media.url

            container = await self._graph_post(
                client, self._url(account_id, "media"), container_payload
            )
            creation_id = container["id"]
            logger.debug("Instagram media container created", creation_id=creation_id)

            # Step 2: Publish the container
            published = await self._graph_post(
                client,
                self._url(account_id, "media_publish"),
                {
                    "creation_id": creation_id,
                    "access_token": creds.page_access_token,
                },
            )

        media_id = published["id"]
        logger.info("Instagram post published", media_id=media_id, creation_id=creation_id)
        return PublishSuccess(platform=self.platform.value, remote_id=media_id)
