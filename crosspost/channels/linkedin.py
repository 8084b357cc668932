import json

import structlog

from ..domain.credentials import CredentialRecord, LinkedInTokenBundle
from ..domain.errors import AuthExpiredError, MalformedResponseError, ProviderError
from ..domain.models import MediaReference, PublishSuccess
from ..domain.platform import Platform
from .base import ChannelAdapter

logger = structlog.get_logger()

REAUTH_DETAILS = "Your LinkedIn connection has expired. Please reconnect your account."


def build_share_payload(author_id: str, content: str) -> dict:
    """Build a UGC share: public, published, text only."""
    return {
        "author": f"urn:li:person:{author_id}",
        "lifecycleState": "PUBLISHED",
        "specificContent": {
            "com.linkedin.ugc.ShareContent": {
                "shareCommentary": {"text": content},
                "shareMediaCategory": "NONE",
            }
        },
        "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
    }


def _mentions_auth(message: str) -> bool:
    lowered = message.lower()
    return "token" in lowered or "unauthorized" in lowered


class LinkedInAdapter(ChannelAdapter):
    """
    LinkedIn UGC API adapter for member posts.

    Expects a token bundle that the token lifecycle manager has already
    verified; rejections here mean the token went stale in between.
    """

    BASE_URL = "https://api.linkedin.com/v2"
    API_VERSION = "202304"

    @property
    def platform(self) -> Platform:
        return Platform.LINKEDIN

    async def _publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None,
    ) -> PublishSuccess:
        """Create a UGC post. Media is not attached."""
        bundle = LinkedInTokenBundle.from_record(record)
        headers = {
            "Authorization": f"Bearer {bundle.access_token}",
            "Content-Type": "application/json",
            "X-Restli-Protocol-Version": "2.0.0",
            "LinkedIn-Version": self.API_VERSION,
        }

        async with self._client() as client:
            response = await client.post(
                f"{self.BASE_URL}/ugcPosts",
                headers=headers,
                json=build_share_payload(bundle.remote_user_id, content),
            )

        # Read the raw body first so an unparseable reply is reported as such
        body = response.text
        logger.debug("LinkedIn API response", status_code=response.status_code, body=body[:500])

        if response.status_code in (401, 403):
            raise AuthExpiredError("LinkedIn authentication failed", details=REAUTH_DETAILS)

        try:
            data = json.loads(body) if body else {}
        except json.JSONDecodeError as e:
            raise MalformedResponseError(
                "Failed to parse LinkedIn response",
                details=body[:500],
            ) from e

        if not response.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            message = message or response.reason_phrase or "Unknown error"
            if _mentions_auth(message):
                raise AuthExpiredError("LinkedIn authentication failed", details=REAUTH_DETAILS)
            raise ProviderError(f"LinkedIn API error ({response.status_code}): {message}")

        post_id = (data.get("id") if isinstance(data, dict) else None) or response.headers.get(
            "x-restli-id"
        )
        if not post_id:
            raise MalformedResponseError("LinkedIn response carried no post id", details=body[:500])

        logger.info("LinkedIn post created", post_id=post_id)
        return PublishSuccess(
            platform=self.platform.value,
            remote_id=post_id,
            message="Post created successfully. It may take a few minutes to appear on your LinkedIn profile.",
        )
