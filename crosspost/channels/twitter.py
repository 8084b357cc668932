import asyncio
import io
import os

import httpx
import structlog
import tweepy
from tweepy.asynchronous import AsyncClient

from ..domain.credentials import CredentialRecord, TwitterCredentials
from ..domain.errors import AuthFailedError, MalformedResponseError, NetworkError, ProviderError
from ..domain.models import MediaReference, PublishSuccess
from ..domain.platform import Platform
from .base import ChannelAdapter

logger = structlog.get_logger()


def _describe(error: Exception) -> str:
    if isinstance(error, tweepy.HTTPException) and error.api_messages:
        return "; ".join(error.api_messages)
    return str(error) or type(error).__name__


class TwitterAdapter(ChannelAdapter):
    """
    X/Twitter adapter built on tweepy.

    Tweets go through the v2 API with OAuth 1.0a user context; media goes
    through the v1.1 upload endpoint, which tweepy only exposes synchronously.
    """

    @property
    def platform(self) -> Platform:
        return Platform.TWITTER

    def _api_client(self, creds: TwitterCredentials) -> AsyncClient:
        return AsyncClient(
            consumer_key=creds.api_key,
            consumer_secret=creds.api_secret,
            access_token=creds.access_token,
            access_token_secret=creds.access_secret,
        )

    async def _publish(
        self,
        record: CredentialRecord,
        content: str,
        media: MediaReference | None,
    ) -> PublishSuccess:
        creds = TwitterCredentials.from_record(record)
        # Without a shared session tweepy opens and closes one per request
        client = self._api_client(creds)

        # Verify credentials before touching media or tweets
        try:
            me = await client.get_me(user_auth=True)
        except Exception as e:
            raise AuthFailedError("Twitter authentication failed", details=_describe(e)) from e
        logger.debug("Twitter credentials verified", user_id=getattr(me.data, "id", None))

        try:
            if media and media.is_uploadable:
                media_id = await self._upload_media(creds, media)
                response = await client.create_tweet(
                    text=content, media_ids=[media_id], user_auth=True
                )
            else:
                response = await client.create_tweet(text=content, user_auth=True)
        except tweepy.TweepyException as e:
            raise ProviderError("Failed to post to Twitter", details=_describe(e)) from e

        tweet_id = (response.data or {}).get("id")
        if not tweet_id:
            raise MalformedResponseError("Twitter response carried no tweet id")

        logger.info("Tweet created", tweet_id=tweet_id, has_media=bool(media and media.is_uploadable))
        return PublishSuccess(platform=self.platform.value, remote_id=str(tweet_id))

    async def _upload_media(self, creds: TwitterCredentials, media: MediaReference) -> str:
        """Upload a local file or a downloaded remote image and return its media id."""
        auth = tweepy.OAuth1UserHandler(
            creds.api_key, creds.api_secret, creds.access_token, creds.access_secret
        )
        api = tweepy.API(auth)

        if media.path:
            filename = media.path
            file = None
        else:
            try:
                async with self._client() as client:
                    response = await client.get(media.url, follow_redirects=True)
                    response.raise_for_status()
            except httpx.HTTPError as e:
                raise NetworkError("Could not download media for Twitter", details=str(e)) from e
            filename = media.name or os.path.basename(httpx.URL(media.url).path) or "image.jpg"
            file = io.BytesIO(response.content)

        uploaded = await asyncio.to_thread(api.media_upload, filename, file=file)
        logger.debug("Twitter media uploaded", media_id=uploaded.media_id_string)
        return uploaded.media_id_string
