"""
Application service keeping OAuth2 access tokens usable.

Every publish checks the token with the provider before trusting it, so
server-side revocation is caught even when the local expiry says the token
is still good. Rejected tokens are refreshed with the stored refresh token.
"""

import time
from collections.abc import Callable

import httpx
import structlog

from ...domain.credentials import LinkedInTokenBundle
from ...domain.errors import (
    NetworkError,
    NoRefreshTokenError,
    NotConnectedError,
    ProviderError,
    PublishError,
    RefreshFailedError,
)
from ...domain.ports import CredentialStore, OAuthProvider
from ...infrastructure.logging import sanitize_for_logging

logger = structlog.get_logger()


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenLifecycleManager:
    """
    Validates and refreshes the token bundle stored for one OAuth2 platform.

    Stored bundles are replaced as a whole on refresh. The manager never
    deletes credentials; callers decide what a refresh failure means.
    """

    def __init__(
        self,
        platform: str,
        store: CredentialStore,
        provider: OAuthProvider,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """
        Args:
            platform: Store key the bundle lives under
            store: Credential store holding the bundle
            provider: OAuth provider used to check and refresh
            clock: Current time in epoch milliseconds
        """
        self._platform = platform
        self._store = store
        self._provider = provider
        self._clock = clock

    async def get_valid_token(self, tenant_id: str) -> str:
        """Return an access token the provider currently accepts."""
        bundle = await self.ensure_valid(tenant_id)
        return bundle.access_token

    async def ensure_valid(self, tenant_id: str) -> LinkedInTokenBundle:
        """
        Return the stored bundle after confirming the provider accepts it,
        refreshing it first if the provider rejects it.

        Only a token the provider explicitly rejected can end in
        RefreshFailedError. When the provider could not be asked, a refresh is
        still attempted, but its rejection surfaces as the original
        NetworkError or ProviderError.

        Raises:
            NotConnectedError: If no bundle is stored
            MissingCredentialFieldsError: If the stored bundle is malformed
            RefreshFailedError: If the token was rejected and could not be refreshed
            NetworkError: If the provider could not be reached
            ProviderError: If the provider answered with a server error
        """
        bundle = await self._load(tenant_id)

        check_error: PublishError | None = None
        try:
            accepted = await self._provider.probe(bundle.access_token)
        except httpx.HTTPError as e:
            check_error = NetworkError(
                f"Could not reach {self._platform} to validate token", details=str(e)
            )
            accepted = False
        except ProviderError as e:
            check_error = e
            accepted = False

        if accepted:
            logger.debug("Token is valid", platform=self._platform)
            return bundle

        if check_error is None:
            logger.info("Token rejected, attempting refresh", platform=self._platform)
            return await self.refresh(tenant_id)

        logger.warning(
            "Token validation unavailable",
            platform=self._platform,
            error=check_error.message,
            details=check_error.details,
        )
        if not bundle.refresh_token:
            raise check_error
        try:
            return await self.refresh(tenant_id)
        except RefreshFailedError as e:
            raise check_error from e

    async def refresh(self, tenant_id: str) -> LinkedInTokenBundle:
        """
        Exchange the stored refresh token for a new bundle and store it.

        Raises:
            NotConnectedError: If no bundle is stored
            NoRefreshTokenError: If the bundle has no refresh token
            RefreshFailedError: If the provider rejects the exchange
            NetworkError: If the provider could not be reached
            ProviderError: If the provider answered with a server error
        """
        current = await self._load(tenant_id)
        if not current.refresh_token:
            logger.error("No refresh token available", platform=self._platform)
            raise NoRefreshTokenError(
                "No refresh token available",
                details=f"Reconnect your {self._platform} account.",
            )

        try:
            grant = await self._provider.refresh(current.refresh_token)
        except RefreshFailedError:
            logger.error("Token refresh rejected", platform=self._platform)
            raise

        refreshed = LinkedInTokenBundle.issue(
            access_token=grant.access_token,
            remote_user_id=current.remote_user_id,
            expires_in=grant.expires_in,
            issued_at_ms=self._clock(),
            refresh_token=grant.refresh_token or current.refresh_token,
        )
        await self._store.set(tenant_id, self._platform, refreshed.to_record())

        logger.info(
            "Token refreshed",
            platform=self._platform,
            token=sanitize_for_logging(refreshed.access_token),
            expires_at=refreshed.expires_at,
        )
        return refreshed

    async def _load(self, tenant_id: str) -> LinkedInTokenBundle:
        record = await self._store.get(tenant_id, self._platform)
        if record is None:
            raise NotConnectedError(f"Not connected to {self._platform}")
        return LinkedInTokenBundle.from_record(record)
