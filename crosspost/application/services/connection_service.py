"""
Application service for connecting and disconnecting platform accounts.
"""

import secrets
import time
from collections.abc import Callable

import structlog

from ...domain.credentials import CredentialRecord, LinkedInTokenBundle
from ...domain.errors import AuthFailedError, InvalidStateError, UnknownPlatformError
from ...domain.platform import Platform
from ...domain.ports import CredentialStore, OAuthProvider

logger = structlog.get_logger()


class ConnectionService:
    """Stores, lists and removes platform connections for a tenant."""

    STATE_TTL_MS = 10 * 60 * 1000

    def __init__(
        self,
        store: CredentialStore,
        linkedin: OAuthProvider,
        clock: Callable[[], int] = lambda: int(time.time() * 1000),
    ) -> None:
        self._store = store
        self._linkedin = linkedin
        self._clock = clock
        # state -> (tenant id, expiry in epoch ms)
        self._states: dict[str, tuple[str, int]] = {}

    async def connect(self, tenant_id: str, platform_id: str, credentials: CredentialRecord) -> Platform:
        """
        Store a raw credential record. Fields are validated at publish time.

        Raises:
            UnknownPlatformError: If the platform id is not supported
        """
        platform = _resolve(platform_id)
        await self._store.set(tenant_id, platform.value, dict(credentials))
        logger.info("Platform connected", tenant_id=tenant_id, platform=platform.value)
        return platform

    async def disconnect(self, tenant_id: str, platform_id: str) -> Platform:
        platform = _resolve(platform_id)
        await self._store.delete(tenant_id, platform.value)
        logger.info("Platform disconnected", tenant_id=tenant_id, platform=platform.value)
        return platform

    async def connected_platforms(self, tenant_id: str) -> list[str]:
        return await self._store.list_platforms(tenant_id)

    def linkedin_authorization_url(self, tenant_id: str) -> tuple[str, str]:
        """Return the LinkedIn consent URL and the state value embedded in it.

        The state is remembered for the tenant until it is used or expires.
        """
        self._prune_states()
        state = secrets.token_urlsafe(16)
        self._states[state] = (tenant_id, self._clock() + self.STATE_TTL_MS)
        return self._linkedin.authorization_url(state), state

    async def complete_linkedin_auth(self, tenant_id: str, code: str, state: str) -> dict:
        """
        Exchange an authorization code, confirm the member's identity and
        store the resulting token bundle.

        Returns:
            The LinkedIn profile of the connected member

        Raises:
            InvalidStateError: If the state was not issued to this tenant or has expired
            AuthFailedError: If the exchange or the profile lookup fails
        """
        self._consume_state(tenant_id, state)

        grant = await self._linkedin.exchange_code(code)
        profile = await self._linkedin.fetch_profile(grant.access_token)

        member_id = profile.get("id") or profile.get("sub")
        if not member_id:
            raise AuthFailedError("Failed to get profile", details="Profile carried no member id")

        bundle = LinkedInTokenBundle.issue(
            access_token=grant.access_token,
            remote_user_id=str(member_id),
            expires_in=grant.expires_in,
            issued_at_ms=self._clock(),
            refresh_token=grant.refresh_token,
        )
        await self._store.set(tenant_id, Platform.LINKEDIN.value, bundle.to_record())

        logger.info(
            "LinkedIn connection stored",
            tenant_id=tenant_id,
            member_id=member_id,
            expires_at=bundle.expires_at,
        )
        return profile

    def _consume_state(self, tenant_id: str, state: str) -> None:
        issued = self._states.pop(state, None)
        if issued is None:
            logger.warning("Unknown OAuth state", tenant_id=tenant_id)
            raise InvalidStateError("Invalid or expired state")

        owner, expires_at = issued
        if owner != tenant_id or expires_at <= self._clock():
            logger.warning(
                "Rejected OAuth state",
                tenant_id=tenant_id,
                tenant_mismatch=owner != tenant_id,
                expired=expires_at <= self._clock(),
            )
            raise InvalidStateError("Invalid or expired state")

    def _prune_states(self) -> None:
        now = self._clock()
        for state in [s for s, (_, expires_at) in self._states.items() if expires_at <= now]:
            del self._states[state]


def _resolve(platform_id: str) -> Platform:
    platform = Platform.parse(platform_id)
    if platform is None:
        raise UnknownPlatformError(f"Unknown platform: {platform_id}")
    return platform
