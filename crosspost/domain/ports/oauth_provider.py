"""
Outbound port for OAuth2 providers with refreshable access tokens.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TokenGrant:
    """Token endpoint response."""

    access_token: str
    expires_in: int | None = None
    refresh_token: str | None = None


class OAuthProvider(ABC):
    """Provider operations needed to keep an access token usable."""

    @abstractmethod
    def authorization_url(self, state: str) -> str:
        """Build the consent-screen URL the user is redirected to."""
        ...

    @abstractmethod
    async def exchange_code(self, code: str) -> TokenGrant:
        """Exchange an authorization code for a token grant."""
        ...

    @abstractmethod
    async def fetch_profile(self, access_token: str) -> dict:
        """Fetch the authenticated member's profile."""
        ...

    @abstractmethod
    async def probe(self, access_token: str) -> bool:
        """
        Check whether the provider still accepts an access token.

        Returns:
            True if accepted, False if the provider rejected the token

        Raises:
            ProviderError: If the provider answered with a server error
            httpx.HTTPError: If the provider could not be reached
        """
        ...

    @abstractmethod
    async def refresh(self, refresh_token: str) -> TokenGrant:
        """
        Exchange a refresh token for a new grant.

        Raises:
            RefreshFailedError: If the provider rejected the refresh token
            ProviderError: If the provider answered with a server error
            NetworkError: If the provider could not be reached
        """
        ...
