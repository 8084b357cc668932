"""
LinkedIn OAuth 2.0 client.

Implements the authorization-code flow, the identity check used to validate
stored tokens, and refresh-token exchange.
"""

from json import JSONDecodeError
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from ...domain.errors import AuthFailedError, NetworkError, ProviderError, RefreshFailedError
from ...domain.ports import OAuthProvider, TokenGrant
from ..logging import sanitize_for_logging

logger = structlog.get_logger()


class LinkedInOAuthClient(OAuthProvider):
    """LinkedIn OAuth 2.0 endpoints."""

    # Statuses that mean the token itself is no good
    REJECTED_STATUSES = frozenset({401, 403})

    AUTHORIZATION_URL = "https://www.linkedin.com/oauth/v2/authorization"
    TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
    PROFILE_URL = "https://api.linkedin.com/v2/me"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: str = "w_member_social",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._scope = scope
        self._transport = transport
        self._timeout = timeout

        if not self.is_configured:
            logger.warning("LinkedIn client credentials not configured")

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {"transport": self._transport}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return httpx.AsyncClient(**kwargs)

    def authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "scope": self._scope,
            "state": state,
        }
        return f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> TokenGrant:
        _, data = await self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            }
        )
        if data.get("error") or not data.get("access_token"):
            raise AuthFailedError(
                "Failed to get access token",
                details=data.get("error_description") or data.get("error"),
            )
        return _grant(data)

    async def fetch_profile(self, access_token: str) -> dict:
        async with self._client() as client:
            response = await client.get(self.PROFILE_URL, headers=_bearer(access_token))

        try:
            data = response.json()
        except (JSONDecodeError, ValueError):
            data = {}

        if not response.is_success:
            logger.error("LinkedIn profile request failed", status_code=response.status_code)
            raise AuthFailedError(
                "Failed to get profile",
                details=data.get("message") or f"HTTP {response.status_code}",
            )
        return data

    async def probe(self, access_token: str) -> bool:
        async with self._client() as client:
            response = await client.get(
                self.PROFILE_URL,
                headers={
                    **_bearer(access_token),
                    "X-Restli-Protocol-Version": "2.0.0",
                    "LinkedIn-Version": "202304",
                },
            )
        logger.debug(
            "LinkedIn token check",
            status_code=response.status_code,
            token=sanitize_for_logging(access_token),
        )
        if response.is_success:
            return True
        if response.status_code in self.REJECTED_STATUSES:
            return False
        raise ProviderError(
            f"LinkedIn token check failed (HTTP {response.status_code})",
            details=response.text[:200] or None,
        )

    async def refresh(self, refresh_token: str) -> TokenGrant:
        try:
            status_code, data = await self._token_request(
                {
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                }
            )
        except httpx.HTTPError as e:
            logger.warning("LinkedIn token endpoint unreachable", error=str(e))
            raise NetworkError("Could not reach LinkedIn", details=str(e)) from e

        details = data.get("error_description") or data.get("error")
        if status_code >= 500:
            raise ProviderError(f"LinkedIn token endpoint failed (HTTP {status_code})", details=details)
        if data.get("error") or not data.get("access_token"):
            raise RefreshFailedError("Failed to refresh token", details=details)
        return _grant(data)

    async def _token_request(self, form: dict[str, str]) -> tuple[int, dict]:
        async with self._client() as client:
            response = await client.post(
                self.TOKEN_URL,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        try:
            data = response.json()
        except (JSONDecodeError, ValueError):
            data = {"error": "invalid_response", "error_description": response.text[:200]}

        if not isinstance(data, dict):
            data = {"error": "invalid_response"}
        if not response.is_success and not data.get("error"):
            data["error"] = f"HTTP {response.status_code}"
        return response.status_code, data


def _bearer(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def _grant(data: dict) -> TokenGrant:
    expires_in = data.get("expires_in")
    return TokenGrant(
        access_token=data["access_token"],
        expires_in=int(expires_in) if expires_in is not None else None,
        refresh_token=data.get("refresh_token"),
    )
