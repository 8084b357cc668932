"""
Shared Meta Graph API plumbing for Facebook and Instagram.
"""

from json import JSONDecodeError

import httpx

from ..domain.errors import AuthExpiredError, MalformedResponseError, ProviderError
from .base import ChannelAdapter

# Graph error code for invalid or expired access tokens
INVALID_TOKEN_CODE = 190


class GraphApiAdapter(ChannelAdapter):
    """Base for adapters talking to graph.facebook.com."""

    BASE_URL = "https://graph.facebook.com"

    def __init__(
        self,
        api_version: str = "v19.0",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(transport=transport, timeout=timeout)
        self._api_version = api_version

    def _url(self, node_id: str, edge: str) -> str:
        return f"{self.BASE_URL}/{self._api_version}/{node_id}/{edge}"

    async def _graph_post(self, client: httpx.AsyncClient, url: str, payload: dict) -> dict:
        """POST to a Graph edge and return the decoded body, raising on errors."""
        response = await client.post(url, json=payload)

        try:
            data = response.json()
        except (JSONDecodeError, ValueError) as e:
            raise MalformedResponseError(
                f"Unreadable {self.platform.value} response (HTTP {response.status_code})",
                details=response.text[:500],
            ) from e

        error = data.get("error") if isinstance(data, dict) else None
        if error or not response.is_success:
            error = error or {}
            message = error.get("message") or f"Graph API error: {response.status_code}"
            if error.get("code") == INVALID_TOKEN_CODE or response.status_code == 401:
                raise AuthExpiredError(
                    f"{self.platform.value.capitalize()} access token is no longer valid",
                    details=message,
                )
            raise ProviderError(message, details=error.get("type"))

        if not isinstance(data, dict) or not data.get("id"):
            raise MalformedResponseError(
                f"{self.platform.value.capitalize()} response carried no id",
                details=response.text[:500],
            )
        return data
