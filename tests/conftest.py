import json
from collections.abc import Callable

import httpx
import pytest

from crosspost.domain.credentials import LinkedInTokenBundle
from crosspost.infrastructure.credential_store import InMemoryCredentialStore


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def json_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def transport_factory():
    """Build a recording transport from a request handler."""
    return RecordingTransport


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def facebook_record() -> dict:
    return {"field1": "fb-page-token", "field2": "1234567890"}


@pytest.fixture
def instagram_record() -> dict:
    return {"field1": "ig-page-token", "field2": "17841400000000"}


@pytest.fixture
def twitter_record() -> dict:
    return {
        "field1": "consumer-key",
        "field2": "consumer-secret",
        "field3": "access-token",
        "field4": "access-secret",
    }


@pytest.fixture
def linkedin_bundle() -> LinkedInTokenBundle:
    return LinkedInTokenBundle.issue(
        access_token="li-access-token",
        remote_user_id="abc123",
        expires_in=5_184_000,
        issued_at_ms=1_700_000_000_000,
        refresh_token="li-refresh-token",
    )
