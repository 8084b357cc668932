import httpx
import pytest

from crosspost.channels import LinkedInAdapter
from crosspost.channels.linkedin import REAUTH_DETAILS, build_share_payload
from crosspost.domain.errors import ErrorKind


@pytest.fixture
def record(linkedin_bundle) -> dict:
    return linkedin_bundle.to_record()


class TestBuildSharePayload:
    def test_public_text_share(self):
        payload = build_share_payload("abc123", "Hello LinkedIn")

        assert payload["author"] == "urn:li:person:abc123"
        assert payload["lifecycleState"] == "PUBLISHED"
        share = payload["specificContent"]["com.linkedin.ugc.ShareContent"]
        assert share["shareCommentary"]["text"] == "Hello LinkedIn"
        assert share["shareMediaCategory"] == "NONE"
        assert payload["visibility"] == {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"}


class TestLinkedInAdapter:
    @pytest.mark.asyncio
    async def test_publish_success(self, transport_factory, record):
        transport = transport_factory(lambda r: httpx.Response(201, json={"id": "urn:li:share:1"}))
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello LinkedIn")

        assert result.success is True
        assert result.remote_id == "urn:li:share:1"
        assert "few minutes" in result.message

        request = transport.requests[0]
        assert str(request.url) == "https://api.linkedin.com/v2/ugcPosts"
        assert request.headers["Authorization"] == "Bearer li-access-token"
        assert request.headers["X-Restli-Protocol-Version"] == "2.0.0"
        assert transport.json_bodies()[0]["author"] == "urn:li:person:abc123"

    @pytest.mark.asyncio
    async def test_post_id_from_header_when_body_empty(self, transport_factory, record):
        transport = transport_factory(
            lambda r: httpx.Response(201, headers={"x-restli-id": "urn:li:share:2"})
        )
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello")

        assert result.remote_id == "urn:li:share:2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403])
    async def test_rejected_token_expires_credentials(self, transport_factory, record, status_code):
        transport = transport_factory(lambda r: httpx.Response(status_code, text="not even json"))
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello")

        assert result.error_kind == ErrorKind.AUTH_EXPIRED
        assert result.invalidate_credentials is True
        assert result.details == REAUTH_DETAILS

    @pytest.mark.asyncio
    async def test_unparseable_body_is_malformed(self, transport_factory, record):
        transport = transport_factory(lambda r: httpx.Response(201, text="{oops"))
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello")

        assert result.error_kind == ErrorKind.MALFORMED_RESPONSE
        assert result.message == "Failed to parse LinkedIn response"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [{}, {"json": {"status": "ok"}}])
    async def test_success_without_post_id_is_malformed(self, transport_factory, record, reply):
        transport = transport_factory(lambda r: httpx.Response(201, **reply))
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello")

        assert result.success is False
        assert result.error_kind == ErrorKind.MALFORMED_RESPONSE
        assert result.message == "LinkedIn response carried no post id"
        assert result.invalidate_credentials is False

    @pytest.mark.asyncio
    async def test_api_error_is_provider_error(self, transport_factory, record):
        transport = transport_factory(
            lambda r: httpx.Response(422, json={"message": "Content is a duplicate"})
        )
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello")

        assert result.error_kind == ErrorKind.PROVIDER_ERROR
        assert result.message == "LinkedIn API error (422): Content is a duplicate"
        assert result.invalidate_credentials is False

    @pytest.mark.asyncio
    async def test_token_error_message_expires_credentials(self, transport_factory, record):
        transport = transport_factory(
            lambda r: httpx.Response(400, json={"message": "Invalid access token"})
        )
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish(record, "Hello")

        assert result.error_kind == ErrorKind.AUTH_EXPIRED

    @pytest.mark.asyncio
    async def test_malformed_bundle_makes_no_request(self, transport_factory):
        transport = transport_factory(lambda r: httpx.Response(201, json={"id": "x"}))
        adapter = LinkedInAdapter(transport=transport)

        result = await adapter.publish({"access_token": "tok"}, "Hello")

        assert result.error_kind == ErrorKind.MISSING_CREDENTIAL_FIELDS
        assert transport.requests == []
