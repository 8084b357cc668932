from datetime import UTC, datetime, timedelta

import pytest

from crosspost.domain.errors import (
    AuthExpiredError,
    ErrorKind,
    NoRefreshTokenError,
    ProviderError,
)
from crosspost.domain.models import (
    MediaReference,
    PublishFailure,
    PublishReport,
    PublishRequest,
    PublishSuccess,
)
from crosspost.domain.platform import Platform


class TestPlatform:
    def test_parse_is_case_and_whitespace_insensitive(self):
        assert Platform.parse(" Twitter ") == Platform.TWITTER

    def test_parse_unknown_returns_none(self):
        assert Platform.parse("myspace") is None

    def test_parse_non_string_returns_none(self):
        assert Platform.parse(None) is None


class TestPublishRequest:
    def test_create_valid_request(self):
        request = PublishRequest(platforms=("facebook",), content="Hello")

        assert request.platforms == ("facebook",)
        assert request.media is None
        assert request.scheduled_at is None

    def test_empty_content_raises_error(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            PublishRequest(platforms=("facebook",), content="")

    def test_whitespace_only_content_raises_error(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            PublishRequest(platforms=("facebook",), content="   ")

    def test_no_platforms_raises_error(self):
        with pytest.raises(ValueError, match="At least one platform"):
            PublishRequest(platforms=(), content="Hello")

    def test_duplicate_platforms_are_collapsed_in_order(self):
        request = PublishRequest(
            platforms=("Twitter", "facebook", "twitter", " facebook "),
            content="Hello",
        )

        assert request.platforms == ("twitter", "facebook")

    def test_naive_schedule_time_raises_error(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            PublishRequest(
                platforms=("facebook",),
                content="Hello",
                scheduled_at=datetime(2030, 1, 1),
            )

    def test_aware_schedule_time_accepted(self):
        when = datetime.now(UTC) + timedelta(hours=1)
        request = PublishRequest(platforms=("facebook",), content="Hello", scheduled_at=when)

        assert request.scheduled_at == when

    def test_request_is_immutable(self):
        request = PublishRequest(platforms=("facebook",), content="Hello")

        with pytest.raises(AttributeError):
            request.content = "changed"


class TestMediaReference:
    def test_url_or_path_is_uploadable(self):
        assert MediaReference(url="https://example.com/a.jpg").is_uploadable
        assert MediaReference(path="/tmp/a.jpg").is_uploadable

    def test_name_only_is_not_uploadable(self):
        assert not MediaReference(name="a.jpg", size=10).is_uploadable


class TestPublishReport:
    def test_summary_counts_successes(self):
        report = PublishReport(
            results={
                "facebook": PublishSuccess(platform="facebook", remote_id="1_2"),
                "twitter": PublishFailure(
                    platform="twitter",
                    error_kind=ErrorKind.AUTH_FAILED,
                    message="Twitter authentication failed",
                ),
            }
        )

        assert report.succeeded == ["facebook"]
        assert report.failed == ["twitter"]
        assert report.summary == "Published to 1/2 platforms"

    def test_result_success_flag_is_fixed(self):
        assert PublishSuccess(platform="threads").success is True
        assert PublishFailure(
            platform="x", error_kind=ErrorKind.UNKNOWN_PLATFORM, message="Unknown"
        ).success is False


class TestErrors:
    def test_auth_expired_always_invalidates(self):
        error = AuthExpiredError("expired")

        assert error.invalidate_credentials is True
        assert error.kind == ErrorKind.AUTH_EXPIRED

    def test_provider_error_keeps_credentials(self):
        assert ProviderError("rate limited").invalidate_credentials is False

    def test_missing_refresh_token_is_a_refresh_failure(self):
        assert NoRefreshTokenError("none").kind == ErrorKind.REFRESH_FAILED

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (ErrorKind.AUTH_EXPIRED, True),
            (ErrorKind.REFRESH_FAILED, True),
            (ErrorKind.AUTH_FAILED, False),
            (ErrorKind.NOT_CONNECTED, False),
            (ErrorKind.NETWORK_ERROR, False),
        ],
    )
    def test_requires_reauth(self, kind, expected):
        assert kind.requires_reauth is expected
