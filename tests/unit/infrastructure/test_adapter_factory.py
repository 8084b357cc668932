import pytest

from crosspost.channels import (
    FacebookAdapter,
    InstagramAdapter,
    LinkedInAdapter,
    ThreadsAdapter,
    TwitterAdapter,
)
from crosspost.config import Settings
from crosspost.domain.platform import Platform
from crosspost.infrastructure import PlatformAdapterFactory


@pytest.fixture(autouse=True)
def reset_factory():
    PlatformAdapterFactory.reset()
    yield
    PlatformAdapterFactory.reset()


class TestPlatformAdapterFactory:
    def test_all_platforms_have_adapters(self):
        adapters = PlatformAdapterFactory.get_all_adapters(Settings())

        assert {p: type(a) for p, a in adapters.items()} == {
            Platform.FACEBOOK: FacebookAdapter,
            Platform.INSTAGRAM: InstagramAdapter,
            Platform.TWITTER: TwitterAdapter,
            Platform.LINKEDIN: LinkedInAdapter,
            Platform.THREADS: ThreadsAdapter,
        }

    def test_adapters_are_cached(self):
        settings = Settings()

        first = PlatformAdapterFactory.get_adapter(Platform.TWITTER, settings)

        assert PlatformAdapterFactory.get_adapter(Platform.TWITTER, settings) is first

    def test_reset_clears_cache(self):
        settings = Settings()
        first = PlatformAdapterFactory.get_adapter(Platform.FACEBOOK, settings)

        PlatformAdapterFactory.reset()

        assert PlatformAdapterFactory.get_adapter(Platform.FACEBOOK, settings) is not first
