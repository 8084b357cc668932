"""
Factory for platform adapter instances.

Creates the adapter for each platform from service settings.
"""

from ..channels import (
    FacebookAdapter,
    InstagramAdapter,
    LinkedInAdapter,
    ThreadsAdapter,
    TwitterAdapter,
)
from ..config import Settings
from ..domain.platform import Platform
from ..domain.ports import PlatformAdapter


class PlatformAdapterFactory:
    """
    Factory for platform adapter instances.

    Adapters are stateless between calls, so one instance per platform is
    shared by all requests.
    """

    _instances: dict[Platform, PlatformAdapter] = {}

    @classmethod
    def get_adapter(cls, platform: Platform, settings: Settings) -> PlatformAdapter:
        """
        Get or create the adapter for a platform.

        Raises:
            ValueError: If the platform is not supported
        """
        if platform not in cls._instances:
            cls._instances[platform] = cls._create_adapter(platform, settings)
        return cls._instances[platform]

    @classmethod
    def _create_adapter(cls, platform: Platform, settings: Settings) -> PlatformAdapter:
        timeout = settings.http_timeout_seconds
        match platform:
            case Platform.FACEBOOK:
                return FacebookAdapter(api_version=settings.graph_api_version, timeout=timeout)
            case Platform.INSTAGRAM:
                return InstagramAdapter(api_version=settings.graph_api_version, timeout=timeout)
            case Platform.TWITTER:
                return TwitterAdapter(timeout=timeout)
            case Platform.LINKEDIN:
                return LinkedInAdapter(timeout=timeout)
            case Platform.THREADS:
                return ThreadsAdapter()
            case _:
                raise ValueError(f"Unsupported platform: {platform}")

    @classmethod
    def get_all_adapters(cls, settings: Settings) -> dict[Platform, PlatformAdapter]:
        """Get adapters for every supported platform."""
        return {platform: cls.get_adapter(platform, settings) for platform in Platform}

    @classmethod
    def reset(cls) -> None:
        """Reset all cached adapter instances (useful for testing)."""
        cls._instances.clear()
