"""
Application service that fans one publish request out to many platforms.

Each platform runs its own flow (credentials, token lifecycle, adapter)
concurrently with the others. Outcomes are collected independently: a failed
platform never blocks, cancels or rolls back another.
"""

import asyncio

import structlog

from ...domain.errors import ErrorKind, PublishError
from ...domain.models import (
    MediaReference,
    PlatformResult,
    PublishFailure,
    PublishReport,
    PublishRequest,
)
from ...domain.platform import Platform
from ...domain.ports import CredentialStore, PlatformAdapter
from ...infrastructure.logging import Timer
from .token_lifecycle import TokenLifecycleManager

logger = structlog.get_logger()


class PublishOrchestrator:
    """
    Publishes content to the requested platforms and aggregates the results.

    Dependencies are injected so tests can run without network or database.
    """

    def __init__(
        self,
        store: CredentialStore,
        adapters: dict[Platform, PlatformAdapter],
        token_managers: dict[Platform, TokenLifecycleManager] | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Args:
            store: Credential store shared by all platform flows
            adapters: Adapter per supported platform
            token_managers: Token lifecycle managers for OAuth2-refresh platforms
            timeout: Optional per-platform time budget in seconds
        """
        self._store = store
        self._adapters = adapters
        self._token_managers = token_managers or {}
        self._timeout = timeout

    async def publish(self, tenant_id: str, request: PublishRequest) -> PublishReport:
        """
        Publish a request to every requested platform.

        Returns:
            PublishReport with one outcome per requested platform
        """
        logger.info(
            "Publishing content",
            tenant_id=tenant_id,
            platforms=list(request.platforms),
            has_media=bool(request.media),
        )

        outcomes = await asyncio.gather(
            *(
                self._publish_guarded(tenant_id, platform_id, request.content, request.media)
                for platform_id in request.platforms
            )
        )
        report = PublishReport(results=dict(zip(request.platforms, outcomes)))

        logger.info(
            "Publish completed",
            tenant_id=tenant_id,
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report

    async def publish_one(
        self,
        tenant_id: str,
        platform_id: str,
        content: str,
        media: MediaReference | None = None,
    ) -> PlatformResult:
        """Publish to a single platform."""
        request = PublishRequest(platforms=(platform_id,), content=content, media=media)
        report = await self.publish(tenant_id, request)
        return report.results[request.platforms[0]]

    async def _publish_guarded(
        self,
        tenant_id: str,
        platform_id: str,
        content: str,
        media: MediaReference | None,
    ) -> PlatformResult:
        """Run one platform flow, converting anything it raises into a failure."""
        with Timer() as t:
            try:
                if self._timeout is not None:
                    result = await asyncio.wait_for(
                        self._publish_platform(tenant_id, platform_id, content, media),
                        timeout=self._timeout,
                    )
                else:
                    result = await self._publish_platform(tenant_id, platform_id, content, media)

            except TimeoutError:
                result = PublishFailure(
                    platform=platform_id,
                    error_kind=ErrorKind.NETWORK_ERROR,
                    message=f"Publishing to {platform_id} timed out",
                    details=f"No response within {self._timeout}s",
                )

            except Exception as e:
                logger.error(
                    "Platform flow failed",
                    platform=platform_id,
                    error=str(e),
                    exc_info=True,
                )
                result = PublishFailure(
                    platform=platform_id,
                    error_kind=ErrorKind.PROVIDER_ERROR,
                    message=f"Failed to post to {platform_id}",
                    details=str(e),
                )

        logger.info(
            "Platform publish finished",
            platform=platform_id,
            success=result.success,
            duration_ms=t.duration_ms,
        )
        return result

    async def _publish_platform(
        self,
        tenant_id: str,
        platform_id: str,
        content: str,
        media: MediaReference | None,
    ) -> PlatformResult:
        platform = Platform.parse(platform_id)
        adapter = self._adapters.get(platform) if platform else None
        if adapter is None:
            logger.warning("Unknown platform", platform=platform_id)
            return PublishFailure(
                platform=platform_id,
                error_kind=ErrorKind.UNKNOWN_PLATFORM,
                message=f"Unknown platform: {platform_id}",
            )

        record = await self._store.get(tenant_id, platform.value)
        if record is None and adapter.requires_credentials:
            return PublishFailure(
                platform=platform_id,
                error_kind=ErrorKind.NOT_CONNECTED,
                message=f"Not connected to {platform.value}",
                details="Connect your account before publishing.",
            )

        manager = self._token_managers.get(platform)
        if manager is not None:
            try:
                bundle = await manager.ensure_valid(tenant_id)
            except PublishError as e:
                if e.kind == ErrorKind.REFRESH_FAILED:
                    # The stored token is proven stale and cannot be renewed
                    await self._invalidate(tenant_id, platform, e.kind)
                return PublishFailure(
                    platform=platform_id,
                    error_kind=e.kind,
                    message=e.message,
                    details=e.details,
                    invalidate_credentials=e.kind == ErrorKind.REFRESH_FAILED,
                )
            record = bundle.to_record()

        result = await adapter.publish(record or {}, content, media)

        if isinstance(result, PublishFailure) and result.invalidate_credentials:
            await self._invalidate(tenant_id, platform, result.error_kind)
        return result

    async def _invalidate(self, tenant_id: str, platform: Platform, reason: ErrorKind) -> None:
        await self._store.delete(tenant_id, platform.value)
        logger.warning(
            "Stored credentials invalidated",
            tenant_id=tenant_id,
            platform=platform.value,
            reason=reason.value,
        )
