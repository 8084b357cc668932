"""
Deferred publishing.

Requests with a future ``scheduled_at`` become one-shot APScheduler jobs
that hand the request to the orchestrator when due. Bookkeeping is in
memory: scheduled posts do not survive a restart, and finished posts are
forgotten once their retention period has passed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import uuid4

import structlog
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ...domain.models import PublishReport, PublishRequest
from .publish_orchestrator import PublishOrchestrator

logger = structlog.get_logger()


class ScheduledPostStatus(str, Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


FINISHED_STATUSES = frozenset(
    {ScheduledPostStatus.COMPLETED, ScheduledPostStatus.FAILED, ScheduledPostStatus.CANCELLED}
)


@dataclass
class ScheduledPost:
    id: str
    tenant_id: str
    request: PublishRequest
    run_at: datetime
    status: ScheduledPostStatus = ScheduledPostStatus.SCHEDULED
    report: PublishReport | None = None
    error: str | None = None
    finished_at: datetime | None = None


class PostScheduler:
    """Schedules publish requests for later execution."""

    def __init__(
        self,
        orchestrator: PublishOrchestrator,
        scheduler: AsyncIOScheduler | None = None,
        retention: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """
        Args:
            orchestrator: Publishes posts when they are due
            scheduler: APScheduler instance, created if omitted
            retention: How long finished posts stay queryable
            clock: Current UTC time
        """
        self._orchestrator = orchestrator
        self._scheduler = scheduler or AsyncIOScheduler(timezone=UTC)
        self._retention = retention
        self._clock = clock
        self._posts: dict[str, ScheduledPost] = {}

    @staticmethod
    def is_deferred(request: PublishRequest, now: datetime | None = None) -> bool:
        """Whether the request asks to be published later than now."""
        if request.scheduled_at is None:
            return False
        return request.scheduled_at > (now or datetime.now(UTC))

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Post scheduler started")

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Post scheduler stopped")

    def submit(self, tenant_id: str, request: PublishRequest) -> ScheduledPost:
        """
        Schedule a request for its ``scheduled_at`` time.

        Raises:
            ValueError: If the request has no scheduled time
        """
        if request.scheduled_at is None:
            raise ValueError("Request has no scheduled time")

        self._prune()
        post = ScheduledPost(
            id=str(uuid4()),
            tenant_id=tenant_id,
            request=request,
            run_at=request.scheduled_at,
        )
        self._posts[post.id] = post
        self._scheduler.add_job(
            self.run,
            "date",
            run_date=post.run_at,
            args=[post.id],
            id=post.id,
            misfire_grace_time=None,  # Publish late rather than drop
        )

        logger.info(
            "Post scheduled",
            post_id=post.id,
            tenant_id=tenant_id,
            run_at=post.run_at.isoformat(),
            platforms=list(request.platforms),
        )
        return post

    async def run(self, post_id: str) -> ScheduledPost | None:
        """Publish a scheduled post now. Called by the scheduler when due."""
        post = self._posts.get(post_id)
        if post is None:
            logger.warning("Scheduled post not found", post_id=post_id)
            return None
        if post.status != ScheduledPostStatus.SCHEDULED:
            logger.warning("Scheduled post not runnable", post_id=post_id, status=post.status.value)
            return post

        post.status = ScheduledPostStatus.RUNNING
        try:
            post.report = await self._orchestrator.publish(post.tenant_id, post.request)
            post.status = ScheduledPostStatus.COMPLETED
            logger.info("Scheduled post published", post_id=post_id, summary=post.report.summary)
        except Exception as e:
            post.status = ScheduledPostStatus.FAILED
            post.error = str(e)
            logger.error("Scheduled post failed", post_id=post_id, error=str(e), exc_info=True)
        post.finished_at = self._clock()
        return post

    def get(self, post_id: str) -> ScheduledPost | None:
        self._prune()
        return self._posts.get(post_id)

    def cancel(self, post_id: str) -> bool:
        """Cancel a post that has not started yet."""
        post = self._posts.get(post_id)
        if post is None or post.status != ScheduledPostStatus.SCHEDULED:
            return False
        try:
            self._scheduler.remove_job(post_id)
        except JobLookupError:
            pass  # Already fired
        post.status = ScheduledPostStatus.CANCELLED
        post.finished_at = self._clock()
        logger.info("Scheduled post cancelled", post_id=post_id)
        return True

    def _prune(self) -> None:
        cutoff = self._clock() - self._retention
        expired = [
            post_id
            for post_id, post in self._posts.items()
            if post.status in FINISHED_STATUSES and post.finished_at is not None and post.finished_at <= cutoff
        ]
        for post_id in expired:
            del self._posts[post_id]
        if expired:
            logger.debug("Pruned finished scheduled posts", count=len(expired))
