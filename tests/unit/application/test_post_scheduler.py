"""Tests for deferred publishing."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from apscheduler.jobstores.base import JobLookupError

from crosspost.application.services import PostScheduler, ScheduledPostStatus
from crosspost.domain.models import PublishReport, PublishRequest, PublishSuccess

TENANT = "tenant-1"


@pytest.fixture
def orchestrator() -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.publish = AsyncMock(
        return_value=PublishReport(results={"threads": PublishSuccess(platform="threads")})
    )
    return orchestrator


@pytest.fixture
def job_scheduler() -> MagicMock:
    return MagicMock()


@pytest.fixture
def scheduler(orchestrator, job_scheduler) -> PostScheduler:
    return PostScheduler(orchestrator, scheduler=job_scheduler)


@pytest.fixture
def future_request() -> PublishRequest:
    return PublishRequest(
        platforms=("threads",),
        content="Later",
        scheduled_at=datetime.now(UTC) + timedelta(hours=1),
    )


class TestIsDeferred:
    def test_without_schedule(self):
        assert not PostScheduler.is_deferred(PublishRequest(platforms=("threads",), content="Now"))

    def test_past_schedule_runs_now(self):
        request = PublishRequest(
            platforms=("threads",),
            content="Late",
            scheduled_at=datetime.now(UTC) - timedelta(minutes=1),
        )
        assert not PostScheduler.is_deferred(request)

    def test_future_schedule(self, future_request):
        assert PostScheduler.is_deferred(future_request)


class TestPostScheduler:
    def test_submit_adds_date_job(self, scheduler, job_scheduler, future_request):
        post = scheduler.submit(TENANT, future_request)

        assert post.status == ScheduledPostStatus.SCHEDULED
        assert post.run_at == future_request.scheduled_at
        assert scheduler.get(post.id) is post

        args, kwargs = job_scheduler.add_job.call_args
        assert args == (scheduler.run, "date")
        assert kwargs["run_date"] == future_request.scheduled_at
        assert kwargs["args"] == [post.id]
        assert kwargs["id"] == post.id

    def test_submit_requires_schedule(self, scheduler):
        with pytest.raises(ValueError, match="no scheduled time"):
            scheduler.submit(TENANT, PublishRequest(platforms=("threads",), content="Now"))

    @pytest.mark.asyncio
    async def test_run_publishes_once(self, scheduler, orchestrator, future_request):
        post = scheduler.submit(TENANT, future_request)

        await scheduler.run(post.id)
        await scheduler.run(post.id)

        orchestrator.publish.assert_awaited_once_with(TENANT, future_request)
        assert post.status == ScheduledPostStatus.COMPLETED
        assert post.report.summary == "Published to 1/1 platforms"

    @pytest.mark.asyncio
    async def test_run_failure_is_recorded(self, scheduler, orchestrator, future_request):
        orchestrator.publish.side_effect = RuntimeError("store unavailable")
        post = scheduler.submit(TENANT, future_request)

        await scheduler.run(post.id)

        assert post.status == ScheduledPostStatus.FAILED
        assert post.error == "store unavailable"

    @pytest.mark.asyncio
    async def test_cancel_before_run(self, scheduler, job_scheduler, orchestrator, future_request):
        post = scheduler.submit(TENANT, future_request)

        assert scheduler.cancel(post.id) is True
        job_scheduler.remove_job.assert_called_once_with(post.id)

        await scheduler.run(post.id)
        assert post.status == ScheduledPostStatus.CANCELLED
        orchestrator.publish.assert_not_awaited()

    def test_cancel_after_job_fired(self, scheduler, job_scheduler, future_request):
        job_scheduler.remove_job.side_effect = JobLookupError("gone")
        post = scheduler.submit(TENANT, future_request)

        assert scheduler.cancel(post.id) is True

    @pytest.mark.asyncio
    async def test_cancel_completed_post(self, scheduler, future_request):
        post = scheduler.submit(TENANT, future_request)
        await scheduler.run(post.id)

        assert scheduler.cancel(post.id) is False

    def test_cancel_unknown_post(self, scheduler):
        assert scheduler.cancel("missing") is False

    def test_start_and_shutdown_follow_running_state(self, scheduler, job_scheduler):
        job_scheduler.running = False
        scheduler.start()
        job_scheduler.start.assert_called_once()

        job_scheduler.running = True
        scheduler.shutdown()
        job_scheduler.shutdown.assert_called_once_with(wait=False)


class TestFinishedPostRetention:
    @pytest.fixture
    def now(self) -> dict:
        return {"at": datetime(2026, 1, 1, 12, 0, tzinfo=UTC)}

    @pytest.fixture
    def scheduler(self, orchestrator, job_scheduler, now) -> PostScheduler:
        return PostScheduler(
            orchestrator,
            scheduler=job_scheduler,
            retention=timedelta(hours=1),
            clock=lambda: now["at"],
        )

    @pytest.mark.asyncio
    async def test_finished_post_is_kept_within_retention(self, scheduler, future_request, now):
        post = scheduler.submit(TENANT, future_request)
        await scheduler.run(post.id)

        assert post.finished_at == now["at"]
        now["at"] += timedelta(minutes=59)
        assert scheduler.get(post.id) is post

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", ["completed", "failed", "cancelled"])
    async def test_finished_post_is_dropped_after_retention(
        self, scheduler, orchestrator, future_request, now, outcome
    ):
        post = scheduler.submit(TENANT, future_request)
        if outcome == "cancelled":
            scheduler.cancel(post.id)
        else:
            if outcome == "failed":
                orchestrator.publish.side_effect = RuntimeError("store unavailable")
            await scheduler.run(post.id)

        now["at"] += timedelta(hours=1)

        assert scheduler.get(post.id) is None

    def test_pending_post_is_never_dropped(self, scheduler, future_request, now):
        post = scheduler.submit(TENANT, future_request)

        now["at"] += timedelta(days=30)

        assert scheduler.get(post.id) is post

    @pytest.mark.asyncio
    async def test_submit_evicts_expired_posts(self, scheduler, future_request, now):
        done = scheduler.submit(TENANT, future_request)
        await scheduler.run(done.id)
        now["at"] += timedelta(hours=2)

        pending = scheduler.submit(TENANT, future_request)

        assert list(scheduler._posts) == [pending.id]

    @pytest.mark.asyncio
    async def test_run_after_eviction_is_a_no_op(self, scheduler, orchestrator, future_request, now):
        post = scheduler.submit(TENANT, future_request)
        scheduler.cancel(post.id)
        now["at"] += timedelta(hours=2)
        scheduler.get(post.id)

        assert await scheduler.run(post.id) is None
        orchestrator.publish.assert_not_awaited()
