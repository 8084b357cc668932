from .connection_service import ConnectionService
from .post_scheduler import PostScheduler, ScheduledPost, ScheduledPostStatus
from .publish_orchestrator import PublishOrchestrator
from .token_lifecycle import TokenLifecycleManager

__all__ = [
    "ConnectionService",
    "PostScheduler",
    "PublishOrchestrator",
    "ScheduledPost",
    "ScheduledPostStatus",
    "TokenLifecycleManager",
]
