from dataclasses import dataclass, field
from datetime import datetime

from .errors import ErrorKind


@dataclass(frozen=True)
class MediaReference:
    """Image attached to a post: a public URL and/or a local file path."""

    url: str | None = None
    path: str | None = None
    name: str | None = None
    size: int | None = None

    @property
    def is_uploadable(self) -> bool:
        return bool(self.url or self.path)


@dataclass(frozen=True)
class PublishRequest:
    """Immutable request to publish one piece of content to several platforms."""

    platforms: tuple[str, ...]
    content: str
    media: MediaReference | None = None
    scheduled_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.content or len(self.content.strip()) == 0:
            raise ValueError("Post content cannot be empty")
        # Collapse duplicates, keep request order
        platforms = tuple(dict.fromkeys(p.strip().lower() for p in self.platforms if p))
        if not platforms:
            raise ValueError("At least one platform is required")
        object.__setattr__(self, "platforms", platforms)
        if self.scheduled_at and self.scheduled_at.tzinfo is None:
            raise ValueError("scheduled_at must be timezone-aware")


@dataclass(frozen=True)
class PublishSuccess:
    platform: str
    remote_id: str | None = None
    message: str | None = None
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class PublishFailure:
    platform: str
    error_kind: ErrorKind
    message: str
    details: str | None = None
    invalidate_credentials: bool = False
    success: bool = field(default=False, init=False)


PlatformResult = PublishSuccess | PublishFailure


@dataclass
class PublishReport:
    """Per-platform outcomes of one publish request."""

    results: dict[str, PlatformResult] = field(default_factory=dict)

    @property
    def succeeded(self) -> list[str]:
        return [p for p, r in self.results.items() if r.success]

    @property
    def failed(self) -> list[str]:
        return [p for p, r in self.results.items() if not r.success]

    @property
    def summary(self) -> str:
        return f"Published to {len(self.succeeded)}/{len(self.results)} platforms"
