"""Request and response DTOs for the HTTP surface.

Field names follow the web client's camelCase; required fields are checked
by the routes so missing values produce the documented 400 responses.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..domain.errors import ErrorKind
from ..domain.models import MediaReference, PlatformResult, PublishFailure, PublishReport
from ..domain.platform import Platform


class ImageDTO(BaseModel):
    """Image reference sent by the client. Only public URLs can be published."""

    url: str | None = None
    name: str | None = None
    size: int | None = None

    def to_media(self) -> MediaReference:
        return MediaReference(url=self.url, name=self.name, size=self.size)


class ConnectRequestDTO(BaseModel):
    platform: str | None = None
    credentials: dict[str, Any] | None = None


class PostRequestDTO(BaseModel):
    platform: str | None = None
    content: str | None = None
    image: ImageDTO | None = None


class PublishRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    platforms: list[str] = Field(default_factory=list)
    content: str | None = None
    image: ImageDTO | None = None
    scheduled_at: datetime | None = Field(default=None, alias="scheduledAt")


class LinkedInCallbackDTO(BaseModel):
    code: str | None = None
    state: str | None = None


def result_to_dict(result: PlatformResult) -> dict[str, Any]:
    """Serialize one platform outcome for the client."""
    if isinstance(result, PublishFailure):
        return {
            "success": False,
            "platform": result.platform,
            "error": result.message,
            "details": result.details,
            "code": result.error_kind.value,
            "reauthRequired": result.error_kind.requires_reauth,
        }

    body: dict[str, Any] = {"success": True, "platform": result.platform}
    if result.remote_id is not None:
        id_key = "tweetId" if result.platform == Platform.TWITTER.value else "postId"
        body[id_key] = result.remote_id
    if result.message:
        body["message"] = result.message
    return body


def report_to_dict(report: PublishReport) -> dict[str, Any]:
    return {
        "results": {platform: result_to_dict(r) for platform, r in report.results.items()},
        "summary": report.summary,
    }


# HTTP status per failure kind, applied at the API boundary only
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_CONNECTED: 401,
    ErrorKind.AUTH_FAILED: 401,
    ErrorKind.AUTH_EXPIRED: 401,
    ErrorKind.REFRESH_FAILED: 401,
    ErrorKind.MISSING_CREDENTIAL_FIELDS: 400,
    ErrorKind.PROVIDER_ERROR: 400,
    ErrorKind.UNKNOWN_PLATFORM: 400,
    ErrorKind.MALFORMED_RESPONSE: 500,
    ErrorKind.NETWORK_ERROR: 500,
}
