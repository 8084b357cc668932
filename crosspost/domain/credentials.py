"""
Typed per-platform credentials.

The credential store keeps opaque records (plain dicts) exactly as they were
connected. Adapters parse them into these types at publish time, so a record
with missing fields fails before any remote call is attempted.

Records entered through the connect form use the generic ``field1..field4``
keys; named keys are accepted as well.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar

from .errors import MissingCredentialFieldsError

CredentialRecord = dict[str, Any]


def _pick(record: CredentialRecord, *keys: str) -> str | None:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value:
            return str(value)
    return None


def _require(record: CredentialRecord, fields: dict[str, tuple[str, ...]], platform: str) -> dict[str, str]:
    values = {name: _pick(record, *keys) for name, keys in fields.items()}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise MissingCredentialFieldsError(
            f"Missing {platform} credentials: {', '.join(missing)}",
            details="Reconnect the account and provide all required fields.",
        )
    return values  # type: ignore[return-value]


@dataclass(frozen=True)
class FacebookCredentials:
    page_access_token: str
    page_id: str

    FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "page_access_token": ("page_access_token", "field1"),
        "page_id": ("page_id", "field2"),
    }

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "FacebookCredentials":
        return cls(**_require(record, cls.FIELDS, "Facebook"))


@dataclass(frozen=True)
class InstagramCredentials:
    page_access_token: str
    business_account_id: str

    FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "page_access_token": ("page_access_token", "field1"),
        "business_account_id": ("business_account_id", "field2"),
    }

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "InstagramCredentials":
        return cls(**_require(record, cls.FIELDS, "Instagram"))


@dataclass(frozen=True)
class TwitterCredentials:
    api_key: str
    api_secret: str
    access_token: str
    access_secret: str

    FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "api_key": ("api_key", "field1"),
        "api_secret": ("api_secret", "field2"),
        "access_token": ("access_token", "field3"),
        "access_secret": ("access_secret", "field4"),
    }

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "TwitterCredentials":
        return cls(**_require(record, cls.FIELDS, "Twitter"))


@dataclass(frozen=True)
class LinkedInTokenBundle:
    """OAuth2 token bundle. Replaced as a whole on refresh, never mutated."""

    access_token: str
    remote_user_id: str
    refresh_token: str | None = None
    expires_in: int | None = None
    expires_at: int | None = None  # epoch milliseconds

    @classmethod
    def issue(
        cls,
        access_token: str,
        remote_user_id: str,
        expires_in: int | None,
        issued_at_ms: int,
        refresh_token: str | None = None,
    ) -> "LinkedInTokenBundle":
        """Build a bundle whose absolute expiry is derived from the issue time."""
        expires_at = issued_at_ms + int(expires_in) * 1000 if expires_in is not None else None
        return cls(
            access_token=access_token,
            remote_user_id=remote_user_id,
            refresh_token=refresh_token,
            expires_in=int(expires_in) if expires_in is not None else None,
            expires_at=expires_at,
        )

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "LinkedInTokenBundle":
        values = _require(
            record,
            {
                "access_token": ("access_token", "accessToken"),
                "remote_user_id": ("remote_user_id", "userId"),
            },
            "LinkedIn",
        )
        expires_in = record.get("expires_in", record.get("expiresIn"))
        expires_at = record.get("expires_at", record.get("expiresAt"))
        return cls(
            access_token=values["access_token"],
            remote_user_id=values["remote_user_id"],
            refresh_token=_pick(record, "refresh_token", "refreshToken"),
            expires_in=int(expires_in) if expires_in is not None else None,
            expires_at=int(expires_at) if expires_at is not None else None,
        )

    def to_record(self) -> CredentialRecord:
        return asdict(self)
