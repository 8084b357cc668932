"""In-memory credential store.

Suitable for a single process; use SqlAlchemyCredentialStore to share
connections between workers or survive restarts.
"""

import copy

import structlog

from ..domain.credentials import CredentialRecord
from ..domain.ports import CredentialStore

logger = structlog.get_logger()


class InMemoryCredentialStore(CredentialStore):
    """Process-local implementation of CredentialStore keyed by (tenant, platform)."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], CredentialRecord] = {}

    async def get(self, tenant_id: str, platform: str) -> CredentialRecord | None:
        record = self._records.get((tenant_id, platform))
        return copy.deepcopy(record) if record is not None else None

    async def set(self, tenant_id: str, platform: str, record: CredentialRecord) -> None:
        self._records[(tenant_id, platform)] = copy.deepcopy(record)
        logger.info("Credentials stored", tenant_id=tenant_id, platform=platform)

    async def delete(self, tenant_id: str, platform: str) -> None:
        if self._records.pop((tenant_id, platform), None) is not None:
            logger.info("Credentials removed", tenant_id=tenant_id, platform=platform)

    async def list_platforms(self, tenant_id: str) -> list[str]:
        return sorted(platform for tenant, platform in self._records if tenant == tenant_id)
