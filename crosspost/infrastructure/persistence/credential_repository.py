import structlog
from sqlalchemy import delete, select

from ...domain.credentials import CredentialRecord
from ...domain.ports import CredentialStore
from .database import Database
from .models import CredentialModel

logger = structlog.get_logger()


class SqlAlchemyCredentialStore(CredentialStore):
    """
    SQLAlchemy implementation of CredentialStore.

    Each operation runs in its own short session so concurrent platform
    flows never share a transaction.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def get(self, tenant_id: str, platform: str) -> CredentialRecord | None:
        async with self._database.session() as session:
            stmt = select(CredentialModel.record).where(
                CredentialModel.tenant_id == tenant_id,
                CredentialModel.platform == platform,
            )
            result = await session.execute(stmt)
            record = result.scalar_one_or_none()
            return dict(record) if record is not None else None

    async def set(self, tenant_id: str, platform: str, record: CredentialRecord) -> None:
        async with self._database.session() as session:
            stmt = select(CredentialModel).where(
                CredentialModel.tenant_id == tenant_id,
                CredentialModel.platform == platform,
            )
            existing = (await session.execute(stmt)).scalar_one_or_none()

            if existing:
                # Whole-record replacement, never a merge
                existing.record = dict(record)
            else:
                session.add(
                    CredentialModel(tenant_id=tenant_id, platform=platform, record=dict(record))
                )
            await session.commit()

        logger.info("Credentials stored", tenant_id=tenant_id, platform=platform)

    async def delete(self, tenant_id: str, platform: str) -> None:
        async with self._database.session() as session:
            result = await session.execute(
                delete(CredentialModel).where(
                    CredentialModel.tenant_id == tenant_id,
                    CredentialModel.platform == platform,
                )
            )
            await session.commit()

        if result.rowcount:
            logger.info("Credentials removed", tenant_id=tenant_id, platform=platform)

    async def list_platforms(self, tenant_id: str) -> list[str]:
        async with self._database.session() as session:
            stmt = (
                select(CredentialModel.platform)
                .where(CredentialModel.tenant_id == tenant_id)
                .order_by(CredentialModel.platform)
            )
            result = await session.execute(stmt)
            return list(result.scalars())
