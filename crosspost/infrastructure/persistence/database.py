from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .models import Base


class Database:
    """Async engine and session factory for the credential tables."""

    def __init__(self, url: str) -> None:
        options = {"echo": False}
        # SQLite (tests, local runs) has no server connection to go stale
        if not url.startswith("sqlite"):
            options["pool_pre_ping"] = True
        self._engine = create_async_engine(url, **options)
        self._sessions = async_sessionmaker(self._engine, class_=AsyncSession, expire_on_commit=False)

    async def create_tables(self) -> None:
        """Create missing tables. There are no migrations for this schema."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        return self._sessions()

    async def ping(self) -> None:
        """Round-trip a trivial query, raising if the database is unreachable."""
        async with self.session() as session:
            await session.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self._engine.dispose()
